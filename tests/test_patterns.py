"""
Tests for the Lexical Pattern Bank
==================================
Tests for PatternBank lookups, style profiles, rarity and the
request-scoped word pool in namekit/generators/patterns.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from namekit.errors import InvalidOptions
from namekit.generators.patterns import (
    PatternBank,
    load_pattern_bank,
    get_pattern_tables,
)
from namekit.models import PatternKind


@pytest.fixture
def bank():
    return load_pattern_bank()


class TestLoading:
    """Tests for loading patterns.yaml."""

    def test_bank_is_loaded_once(self):
        """Repeated loads return the same shared instance."""
        assert load_pattern_bank() is load_pattern_bank()

    def test_all_styles_present(self, bank):
        """Every supported style has a profile."""
        assert set(bank.styles()) == {'technical', 'professional', 'modern', 'playful'}

    def test_yaml_booleans_kept_as_words(self, bank):
        """'true' and 'on' stay strings, not YAML booleans."""
        assert 'true' in bank.words('general')
        assert bank.is_stop_word('on')

    def test_from_dict_requires_content(self):
        """An empty mapping is a configuration error."""
        with pytest.raises(ValueError):
            PatternBank.from_dict({})


class TestCategories:
    """Tests for category resolution."""

    @pytest.mark.parametrize("raw", [
        "projectManagement", "project-management", "ProjectManagement", "project management",
    ])
    def test_category_key_normalised(self, bank, raw):
        """Case and separators are ignored."""
        assert bank.has_category(raw)
        assert bank.resolve_category(raw) == "projectManagement"

    def test_unknown_category(self, bank):
        """Unknown categories raise InvalidOptions listing the choices."""
        with pytest.raises(InvalidOptions) as exc:
            bank.resolve_category("underwater-basketweaving")
        assert "crm" in str(exc.value)

    def test_invalid_options_is_value_error(self, bank):
        """InvalidOptions can be caught as ValueError."""
        with pytest.raises(ValueError):
            bank.words("nope")

    def test_has_category_none(self, bank):
        assert not bank.has_category(None)


class TestLookup:
    """Tests for lookup(category, kind)."""

    def test_words(self, bank):
        words = bank.lookup("crm", "words")
        assert words[:3] == ("lead", "contact", "deal")

    def test_words_requires_category(self, bank):
        with pytest.raises(InvalidOptions):
            bank.lookup(None, "words")

    def test_prefix_group(self, bank):
        assert "swift" in bank.lookup("motion", "prefixes")

    def test_all_prefixes_unique(self, bank):
        """'new' is in two groups but listed once."""
        prefixes = bank.lookup(None, "prefixes")
        assert prefixes.count("new") == 1

    def test_suffix_group(self, bank):
        assert "hub" in bank.lookup("tech", "suffixes")

    def test_tiers_keep_display_case(self, bank):
        """Tier words are shown to users as-is."""
        assert bank.lookup("freemium", "tiers")[0] == "Free"
        assert bank.tier_steps() == ("freemium", "professional", "business", "enterprise")

    def test_unknown_kind(self, bank):
        with pytest.raises(InvalidOptions):
            bank.lookup("crm", "synonyms")

    def test_simple_tables(self, bank):
        assert "track" in bank.lookup(None, "actions")
        assert "smart" in bank.lookup(None, "adjectives")
        assert bank.lookup(None, "letters") == ("i", "e", "x", "a", "o", "u", "n")

    def test_capitalized_suffixes(self, bank):
        """Word suffixes are capitalised, morpheme suffixes are not."""
        assert bank.is_capitalized_suffix("hub")
        assert not bank.is_capitalized_suffix("ify")


class TestStyles:
    """Tests for style profiles."""

    def test_heuristic_weight_monotonic(self, bank):
        """Heuristic weight decreases from technical to playful."""
        weights = [bank.style(s).heuristic_weight
                   for s in ("technical", "professional", "modern", "playful")]
        assert weights == sorted(weights, reverse=True)
        assert len(set(weights)) == 4

    def test_modern_profile(self, bank):
        profile = bank.style("modern")
        assert profile.heuristic_weight == pytest.approx(0.5)
        assert profile.pattern_order[0] == PatternKind.COMPOUND
        assert "fresh" in profile.prefix_groups

    def test_unknown_style(self, bank):
        with pytest.raises(InvalidOptions):
            bank.style("baroque")


class TestRarity:
    """Tests for rarity(word)."""

    def test_unknown_word_is_rarest(self, bank):
        assert bank.rarity("zorblax") == 1.0

    def test_common_word_less_rare(self, bank):
        """'cloud' appears in several tables, 'kanban' in one."""
        assert bank.rarity("kanban") == 1.0
        assert bank.rarity("cloud") < bank.rarity("kanban")


class TestWordPool:
    """Tests for the per-call keyword override."""

    def test_keywords_come_first(self, bank):
        pool = bank.word_pool("crm", keywords=["Zorblax", "deal"])
        assert pool.words[0] == "zorblax"
        assert pool.words.count("deal") == 1

    def test_bank_not_mutated(self, bank):
        """Keywords never leak into the shared bank."""
        before = bank.words("crm")
        bank.word_pool("crm", keywords=["zorblax"])
        assert bank.words("crm") == before
        assert "zorblax" not in bank.words("crm")
        assert "zorblax" not in bank.word_pool("crm")

    def test_seed_stop_words_dropped(self, bank):
        pool = bank.word_pool("crm", seeds=["the", "remote"])
        assert "the" not in pool.seeds
        assert "remote" in pool.words

    def test_category_limit(self, bank):
        pool = bank.word_pool("fintech", category_limit=3, positive_limit=2)
        assert pool.words == ("pay", "cash", "money")
        assert len(pool.positive) == 2

    def test_pool_is_frozen(self, bank):
        pool = bank.word_pool("crm")
        with pytest.raises(Exception):
            pool.words = ()


class TestPatternTables:
    """Tests for get_pattern_tables()."""

    def test_returns_copies(self, bank):
        """Mutating the returned tables does not touch the bank."""
        tables = get_pattern_tables()
        tables["categories"]["crm"].append("zorblax")
        assert "zorblax" not in bank.words("crm")

    def test_round_trips_through_from_dict(self, bank):
        copy = PatternBank.from_dict(bank.to_dict())
        assert copy.categories() == bank.categories()
        assert copy.style("playful") == bank.style("playful")

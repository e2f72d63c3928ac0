"""
Tests for the Generation Pipeline
=================================
End-to-end tests for NameGenerator in namekit/pipeline.py: ranking
guarantees, AI degradation, keyword isolation and domain attachment.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from namekit.adapters.ai import CreativeName, NameAI
from namekit.adapters.domains import DomainChecker
from namekit.errors import AdapterUnavailable, InvalidOptions, NoCandidates
from namekit.generators.patterns import PatternBank, load_pattern_bank
from namekit.models import GenerationOptions, PatternKind, Validation
from namekit.pipeline import NameGenerator
from namekit.scoring import rank_key


# =============================================================================
# Fakes
# =============================================================================

class FailingAI(NameAI):
    """Every call fails like an unreachable service."""
    name = "failing"

    def seed_words(self, concept, category=None):
        raise AdapterUnavailable(self.name, "connection refused")

    def validate(self, name, concept=None):
        raise AdapterUnavailable(self.name, "connection refused")

    def generate_text(self, prompt):
        raise AdapterUnavailable(self.name, "connection refused")

    def creative_names(self, concept, count, style):
        raise AdapterUnavailable(self.name, "connection refused")


class ScriptedAI(NameAI):
    """Fixed scores per name, optional seeds and invented names."""
    name = "scripted"

    def __init__(self, scores=None, seeds=(), creative=(), default=0.0):
        self.scores = {k.lower(): v for k, v in (scores or {}).items()}
        self.seeds = list(seeds)
        self.creative = list(creative)
        self.default = default

    def seed_words(self, concept, category=None):
        return list(self.seeds)

    def validate(self, name, concept=None):
        return Validation(self.scores.get(name.lower(), self.default), f"scripted {name}")

    def generate_text(self, prompt):
        return ""

    def creative_names(self, concept, count, style):
        return self.creative[:count]


class SlowAI(ScriptedAI):
    """Validation blocks until released."""

    def __init__(self, release):
        super().__init__(default=1.0)
        self.release = release

    def validate(self, name, concept=None):
        self.release.wait(5)
        return super().validate(name, concept)


class StaticDomains(DomainChecker):
    def lookup(self, domain):
        return domain.endswith(".io")


TINY_BANK = {
    'prefixes': {'motion': ['quick', 'fast']},
    'suffixes': {
        'modern': {'capitalize': False, 'entries': ['ify', 'ly']},
        'tech': {'capitalize': True, 'entries': ['hub']},
    },
    'categories': {'tasks': ['task', 'track'], 'empty': []},
    'positive': ['bloom'],
    'tiers': {'freemium': ['Free'], 'professional': ['Pro']},
    'actions': ['sync'],
    'adjectives': ['smart'],
    'letters': ['i'],
    'stop_words': ['the', 'for'],
    'styles': {
        # AI verdict alone decides the final score
        'modern': {
            'heuristic_weight': 0.0,
            'prefix_groups': ['motion'],
            'suffix_groups': ['modern', 'tech'],
            'pattern_order': ['compound', 'word_suffix', 'prefix_word', 'modified', 'letter_word'],
        },
    },
}


@pytest.fixture
def tiny_bank():
    return PatternBank.from_dict(TINY_BANK)


# =============================================================================
# Tests
# =============================================================================

class TestRankingGuarantees:
    """Output is unique, above threshold, ordered and bounded."""

    @pytest.mark.parametrize("style", ["technical", "professional", "modern", "playful"])
    def test_properties(self, style):
        options = GenerationOptions(category="crm", style=style, count=10,
                                    min_score=0.3, validate=False)
        names = NameGenerator().generate(options)

        assert 0 < len(names) <= 10
        keys = [c.key for c in names]
        assert len(keys) == len(set(keys))
        assert all(c.score >= 0.3 for c in names)
        assert all(rank_key(a) <= rank_key(b) for a, b in zip(names, names[1:]))
        assert all(c.domains is None for c in names)

    def test_repeatable(self):
        options = GenerationOptions(category="saas", count=8, validate=False)
        gen = NameGenerator()
        assert gen.generate(options) == gen.generate(options)

    def test_two_of_five_pass(self, tiny_bank):
        """Only the two names the AI rates 1.0 clear min_score 0.9."""
        ai = ScriptedAI(scores={"TaskBloom": 1.0, "QuickTask": 1.0})
        options = GenerationOptions(category="tasks", style="modern", count=5,
                                    min_score=0.9, validate=True)
        names = NameGenerator(bank=tiny_bank, ai=ai).generate(options)

        assert [c.name for c in names] == ["TaskBloom", "QuickTask"]
        assert all(c.score == 1.0 for c in names)
        assert names[0].reasoning == "scripted TaskBloom"

    def test_all_below_threshold_is_empty(self, tiny_bank):
        options = GenerationOptions(category="tasks", style="modern", count=5,
                                    min_score=0.5, validate=True)
        assert NameGenerator(bank=tiny_bank, ai=ScriptedAI()).generate(options) == []

    def test_pattern_filter(self):
        options = GenerationOptions(category="crm", count=10, min_score=0.0, validate=False,
                                    patterns=["letter_word", "modified"])
        names = NameGenerator().generate(options)
        assert names
        assert {c.pattern for c in names} <= {PatternKind.LETTER_WORD, PatternKind.MODIFIED}

    def test_exclude(self):
        options = GenerationOptions(category="crm", count=10, min_score=0.0, validate=False)
        first = NameGenerator().generate(options)[0]
        again = NameGenerator().generate(options.replace(exclude=[first.name]))
        assert first.key not in {c.key for c in again}


class TestErrors:
    """InvalidOptions and NoCandidates."""

    def test_unknown_category(self):
        with pytest.raises(InvalidOptions):
            NameGenerator().generate(GenerationOptions(category="underwater"))

    @pytest.mark.parametrize("kwargs", [
        {"count": 0},
        {"count": -3},
        {"min_score": 1.5},
        {"style": "baroque"},
        {"patterns": ["anagram"]},
        {"patterns": []},
        {"creative_count": -1},
    ])
    def test_bad_options(self, kwargs):
        with pytest.raises(InvalidOptions):
            GenerationOptions(**kwargs)

    def test_empty_category_has_no_candidates(self, tiny_bank):
        options = GenerationOptions(category="empty", style="modern", validate=False)
        with pytest.raises(NoCandidates):
            NameGenerator(bank=tiny_bank).generate(options)

    def test_invented_only_without_ai(self):
        options = GenerationOptions(category="crm", patterns=["invented"], creative_count=5)
        with pytest.raises(NoCandidates):
            NameGenerator().generate(options)

    def test_prefilter_rejects_everything(self):
        """Raw candidates exist but none pass: empty list, not an error."""
        options = GenerationOptions(category="crm", min_score=1.0, validate=False)
        assert NameGenerator().generate(options) == []


class TestDegradation:
    """The pipeline keeps going when the AI service misbehaves."""

    def test_ai_unavailable_falls_back_to_heuristics(self):
        gen = NameGenerator(ai=FailingAI())
        options = GenerationOptions(category="crm", concept="sales pipeline for agencies",
                                    count=10, min_score=0.3, validate=True, creative_count=3)
        names = gen.generate(options)

        assert names
        for c in names:
            assert c.pattern is not PatternKind.INVENTED
            assert c.score == pytest.approx(gen.scorer.score(c.name, c.source_words, c.pattern))
            assert c.reasoning is None

    def test_validation_deadline(self):
        """Validation still running at the deadline keeps heuristic scores."""
        release = threading.Event()
        gen = NameGenerator(ai=SlowAI(release))
        options = GenerationOptions(category="crm", count=5, min_score=0.0,
                                    validate=True, timeout=0.3)
        try:
            start = time.monotonic()
            names = gen.generate(options)
            elapsed = time.monotonic() - start
        finally:
            release.set()

        assert elapsed < 3.0
        assert len(names) == 5
        for c in names:
            assert c.score == pytest.approx(gen.scorer.score(c.name, c.source_words, c.pattern))


class TestWordSources:
    """Seed words, keywords and invented names."""

    def test_seed_words_used(self):
        ai = ScriptedAI(seeds=["zephyr"], default=0.9)
        options = GenerationOptions(category="crm", concept="breezy sales", count=30,
                                    min_score=0.0, validate=False)
        names = NameGenerator(ai=ai).generate(options)
        assert any("zephyr" in c.source_words for c in names)

    def test_invented_names(self):
        ai = ScriptedAI(creative=[CreativeName("Zentrova", "zen + nova")])
        options = GenerationOptions(category="crm", concept="calm sales", count=5,
                                    min_score=0.0, validate=False, creative_count=1,
                                    patterns=["invented"])
        names = NameGenerator(ai=ai).generate(options)
        assert [c.name for c in names] == ["Zentrova"]
        assert names[0].pattern is PatternKind.INVENTED
        assert names[0].reasoning == "zen + nova"

    def test_concurrent_keywords_isolated(self):
        """Keywords of one call never show up in a concurrent call."""
        gen = NameGenerator()
        bank_words = load_pattern_bank().words("crm")

        def run(keyword):
            options = GenerationOptions(category="crm", count=30, min_score=0.0,
                                        validate=False, keywords=[keyword])
            return keyword, gen.generate(options)

        with ThreadPoolExecutor(max_workers=4) as executor:
            runs = list(executor.map(run, ["zorblax", "quaxel"] * 5))

        for keyword, names in runs:
            other = "quaxel" if keyword == "zorblax" else "zorblax"
            words = {w for c in names for w in c.source_words}
            assert keyword in words
            assert other not in words
            assert not any(other in c.key for c in names)
        assert load_pattern_bank().words("crm") == bank_words


class TestDomains:
    """Optional domain attachment."""

    def test_domains_in_tld_order(self):
        gen = NameGenerator(domain_checker=StaticDomains())
        options = GenerationOptions(category="crm", count=3, validate=False,
                                    include_domains=True, tlds=["com", "io"])
        names = gen.generate(options)
        assert names
        for c in names:
            assert [d.tld for d in c.domains] == ["com", "io"]
            assert [d.available for d in c.domains] == [False, True]

    def test_no_checker_reports_unknown(self):
        options = GenerationOptions(category="crm", count=2, validate=False,
                                    include_domains=True, tlds=["com"])
        names = NameGenerator().generate(options)
        assert all(c.domains[0].available is None for c in names)


class TestValidateName:
    """Tests for validate_name()."""

    def test_heuristic_only(self):
        result = NameGenerator().validate_name("Lumina")
        assert result.valid
        assert result.issues == ()
        assert result.reasoning is None

    def test_with_ai(self):
        gen = NameGenerator(ai=ScriptedAI(scores={"Lumina": 0.0}))
        heuristic = gen.scorer.score("Lumina")
        result = gen.validate_name("Lumina", style="modern")
        assert result.score == pytest.approx(round(heuristic * 0.5, 4))
        assert result.reasoning == "scripted Lumina"

    def test_ai_failure_ignored(self):
        result = NameGenerator(ai=FailingAI()).validate_name("Lumina")
        assert result.score > 0
        assert result.reasoning is None

    def test_too_short_is_invalid(self):
        assert not NameGenerator().validate_name("Qz", min_score=0.0).valid

    def test_empty_name(self):
        with pytest.raises(InvalidOptions):
            NameGenerator().validate_name("  !! ")


class CountingAI(ScriptedAI):
    """Rates everything 1.0 and counts validation calls."""

    def __init__(self):
        super().__init__(default=1.0)
        self.calls = 0
        self.lock = threading.Lock()

    def validate(self, name, concept=None):
        with self.lock:
            self.calls += 1
        return super().validate(name, concept)


class StallingAI(ScriptedAI):
    """Seed words and validation both block until released."""

    def __init__(self, release):
        super().__init__(seeds=["zephyr"], default=1.0)
        self.release = release

    def seed_words(self, concept, category=None):
        self.release.wait(5)
        return super().seed_words(concept, category)

    def validate(self, name, concept=None):
        self.release.wait(5)
        return super().validate(name, concept)


class TestStopRule:
    """Validated generation keeps pulling until count names qualify."""

    def test_validated_call_fills_count(self):
        """Qualifying names deep in the stream are still reached."""
        heuristic_only = NameGenerator().generate(
            GenerationOptions(category="crm", style="modern", count=20,
                              min_score=0.86, validate=False)
        )
        assert len(heuristic_only) == 20

        options = GenerationOptions(category="crm", style="modern", count=20,
                                    min_score=0.93, validate=True, timeout=10.0)
        names = NameGenerator(ai=ScriptedAI(default=1.0)).generate(options)

        assert len(names) == 20
        assert all(c.score >= 0.93 for c in names)
        assert all(c.reasoning == f"scripted {c.name}" for c in names)

    def test_stops_after_first_full_batch(self, tiny_bank):
        ai = CountingAI()
        options = GenerationOptions(category="tasks", style="modern", count=1,
                                    min_score=0.9, validate=True, timeout=10.0)
        names = NameGenerator(bank=tiny_bank, ai=ai).generate(options)

        assert len(names) == 1
        # One batch of count * candidate_pool_factor names
        assert ai.calls == 3


class TestCallBudget:
    """options.timeout bounds the whole call, seed words included."""

    def test_slow_seed_words_share_budget(self):
        release = threading.Event()
        gen = NameGenerator(ai=StallingAI(release))
        options = GenerationOptions(category="crm", concept="breezy sales", count=5,
                                    min_score=0.0, validate=True, timeout=0.3)
        try:
            start = time.monotonic()
            names = gen.generate(options)
            elapsed = time.monotonic() - start
        finally:
            release.set()

        assert elapsed < 1.0
        assert len(names) == 5
        for c in names:
            assert "zephyr" not in c.source_words
            assert c.score == pytest.approx(gen.scorer.score(c.name, c.source_words, c.pattern))


class TestRankNames:
    """Tests for rank_names()."""

    NAMES = ["Cloudify", "DataSync", "Flowbase"]

    def test_blends_ai_scores(self):
        ai = ScriptedAI(scores={"Flowbase": 1.0, "Cloudify": 0.5})
        gen = NameGenerator(ai=ai)
        ranked = gen.rank_names(self.NAMES, concept="file sync", style="modern")

        assert sorted(c.name for c in ranked) == sorted(self.NAMES)
        assert all(rank_key(a) <= rank_key(b) for a, b in zip(ranked, ranked[1:]))
        verdicts = {"Flowbase": 1.0, "Cloudify": 0.5, "DataSync": 0.0}
        for c in ranked:
            assert c.pattern is PatternKind.INVENTED
            assert c.reasoning == f"scripted {c.name}"
            heuristic = gen.scorer.score(c.name, (), PatternKind.INVENTED)
            assert c.score == pytest.approx(0.5 * heuristic + 0.5 * verdicts[c.name])

    def test_duplicates_collapse(self):
        ranked = NameGenerator().rank_names(["Cloudify", "cloudify", " Flowbase "])
        assert [c.key for c in ranked].count("cloudify") == 1
        assert "Flowbase" in {c.name for c in ranked}

    def test_heuristic_only_when_ai_fails(self):
        gen = NameGenerator(ai=FailingAI())
        ranked = gen.rank_names(self.NAMES)
        assert len(ranked) == 3
        for c in ranked:
            assert c.reasoning is None
            assert c.score == pytest.approx(gen.scorer.score(c.name, (), PatternKind.INVENTED))

    def test_empty_list(self):
        assert NameGenerator().rank_names([]) == []

    def test_blank_name(self):
        with pytest.raises(InvalidOptions):
            NameGenerator().rank_names(["Cloudify", " ?? "])

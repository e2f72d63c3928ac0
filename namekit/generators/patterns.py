#!/usr/bin/env python3
"""
Lexical Pattern Bank
====================
Static vocabulary tables used for deterministic name construction:
prefixes and suffixes by group, category words, positive words, tier words,
action verbs, adjectives, brand-style letters and style profiles.

The bank is loaded once per process from configs/patterns.yaml and is
read-only afterwards. Per-call keywords never touch it; they live in a
WordPool built for that call.

Usage:
    from namekit.generators.patterns import load_pattern_bank

    bank = load_pattern_bank()
    bank.lookup("crm", "words")
    pool = bank.word_pool("crm", keywords=["deal"])
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

import yaml

from namekit.errors import InvalidOptions
from namekit.models import PatternKind, STYLES, clean_word, parse_pattern_kind
from namekit.settings import CONFIG_DIR, get_setting

PATTERNS_PATH = CONFIG_DIR / "patterns.yaml"

LOOKUP_KINDS = (
    'words', 'prefixes', 'suffixes', 'positive', 'tiers',
    'actions', 'adjectives', 'letters', 'stop_words',
)


def _category_key(name: str) -> str:
    return re.sub(r'[^a-z0-9]', '', str(name).lower())


def _words(values: Iterable[Any]) -> Tuple[str, ...]:
    """Clean a YAML word list into an ordered, duplicate-free tuple."""
    cleaned = (clean_word(v) for v in values or ())
    return tuple(dict.fromkeys(w for w in cleaned if w))


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class SuffixGroup:
    """Suffixes sharing one capitalisation rule."""
    name: str
    entries: Tuple[str, ...]
    capitalize: bool = False


@dataclass(frozen=True)
class StyleProfile:
    """Per-style weighting adjustments."""
    name: str
    heuristic_weight: float
    prefix_groups: Tuple[str, ...]
    suffix_groups: Tuple[str, ...]
    pattern_order: Tuple[PatternKind, ...]


@dataclass(frozen=True)
class WordPool:
    """
    Request-scoped vocabulary for one generation call.

    words holds caller keywords, AI seed words and the category's bank words
    (in that order); it is discarded when the call ends.
    """
    category: str
    words: Tuple[str, ...]
    positive: Tuple[str, ...]
    keywords: Tuple[str, ...] = ()
    seeds: Tuple[str, ...] = ()

    def __contains__(self, word: str) -> bool:
        return clean_word(word) in self.words


# =============================================================================
# Pattern Bank
# =============================================================================

class PatternBank:
    """Read-only vocabulary tables keyed by category, group and style."""

    def __init__(self,
                 prefixes: Mapping[str, Sequence[str]],
                 suffixes: Mapping[str, SuffixGroup],
                 categories: Mapping[str, Sequence[str]],
                 positive: Sequence[str],
                 tiers: Mapping[str, Sequence[str]],
                 actions: Sequence[str],
                 adjectives: Sequence[str],
                 letters: Sequence[str],
                 stop_words: Sequence[str],
                 styles: Mapping[str, StyleProfile]):
        self._prefixes = MappingProxyType({g: _words(v) for g, v in prefixes.items()})
        self._suffixes = MappingProxyType(dict(suffixes))
        self._categories = MappingProxyType({c: _words(v) for c, v in categories.items()})
        self._category_index = MappingProxyType({_category_key(c): c for c in categories})
        self._positive = _words(positive)
        # Tier words keep their display casing
        self._tiers = MappingProxyType({
            step: tuple(dict.fromkeys(str(w).strip() for w in words if str(w).strip()))
            for step, words in tiers.items()
        })
        self._actions = _words(actions)
        self._adjectives = _words(adjectives)
        self._letters = _words(letters)
        self._stop_words = frozenset(_words(stop_words))
        self._styles = MappingProxyType(dict(styles))
        self._occurrences = self._count_occurrences()
        self._capitalized_suffixes = frozenset(
            s for group in self._suffixes.values() if group.capitalize for s in group.entries
        )

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> PatternBank:
        """Build a bank from the patterns.yaml structure."""
        if not raw:
            raise ValueError("pattern bank config is empty")

        suffixes = {}
        for group, value in (raw.get('suffixes') or {}).items():
            if isinstance(value, Mapping):
                entries = value.get('entries') or []
                capitalize = bool(value.get('capitalize', False))
            else:
                entries, capitalize = value, False
            suffixes[group] = SuffixGroup(group, _words(entries), capitalize)

        styles = {}
        for style, data in (raw.get('styles') or {}).items():
            weight = data.get('heuristic_weight')
            if weight is None:
                raise ValueError(f"style '{style}' missing heuristic_weight in patterns.yaml")
            order = data.get('pattern_order') or [k.value for k in PatternKind
                                                   if k is not PatternKind.INVENTED]
            styles[style] = StyleProfile(
                name=style,
                heuristic_weight=float(weight),
                prefix_groups=tuple(data.get('prefix_groups') or ()),
                suffix_groups=tuple(data.get('suffix_groups') or ()),
                pattern_order=tuple(parse_pattern_kind(k) for k in order),
            )

        return cls(
            prefixes=raw.get('prefixes') or {},
            suffixes=suffixes,
            categories=raw.get('categories') or {},
            positive=raw.get('positive') or (),
            tiers=raw.get('tiers') or {},
            actions=raw.get('actions') or (),
            adjectives=raw.get('adjectives') or (),
            letters=raw.get('letters') or (),
            stop_words=raw.get('stop_words') or (),
            styles=styles,
        )

    def _count_occurrences(self) -> Counter:
        """How many tables each word appears in (drives rarity)."""
        counts = Counter()
        tables = [
            *self._prefixes.values(),
            *(g.entries for g in self._suffixes.values()),
            *self._categories.values(),
            self._positive,
            self._actions,
            self._adjectives,
        ]
        for table in tables:
            counts.update(set(table))
        return counts

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def categories(self) -> Tuple[str, ...]:
        return tuple(self._categories)

    def styles(self) -> Tuple[str, ...]:
        return tuple(self._styles)

    def has_category(self, category: Optional[str]) -> bool:
        return category is not None and _category_key(category) in self._category_index

    def resolve_category(self, category: str) -> str:
        """Map 'project-management' / 'ProjectManagement' onto the bank key."""
        key = self._category_index.get(_category_key(category))
        if key is None:
            available = ', '.join(sorted(self._categories))
            raise InvalidOptions(
                f"Unknown category '{category}'. Available categories: {available}"
            )
        return key

    def words(self, category: str) -> Tuple[str, ...]:
        return self._categories[self.resolve_category(category)]

    def prefixes(self, *groups: str) -> Tuple[str, ...]:
        """Prefixes of the given groups (all groups when none given)."""
        selected = groups or tuple(self._prefixes)
        pool = []
        for group in selected:
            pool.extend(self._prefixes.get(group, ()))
        return tuple(dict.fromkeys(pool))

    def suffixes(self, *groups: str) -> Tuple[str, ...]:
        selected = groups or tuple(self._suffixes)
        pool = []
        for group in selected:
            if group in self._suffixes:
                pool.extend(self._suffixes[group].entries)
        return tuple(dict.fromkeys(pool))

    def prefix_group(self, group: str) -> Tuple[str, ...]:
        return self._prefixes.get(group, ())

    def suffix_group(self, group: str) -> Optional[SuffixGroup]:
        return self._suffixes.get(group)

    def tiers(self, step: Optional[str] = None) -> Tuple[str, ...]:
        if step is None:
            return tuple(w for words in self._tiers.values() for w in words)
        return self._tiers.get(step, ())

    def tier_steps(self) -> Tuple[str, ...]:
        return tuple(self._tiers)

    @property
    def positive(self) -> Tuple[str, ...]:
        return self._positive

    @property
    def actions(self) -> Tuple[str, ...]:
        return self._actions

    @property
    def adjectives(self) -> Tuple[str, ...]:
        return self._adjectives

    @property
    def letters(self) -> Tuple[str, ...]:
        return self._letters

    def is_stop_word(self, word: str) -> bool:
        return clean_word(word) in self._stop_words

    def is_capitalized_suffix(self, suffix: str) -> bool:
        return suffix in self._capitalized_suffixes

    def lookup(self, category: Optional[str], kind: str) -> Tuple[str, ...]:
        """
        Generic table access.

        Args:
            category: Category for 'words', group name for 'prefixes' /
                'suffixes', ladder step for 'tiers'; ignored otherwise.
            kind: One of LOOKUP_KINDS

        Returns:
            Ordered, duplicate-free words
        """
        if kind == 'words':
            if category is None:
                raise InvalidOptions("lookup(kind='words') requires a category")
            return self.words(category)
        if kind == 'prefixes':
            return self.prefixes(*([category] if category else []))
        if kind == 'suffixes':
            return self.suffixes(*([category] if category else []))
        if kind == 'tiers':
            return self.tiers(category)
        if kind == 'stop_words':
            return tuple(sorted(self._stop_words))
        if kind in ('positive', 'actions', 'adjectives', 'letters'):
            return getattr(self, kind)
        raise InvalidOptions(f"Unknown lookup kind '{kind}'. Available: {', '.join(LOOKUP_KINDS)}")

    def style(self, style: str) -> StyleProfile:
        """Weighting adjustments for a style."""
        profile = self._styles.get(style)
        if profile is None:
            available = ', '.join(self._styles) or ', '.join(STYLES)
            raise InvalidOptions(f"Unknown style '{style}'. Available styles: {available}")
        return profile

    def rarity(self, word: str) -> float:
        """1.0 for words outside the bank, 1/n for words found in n tables."""
        n = self._occurrences.get(clean_word(word), 0)
        return 1.0 if n == 0 else 1.0 / n

    # -------------------------------------------------------------------------
    # Request-scoped pools
    # -------------------------------------------------------------------------

    def word_pool(self,
                  category: str,
                  keywords: Sequence[str] = (),
                  seeds: Sequence[str] = (),
                  category_limit: Optional[int] = None,
                  positive_limit: Optional[int] = None) -> WordPool:
        """
        Union caller keywords and seed words into the category's word set
        for one call. The bank itself is left untouched.
        """
        if category_limit is None:
            category_limit = get_setting("generation.category_words_limit")
        if positive_limit is None:
            positive_limit = get_setting("generation.positive_words_limit")
        if category_limit is None or positive_limit is None:
            raise ValueError("generation word pool limits must be set in app.yaml")

        key = self.resolve_category(category)
        keywords = _words(keywords)
        seeds = tuple(w for w in _words(seeds) if w not in self._stop_words)
        words = _words([*keywords, *seeds, *self._categories[key][:category_limit]])
        return WordPool(
            category=key,
            words=words,
            positive=self._positive[:positive_limit],
            keywords=keywords,
            seeds=seeds,
        )

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict copy of every table (safe for callers to mutate)."""
        return {
            'prefixes': {g: list(v) for g, v in self._prefixes.items()},
            'suffixes': {
                g: {'capitalize': s.capitalize, 'entries': list(s.entries)}
                for g, s in self._suffixes.items()
            },
            'categories': {c: list(v) for c, v in self._categories.items()},
            'positive': list(self._positive),
            'tiers': {t: list(v) for t, v in self._tiers.items()},
            'actions': list(self._actions),
            'adjectives': list(self._adjectives),
            'letters': list(self._letters),
            'stop_words': sorted(self._stop_words),
            'styles': {
                s: {
                    'heuristic_weight': p.heuristic_weight,
                    'prefix_groups': list(p.prefix_groups),
                    'suffix_groups': list(p.suffix_groups),
                    'pattern_order': [k.value for k in p.pattern_order],
                }
                for s, p in self._styles.items()
            },
        }


# =============================================================================
# Loader Functions
# =============================================================================

def _load_yaml(path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Pattern bank config not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


@lru_cache(maxsize=1)
def load_pattern_bank() -> PatternBank:
    """Load the process-wide pattern bank (cached)."""
    return PatternBank.from_dict(_load_yaml(PATTERNS_PATH))


def reload_pattern_bank() -> PatternBank:
    """Clear the cache and load patterns.yaml again."""
    load_pattern_bank.cache_clear()
    return load_pattern_bank()


def get_pattern_tables() -> Dict[str, Any]:
    """Raw pattern tables for callers that want data without AI augmentation."""
    return load_pattern_bank().to_dict()


__all__ = [
    'LOOKUP_KINDS',
    'SuffixGroup',
    'StyleProfile',
    'WordPool',
    'PatternBank',
    'load_pattern_bank',
    'reload_pattern_bank',
    'get_pattern_tables',
]

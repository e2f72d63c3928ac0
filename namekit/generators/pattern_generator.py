#!/usr/bin/env python3
"""
Pattern Generator
=================
Combines pattern-bank entries into raw candidate names using fixed
construction patterns:

- prefix_word:  Quick + Task      -> QuickTask
- word_suffix:  Task + ify / hub  -> Taskify, TaskHub
- compound:     Task + Bloom      -> TaskBloom
- modified:     tracker           -> Trackr (deterministic spelling transforms)
- letter_word:  i + Task          -> iTask

Every pattern is a lazy, finite stream. Pairs are walked diagonally so the
first few names of a stream already mix different words, and the streams
of all pattern kinds are interleaved round-robin.
"""

from __future__ import annotations

import re
from itertools import islice, zip_longest
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Sequence, Tuple

from namekit.errors import InvalidOptions
from namekit.generators.patterns import PatternBank, StyleProfile, WordPool
from namekit.models import DETERMINISTIC_KINDS, PatternKind, clean_word
from namekit.settings import get_setting

VOWELS = 'aeiou'
CONSONANT_RE = re.compile(r'[bcdfghjklmnpqrstvwxz]')


class RawCandidate(NamedTuple):
    """An unscored name straight out of a construction pattern."""
    name: str
    pattern: PatternKind
    source_words: Tuple[str, ...]


def capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


# =============================================================================
# Spelling Modifiers
# =============================================================================
# Each modifier is a pure function of its input word: the same word and
# modifier id always give the same output. None means "not applicable".

def _drop_vowel(word: str) -> Optional[str]:
    """Drop the last vowel (flicker -> flickr)."""
    if len(word) <= 3:
        return None
    result = re.sub(r'[aeiou](?=[^aeiou]*$)', '', word, count=1)
    return result if result != word and len(result) >= 3 else None


def _double_letter(word: str) -> Optional[str]:
    """Double a final consonant that follows a vowel (ship -> shipp)."""
    if len(word) < 3 or not CONSONANT_RE.fullmatch(word[-1]) or word[-2] not in VOWELS:
        return None
    return word + word[-1]


def _drop_er(word: str) -> Optional[str]:
    """er -> r at the end of a word (tracker -> trackr)."""
    if len(word) > 4 and word.endswith('er'):
        return word[:-2] + 'r'
    return None


def _s_to_z(word: str) -> Optional[str]:
    if 's' not in word:
        return None
    return word.replace('s', 'z')


def _c_to_k(word: str) -> Optional[str]:
    """Phonetic respelling of hard c (track -> trak, cloud -> kloud)."""
    if 'c' not in word:
        return None
    result = word.replace('ck', 'k').replace('ch', '\0').replace('c', 'k').replace('\0', 'ch')
    return result if result != word else None


def _ph_to_f(word: str) -> Optional[str]:
    if 'ph' not in word:
        return None
    return word.replace('ph', 'f')


def _ight_to_ite(word: str) -> Optional[str]:
    """bright -> brite"""
    if 'ight' not in word:
        return None
    return word.replace('ight', 'ite')


MODIFIERS: Dict[str, Callable[[str], Optional[str]]] = {
    'drop_vowel': _drop_vowel,
    'double_letter': _double_letter,
    'drop_er': _drop_er,
    's_to_z': _s_to_z,
    'c_to_k': _c_to_k,
    'ph_to_f': _ph_to_f,
    'ight_to_ite': _ight_to_ite,
}


def apply_modifier(word: str, modifier_id: str) -> Optional[str]:
    """
    Apply a spelling transform to a word.

    Args:
        word: Base word (case-insensitive)
        modifier_id: Key of MODIFIERS

    Returns:
        Transformed lower-case word, or None when the transform does not
        apply or would leave the word unchanged
    """
    modifier = MODIFIERS.get(modifier_id)
    if modifier is None:
        raise InvalidOptions(f"Unknown modifier '{modifier_id}'. Available: {', '.join(MODIFIERS)}")
    base = clean_word(word)
    if not base:
        return None
    result = modifier(base)
    if not result or result == base:
        return None
    return result


# =============================================================================
# Iteration Helpers
# =============================================================================

def _diagonal(first: Sequence, second: Sequence) -> Iterator[tuple]:
    """Yield (first[i], second[j]) ordered by i + j."""
    n, m = len(first), len(second)
    for total in range(n + m - 1):
        for i in range(max(0, total - m + 1), min(total, n - 1) + 1):
            yield first[i], second[total - i]


def _round_robin(*streams) -> Iterator:
    """Take one item from each stream in turn until all are exhausted."""
    iterators = [iter(s) for s in streams]
    while iterators:
        alive = []
        for it in iterators:
            try:
                yield next(it)
            except StopIteration:
                continue
            alive.append(it)
        iterators = alive


def _interleave(groups: Sequence[Sequence[str]]) -> Tuple[str, ...]:
    merged = (w for column in zip_longest(*groups) for w in column if w)
    return tuple(dict.fromkeys(merged))


# =============================================================================
# Generator
# =============================================================================

class PatternGenerator:
    """
    Builds raw candidates for one call from a word pool and a style profile.

    Usage:
        bank = load_pattern_bank()
        pool = bank.word_pool("crm", keywords=["deal"])
        gen = PatternGenerator(bank, pool, bank.style("modern"))
        for raw in gen.generate():
            print(raw.name, raw.pattern.value)
    """

    def __init__(self,
                 bank: PatternBank,
                 pool: WordPool,
                 style: StyleProfile,
                 kinds: Optional[Sequence[PatternKind]] = None,
                 exclude: Sequence[str] = (),
                 prefixes_per_group: Optional[int] = None,
                 suffixes_per_group: Optional[int] = None,
                 compound_limit: Optional[int] = None):
        self.bank = bank
        self.pool = pool
        self.style = style
        allowed = set(kinds) if kinds is not None else set(DETERMINISTIC_KINDS)
        self.kinds = tuple(k for k in style.pattern_order if k in allowed)
        self.exclude = frozenset(clean_word(n) for n in exclude)

        cfg = get_setting("generation", {}) or {}
        if prefixes_per_group is None:
            prefixes_per_group = cfg.get("prefixes_per_group")
        if suffixes_per_group is None:
            suffixes_per_group = cfg.get("suffixes_per_group")
        if compound_limit is None:
            compound_limit = cfg.get("compound_limit")
        if prefixes_per_group is None or suffixes_per_group is None or compound_limit is None:
            raise ValueError("generation pattern limits must be set in app.yaml")
        self.prefixes_per_group = prefixes_per_group
        self.suffixes_per_group = suffixes_per_group
        self.compound_limit = compound_limit

    # -------------------------------------------------------------------------
    # Per-pattern streams
    # -------------------------------------------------------------------------

    def _style_prefixes(self) -> Tuple[str, ...]:
        return _interleave([
            self.bank.prefix_group(g)[:self.prefixes_per_group]
            for g in self.style.prefix_groups
        ])

    def _style_suffixes(self) -> Tuple[str, ...]:
        groups = []
        for g in self.style.suffix_groups:
            group = self.bank.suffix_group(g)
            if group is not None:
                groups.append(group.entries[:self.suffixes_per_group])
        return _interleave(groups)

    def prefix_word(self) -> Iterator[RawCandidate]:
        for prefix, word in _diagonal(self._style_prefixes(), self.pool.words):
            if prefix == word or word.startswith(prefix):
                continue
            yield RawCandidate(capitalize(prefix) + capitalize(word),
                               PatternKind.PREFIX_WORD, (prefix, word))

    def word_suffix(self) -> Iterator[RawCandidate]:
        for word, suffix in _diagonal(self.pool.words, self._style_suffixes()):
            if suffix == word or word.endswith(suffix):
                continue
            base = word[:-1] if word.endswith('e') and suffix.startswith('i') else word
            tail = capitalize(suffix) if self.bank.is_capitalized_suffix(suffix) else suffix
            yield RawCandidate(capitalize(base) + tail, PatternKind.WORD_SUFFIX, (word, suffix))

    def compound(self) -> Iterator[RawCandidate]:
        limit = self.compound_limit
        partners = tuple(dict.fromkeys([*self.pool.positive[:limit], *self.pool.words[:limit]]))
        for first, second in _diagonal(self.pool.words[:limit], partners):
            if first == second:
                continue
            yield RawCandidate(capitalize(first) + capitalize(second),
                               PatternKind.COMPOUND, (first, second))

    def modified(self) -> Iterator[RawCandidate]:
        for word, modifier_id in _diagonal(self.pool.words, tuple(MODIFIERS)):
            result = apply_modifier(word, modifier_id)
            if result:
                yield RawCandidate(capitalize(result), PatternKind.MODIFIED, (word,))

    def letter_word(self) -> Iterator[RawCandidate]:
        for letter, word in _diagonal(self.bank.letters, self.pool.words):
            if len(word) < 3:
                continue
            yield RawCandidate(letter + capitalize(word), PatternKind.LETTER_WORD, (letter, word))

    # -------------------------------------------------------------------------
    # Combined stream
    # -------------------------------------------------------------------------

    def stream(self, kind: PatternKind) -> Iterator[RawCandidate]:
        builders = {
            PatternKind.PREFIX_WORD: self.prefix_word,
            PatternKind.WORD_SUFFIX: self.word_suffix,
            PatternKind.COMPOUND: self.compound,
            PatternKind.MODIFIED: self.modified,
            PatternKind.LETTER_WORD: self.letter_word,
        }
        builder = builders.get(kind)
        if builder is None:
            return iter(())
        return builder()

    def generate(self) -> Iterator[RawCandidate]:
        """All pattern kinds interleaved, unique by lower-cased name."""
        seen = set()
        for raw in _round_robin(*(self.stream(k) for k in self.kinds)):
            key = raw.name.lower()
            if key in seen or key in self.exclude or len(key) < 3:
                continue
            seen.add(key)
            yield raw

    __iter__ = generate


def take_candidates(generator: PatternGenerator, limit: int) -> List[RawCandidate]:
    """Pull at most limit unique raw candidates; a short list means the space ran out."""
    return list(islice(generator.generate(), max(0, limit)))


__all__ = [
    'RawCandidate',
    'MODIFIERS',
    'apply_modifier',
    'capitalize',
    'PatternGenerator',
    'take_candidates',
]

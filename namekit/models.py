#!/usr/bin/env python3
"""
NameKit Data Model
==================
Immutable records passed between the generator, scorer, adapters and the
naming-suite orchestrator.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace, asdict
from enum import Enum
from typing import Optional, Sequence, Tuple

from namekit.errors import InvalidOptions
from namekit.settings import get_setting


class PatternKind(Enum):
    """How a candidate was constructed."""
    PREFIX_WORD = "prefix_word"    # QuickTask
    WORD_SUFFIX = "word_suffix"    # Taskify, TaskHub
    COMPOUND = "compound"          # TaskBloom
    MODIFIED = "modified"          # Trackr
    LETTER_WORD = "letter_word"    # iTask
    INVENTED = "invented"          # AI-only, no deterministic derivation


# Tie-break order at equal score: rarer constructions first.
PATTERN_PRIORITY = {
    PatternKind.INVENTED: 0,
    PatternKind.COMPOUND: 1,
    PatternKind.PREFIX_WORD: 2,
    PatternKind.WORD_SUFFIX: 3,
    PatternKind.MODIFIED: 4,
    PatternKind.LETTER_WORD: 5,
}

DETERMINISTIC_KINDS = tuple(k for k in PatternKind if k is not PatternKind.INVENTED)

STYLES = ('modern', 'professional', 'playful', 'technical')


def parse_pattern_kind(value) -> PatternKind:
    if isinstance(value, PatternKind):
        return value
    try:
        return PatternKind(str(value).strip().lower())
    except ValueError:
        valid = ', '.join(k.value for k in PatternKind)
        raise InvalidOptions(f"Unknown pattern '{value}'. Available patterns: {valid}") from None


def clean_word(word: str) -> str:
    """Lower-case a word and strip everything but letters and digits."""
    return re.sub(r'[^a-z0-9]', '', str(word).lower())


# =============================================================================
# Candidates
# =============================================================================

@dataclass(frozen=True)
class DomainResult:
    """Availability of one domain; available=None means unknown."""
    domain: str
    tld: str
    available: Optional[bool]
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Candidate:
    """A generated name with its score and provenance."""
    name: str
    pattern: PatternKind
    source_words: Tuple[str, ...] = ()
    score: float = 0.0
    reasoning: Optional[str] = None
    # None = lookup not requested (not "unavailable")
    domains: Optional[Tuple[DomainResult, ...]] = None

    @property
    def key(self) -> str:
        return self.name.lower()

    @property
    def priority(self) -> int:
        return PATTERN_PRIORITY[self.pattern]

    def rescored(self, score: float, reasoning: Optional[str] = None) -> Candidate:
        """Return a copy with a refined score; reasoning is kept unless replaced."""
        score = min(1.0, max(0.0, float(score)))
        return replace(self, score=score, reasoning=reasoning if reasoning else self.reasoning)

    def with_domains(self, domains: Sequence[DomainResult]) -> Candidate:
        return replace(self, domains=tuple(domains))

    def to_dict(self) -> dict:
        data = {
            'name': self.name,
            'pattern': self.pattern.value,
            'source_words': list(self.source_words),
            'score': round(self.score, 4),
            'reasoning': self.reasoning,
        }
        if self.domains is not None:
            data['domains'] = [d.to_dict() for d in self.domains]
        return data


@dataclass(frozen=True)
class Validation:
    """Quality/fit verdict from the AI adapter (score in 0..1)."""
    score: float
    reasoning: Optional[str] = None


@dataclass(frozen=True)
class NameValidation:
    """Result of validate_name()."""
    name: str
    valid: bool
    score: float
    reasoning: Optional[str] = None
    issues: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        data = asdict(self)
        data['issues'] = list(self.issues)
        return data


@dataclass(frozen=True)
class NamingSuite:
    """Primary name + secondary names + tagline for one concept."""
    concept: str
    primary: Candidate
    secondary: Tuple[Candidate, ...]
    tagline: str
    secondary_kind: str = 'features'

    def to_dict(self) -> dict:
        return {
            'concept': self.concept,
            'primary': self.primary.to_dict(),
            'secondary_kind': self.secondary_kind,
            'secondary': [c.to_dict() for c in self.secondary],
            'tagline': self.tagline,
        }


# =============================================================================
# Options
# =============================================================================

@dataclass
class GenerationOptions:
    """
    Options for one generation call. Unset values come from app.yaml.

    The category is checked against the pattern bank by the generator that
    receives these options, since callers may bring their own bank.
    """
    category: Optional[str] = None
    style: Optional[str] = None
    count: Optional[int] = None
    min_score: Optional[float] = None
    keywords: Sequence[str] = ()
    concept: Optional[str] = None
    patterns: Optional[Sequence] = None
    validate: Optional[bool] = None
    creative_count: Optional[int] = None
    include_domains: Optional[bool] = None
    tlds: Optional[Sequence[str]] = None
    timeout: Optional[float] = None
    exclude: Sequence[str] = ()

    def __post_init__(self):
        cfg = get_setting("generation", {}) or {}
        if self.category is None:
            self.category = cfg.get("category")
        if self.style is None:
            self.style = cfg.get("style")
        if self.count is None:
            self.count = cfg.get("count")
        if self.min_score is None:
            self.min_score = cfg.get("min_score")
        if self.validate is None:
            self.validate = cfg.get("validate")
        if self.creative_count is None:
            self.creative_count = cfg.get("creative_count")
        if self.include_domains is None:
            self.include_domains = cfg.get("include_domains")
        if self.tlds is None:
            self.tlds = get_setting("domains.default_tlds")
        if self.timeout is None:
            self.timeout = get_setting("parallel.validation_timeout")

        missing = [
            name for name, value in (
                ("category", self.category),
                ("style", self.style),
                ("count", self.count),
                ("min_score", self.min_score),
                ("validate", self.validate),
                ("creative_count", self.creative_count),
                ("include_domains", self.include_domains),
                ("tlds", self.tlds),
                ("timeout", self.timeout),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"generation settings missing in app.yaml: {', '.join(missing)}")

        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count <= 0:
            raise InvalidOptions(f"count must be a positive integer, got {self.count!r}")
        if isinstance(self.creative_count, bool) or not isinstance(self.creative_count, int) \
                or self.creative_count < 0:
            raise InvalidOptions(f"creative_count must be >= 0, got {self.creative_count!r}")
        try:
            self.min_score = float(self.min_score)
        except (TypeError, ValueError):
            raise InvalidOptions(f"min_score must be a number, got {self.min_score!r}") from None
        if not 0.0 <= self.min_score <= 1.0:
            raise InvalidOptions(f"min_score must be within [0, 1], got {self.min_score}")
        if self.style not in STYLES:
            raise InvalidOptions(
                f"Unknown style '{self.style}'. Available styles: {', '.join(STYLES)}"
            )
        if float(self.timeout) <= 0:
            raise InvalidOptions(f"timeout must be positive, got {self.timeout!r}")
        self.timeout = float(self.timeout)

        if isinstance(self.keywords, str):
            self.keywords = self.keywords.split()
        self.keywords = _unique_words(self.keywords)
        self.exclude = tuple(clean_word(n) for n in self.exclude if clean_word(n))
        self.tlds = tuple(str(t).lstrip('.').lower() for t in self.tlds if str(t).strip('.'))
        if self.include_domains and not self.tlds:
            raise InvalidOptions("include_domains requires at least one TLD")

        if self.patterns is None:
            self.patterns = tuple(PatternKind)
        else:
            self.patterns = tuple(dict.fromkeys(parse_pattern_kind(p) for p in self.patterns))
            if not self.patterns:
                raise InvalidOptions("patterns must name at least one pattern kind")

    def replace(self, **changes) -> GenerationOptions:
        return replace(self, **changes)


def _unique_words(words: Sequence[str]) -> Tuple[str, ...]:
    cleaned = (clean_word(w) for w in words)
    return tuple(dict.fromkeys(w for w in cleaned if w))


__all__ = [
    'PatternKind',
    'PATTERN_PRIORITY',
    'DETERMINISTIC_KINDS',
    'STYLES',
    'parse_pattern_kind',
    'clean_word',
    'DomainResult',
    'Candidate',
    'Validation',
    'NameValidation',
    'NamingSuite',
    'GenerationOptions',
]

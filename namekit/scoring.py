#!/usr/bin/env python3
"""
Scoring and Ranking
===================
Heuristic scoring of candidate names, blending with AI validation scores,
and the final filter/dedupe/sort/truncate step.

Heuristic components (weights in app.yaml scoring.weights):
- length: 5-10 characters ideal, penalised beyond 12
- pronounceability: consonant/vowel alternation, vowel ratio, clusters
- rarity: words found in fewer bank tables score higher
- pattern: construction-pattern priority (invented > compound > ...)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from namekit.generators.patterns import PatternBank, load_pattern_bank
from namekit.models import Candidate, PatternKind, PATTERN_PRIORITY
from namekit.settings import get_setting


def _require_nested(mapping: dict, *keys: str):
    current = mapping
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            raise ValueError(f"app.yaml missing 'scoring.{'.'.join(keys)}'")
        current = current[key]
    return current


@dataclass
class HeuristicScore:
    """Breakdown of a heuristic score (all parts 0-1)."""
    name: str
    total: float
    length: float = 0.0
    pronounceability: float = 0.0
    rarity: float = 0.0
    pattern: float = 0.0
    issues: List[str] = field(default_factory=list)


class NameScorer:
    """Scores names with pattern-derived heuristics."""

    def __init__(self, bank: Optional[PatternBank] = None, scoring: Optional[dict] = None):
        self.bank = bank or load_pattern_bank()
        self.cfg = scoring or get_setting("scoring")
        if not self.cfg:
            raise ValueError("scoring settings must be set in app.yaml")
        self.vowels = _require_nested(self.cfg, "pronounceability", "vowels")

    def _check_length(self, name: str) -> float:
        length_cfg = _require_nested(self.cfg, "length")
        n = len(name)
        if length_cfg["ideal_min"] <= n <= length_cfg["ideal_max"]:
            return length_cfg["ideal"]
        if length_cfg["soft_min"] <= n <= length_cfg["soft_max"]:
            return length_cfg["soft"]
        if n < length_cfg["soft_min"]:
            return length_cfg["too_short"]
        over = n - length_cfg["soft_max"]
        return max(0.0, length_cfg["over_max_base"] - length_cfg["over_max_per_char"] * (over - 1))

    def _calculate_cv_alternation(self, name: str) -> float:
        """Share of adjacent letter pairs that switch between vowel and consonant."""
        letters = [c for c in name.lower() if c.isalpha()]
        if len(letters) < 2:
            return 0.5
        alternations = sum(
            1 for a, b in zip(letters, letters[1:])
            if (a in self.vowels) != (b in self.vowels)
        )
        return alternations / (len(letters) - 1)

    def _longest_consonant_run(self, name: str) -> int:
        runs = re.findall(rf'[^{self.vowels}\W\d_]+', name.lower())
        return max((len(r) for r in runs), default=0)

    def _check_pronounceability(self, name: str) -> float:
        pron = _require_nested(self.cfg, "pronounceability")
        letters = [c for c in name.lower() if c.isalpha()]
        if not letters:
            return 0.0

        vowel_count = sum(1 for c in letters if c in self.vowels)
        ratio = vowel_count / len(letters)
        if pron["vowel_ratio_min"] <= ratio <= pron["vowel_ratio_max"]:
            ratio_score = 1.0
        else:
            ratio_score = pron["vowel_ratio_off_score"]

        score = (self._calculate_cv_alternation(name) * pron["alternation_weight"]
                 + ratio_score * pron["vowel_ratio_weight"])
        if self._longest_consonant_run(name) > pron["max_consonant_run"]:
            score -= pron["cluster_penalty"]
        return min(1.0, max(0.0, score))

    def _check_rarity(self, source_words: Sequence[str]) -> float:
        words = [w for w in source_words if len(w) > 1]
        if not words:
            return 1.0
        return sum(self.bank.rarity(w) for w in words) / len(words)

    def _check_pattern(self, pattern: Optional[PatternKind]) -> float:
        if pattern is None:
            return 0.5
        return float(_require_nested(self.cfg, "pattern_scores", pattern.value))

    def _collect_issues(self, name: str, length: float, pron: float) -> List[str]:
        issues = []
        length_cfg = _require_nested(self.cfg, "length")
        if len(name) > length_cfg["soft_max"]:
            issues.append(f"Longer than {length_cfg['soft_max']} characters")
        elif len(name) < length_cfg["soft_min"]:
            issues.append(f"Shorter than {length_cfg['soft_min']} characters")
        max_run = _require_nested(self.cfg, "pronounceability", "max_consonant_run")
        if self._longest_consonant_run(name) > max_run:
            issues.append("Contains a long consonant cluster")
        if pron < 0.5:
            issues.append("Hard to pronounce")
        if not re.fullmatch(r'[A-Za-z][A-Za-z0-9 ]*', name):
            issues.append("Contains characters other than letters and digits")
        return issues

    def analyze(self,
                name: str,
                source_words: Sequence[str] = (),
                pattern: Optional[PatternKind] = None) -> HeuristicScore:
        """Full heuristic breakdown for a name."""
        weights = _require_nested(self.cfg, "weights")
        length = self._check_length(name)
        pron = self._check_pronounceability(name)
        rarity = self._check_rarity(source_words or (name,))
        pattern_score = self._check_pattern(pattern)
        total = (
            length * weights["length"]
            + pron * weights["pronounceability"]
            + rarity * weights["rarity"]
            + pattern_score * weights["pattern"]
        )
        return HeuristicScore(
            name=name,
            total=min(1.0, max(0.0, total)),
            length=length,
            pronounceability=pron,
            rarity=rarity,
            pattern=pattern_score,
            issues=self._collect_issues(name, length, pron),
        )

    def score(self,
              name: str,
              source_words: Sequence[str] = (),
              pattern: Optional[PatternKind] = None) -> float:
        return self.analyze(name, source_words, pattern).total

    def score_candidate(self, candidate: Candidate) -> Candidate:
        return candidate.rescored(self.score(candidate.name, candidate.source_words,
                                             candidate.pattern))


def combine_scores(heuristic: float, ai_score: Optional[float], heuristic_weight: float) -> float:
    """
    Weighted average of heuristic and AI score.

    heuristic_weight comes from the style profile (technical 0.70,
    professional 0.60, modern 0.50, playful 0.35). Without an AI score the
    heuristic stands alone.
    """
    if ai_score is None:
        return heuristic
    w = min(1.0, max(0.0, heuristic_weight))
    ai_score = min(1.0, max(0.0, ai_score))
    return w * heuristic + (1.0 - w) * ai_score


def rank_key(candidate: Candidate):
    return (-candidate.score, PATTERN_PRIORITY[candidate.pattern], candidate.name.lower())


def rank_candidates(candidates: Iterable[Candidate],
                    count: int,
                    min_score: float) -> List[Candidate]:
    """
    Drop candidates below min_score, keep the best-scoring instance of each
    name (case-insensitive), sort by score then pattern priority, truncate.
    """
    best = {}
    for c in candidates:
        if c.score < min_score:
            continue
        current = best.get(c.key)
        if current is None or rank_key(c) < rank_key(current):
            best[c.key] = c
    return sorted(best.values(), key=rank_key)[:count]


__all__ = [
    'HeuristicScore',
    'NameScorer',
    'combine_scores',
    'rank_key',
    'rank_candidates',
]

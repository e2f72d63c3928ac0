#!/usr/bin/env python3
"""
Name Generation Pipeline
========================
One generation call, start to finish:

    options -> seed words (AI, optional)
            -> request-scoped word pool
            -> pattern stream (+ AI-invented names, optional)
            -> heuristic scores
            -> AI validation fan-out / fan-in, batch by batch (optional)
            -> combined score -> rank (threshold, dedupe, sort, truncate)
            -> domain lookups (optional)

The stream is pulled in batches until options.count candidates clear
min_score or the pattern space runs out. options.timeout is one budget for
the whole call: every adapter call and fan-out gets only what is left of it.

Sub-steps that depend on an external service degrade instead of failing:
no seed words means bank-only generation, a missing validation keeps the
heuristic score, a failed domain lookup is reported as unknown. The call
only fails with InvalidOptions (bad input) or NoCandidates (not a single
raw candidate could be produced).
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from namekit.adapters.ai import CreativeName, NameAI
from namekit.adapters.domains import DomainChecker
from namekit.errors import InvalidOptions, NoCandidates
from namekit.generators.pattern_generator import PatternGenerator
from namekit.generators.patterns import PatternBank, StyleProfile, WordPool, load_pattern_bank
from namekit.models import (
    Candidate,
    DETERMINISTIC_KINDS,
    DomainResult,
    GenerationOptions,
    NameValidation,
    PatternKind,
    Validation,
    clean_word,
)
from namekit.parallel import ParallelConfig, fan_out
from namekit.scoring import NameScorer, combine_scores, rank_candidates
from namekit.settings import require_setting

logger = logging.getLogger(__name__)


class NameGenerator:
    """
    Pattern + AI name generation for one bank and one set of adapters.

    Instances hold no per-call state, so one generator can serve
    concurrent calls.

    Usage:
        gen = NameGenerator(ai=LocalNameAI())
        names = gen.generate(GenerationOptions(category="crm", count=10))
    """

    def __init__(self,
                 bank: Optional[PatternBank] = None,
                 ai: Optional[NameAI] = None,
                 domain_checker: Optional[DomainChecker] = None,
                 scorer: Optional[NameScorer] = None,
                 parallel: Optional[ParallelConfig] = None):
        self.bank = bank or load_pattern_bank()
        self.ai = ai
        self.domain_checker = domain_checker
        self.scorer = scorer or NameScorer(self.bank)
        self.parallel = parallel or ParallelConfig()
        self.pool_factor = require_setting("generation.candidate_pool_factor")
        self.creative_default_score = require_setting("generation.creative_default_score")

    # -------------------------------------------------------------------------
    # Sub-steps
    # -------------------------------------------------------------------------

    def _bounded(self, label: str, call: Callable[[], object], deadline: float):
        """Run one adapter call against the call's deadline; None if it fails or runs late."""
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            logger.warning(f"{label} skipped: time budget spent")
            return None
        results = fan_out(lambda _: call(), [label], max_workers=1,
                          timeout=remaining, label=label)
        return results.get(label)

    def _seed_words(self, options: GenerationOptions, category: str, deadline: float) -> List[str]:
        if self.ai is None or not options.concept:
            return []
        seeds = self._bounded("seed words",
                              lambda: self.ai.seed_words(options.concept, category),
                              deadline)
        if seeds is None:
            logger.warning("Seed words unavailable, using pattern bank only")
            return []
        logger.debug(f"Seed words for '{options.concept}': {seeds}")
        return list(seeds)

    def _heuristic(self, name: str, pattern: PatternKind, source_words: Sequence[str]) -> Candidate:
        candidate = Candidate(name=name, pattern=pattern, source_words=tuple(source_words))
        return self.scorer.score_candidate(candidate)

    def _pattern_stream(self,
                        options: GenerationOptions,
                        pool: WordPool,
                        style: StyleProfile) -> Iterator[Candidate]:
        """Heuristically scored candidates, lazily, in stream order."""
        kinds = [k for k in options.patterns if k in DETERMINISTIC_KINDS]
        if not kinds:
            return
        generator = PatternGenerator(self.bank, pool, style, kinds=kinds, exclude=options.exclude)
        for raw in generator.generate():
            yield self._heuristic(raw.name, raw.pattern, raw.source_words)

    def _creative_candidates(self,
                             options: GenerationOptions,
                             category: str,
                             style: StyleProfile,
                             deadline: float) -> List[Candidate]:
        if (self.ai is None or options.creative_count <= 0
                or PatternKind.INVENTED not in options.patterns):
            return []
        concept = options.concept or ' '.join(options.keywords) or category
        proposals: Optional[List[CreativeName]] = self._bounded(
            "creative names",
            lambda: self.ai.creative_names(concept, options.creative_count, style.name),
            deadline,
        )
        if not proposals:
            return []

        excluded = set(options.exclude)
        candidates = []
        for proposal in proposals[:options.creative_count]:
            if clean_word(proposal.name) in excluded:
                continue
            heuristic = self._heuristic(proposal.name, PatternKind.INVENTED, ())
            # The proposal itself counts as an AI vote until validation refines it
            score = combine_scores(heuristic.score, self.creative_default_score,
                                   style.heuristic_weight)
            candidates.append(heuristic.rescored(score, proposal.meaning))
        return candidates

    def validate_candidates(self,
                            candidates: List[Candidate],
                            options: GenerationOptions,
                            style: StyleProfile,
                            timeout: Optional[float] = None) -> List[Candidate]:
        """
        Fan out AI validation; unfinished or failed calls keep their heuristic score.

        timeout defaults to options.timeout.
        """
        if self.ai is None or not options.validate or not candidates:
            return candidates
        concept = options.concept or options.category
        verdicts: Dict[str, Validation] = fan_out(
            lambda name: self.ai.validate(name, concept),
            [c.name for c in candidates],
            max_workers=self.parallel.ai_workers,
            timeout=options.timeout if timeout is None else timeout,
            label="validation",
        )
        logger.debug(f"Validated {len(verdicts)} of {len(candidates)} candidates")

        refined = []
        for c in candidates:
            verdict = verdicts.get(c.name)
            if verdict is None:
                refined.append(c)
                continue
            heuristic = self.scorer.score(c.name, c.source_words, c.pattern)
            score = combine_scores(heuristic, verdict.score, style.heuristic_weight)
            refined.append(c.rescored(score, verdict.reasoning))
        return refined

    def _attach_domains(self,
                        candidates: List[Candidate],
                        options: GenerationOptions,
                        deadline: float) -> List[Candidate]:
        if not options.include_domains or not candidates:
            return candidates

        def unknown(c: Candidate, reason: str):
            return tuple(DomainResult(f"{c.key}.{tld}", tld, None, reason) for tld in options.tlds)

        remaining = deadline - time.monotonic()
        if self.domain_checker is None:
            logger.warning("Domain lookup requested but no domain checker is configured")
            domains = {c.name: unknown(c, "no domain checker configured") for c in candidates}
        elif remaining <= 0:
            logger.warning("Domain lookup skipped: time budget spent")
            domains = {c.name: unknown(c, "time budget spent") for c in candidates}
        else:
            results = fan_out(
                lambda name: self.domain_checker.check_availability(name, options.tlds),
                [c.name for c in candidates],
                max_workers=self.parallel.domain_workers,
                timeout=remaining,
                label="domain check",
            )
            domains = {
                c.name: results[c.name] if c.name in results else unknown(c, "lookup did not finish")
                for c in candidates
            }
        return [c.with_domains(domains[c.name]) for c in candidates]

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def generate(self, options: Optional[GenerationOptions] = None) -> List[Candidate]:
        """
        Generate, score and rank names.

        Candidates are pulled from the stream count * candidate_pool_factor
        at a time. While the AI is validating, names that could not reach
        min_score even with a perfect AI verdict are skipped without a call.
        Once the time budget is spent, the remaining batches are scored by
        heuristics alone.

        Returns:
            Up to options.count candidates, unique by name (case-insensitive),
            each scoring at least options.min_score, best first. A short or
            empty list means the pattern space ran out first.

        Raises:
            InvalidOptions: Unknown category/style or malformed options
            NoCandidates: No raw candidate could be produced at all
        """
        options = options or GenerationOptions()
        deadline = time.monotonic() + options.timeout
        category = self.bank.resolve_category(options.category)
        style = self.bank.style(options.style)

        seeds = self._seed_words(options, category, deadline)
        pool = self.bank.word_pool(category, keywords=options.keywords, seeds=seeds)
        logger.debug(f"Word pool for {category}: {len(pool.words)} words "
                     f"({len(pool.keywords)} keywords, {len(pool.seeds)} seeds)")

        creative = self._creative_candidates(options, category, style, deadline)
        stream = self._pattern_stream(options, pool, style)
        batch_size = options.count * self.pool_factor

        merged: Dict[str, Candidate] = {}
        batch = list(creative)
        seen = {c.key for c in creative}
        raw_seen = len(creative)
        exhausted = False
        while True:
            validating = bool(options.validate and self.ai is not None
                              and time.monotonic() < deadline)
            while len(batch) < batch_size:
                candidate = next(stream, None)
                if candidate is None:
                    exhausted = True
                    break
                raw_seen += 1
                if candidate.key in seen:
                    continue
                best_case = (combine_scores(candidate.score, 1.0, style.heuristic_weight)
                             if validating else candidate.score)
                if best_case < options.min_score:
                    continue
                seen.add(candidate.key)
                batch.append(candidate)

            if validating:
                batch = self.validate_candidates(batch, options, style,
                                                 timeout=max(0.0, deadline - time.monotonic()))
            for c in batch:
                merged.setdefault(c.key, c)
            batch = []

            qualifying = sum(1 for c in merged.values() if c.score >= options.min_score)
            if exhausted or qualifying >= options.count:
                break

        if raw_seen == 0:
            raise NoCandidates(
                f"No candidates could be generated for category '{category}' "
                f"with patterns {[k.value for k in options.patterns]}"
            )

        ranked = rank_candidates(merged.values(), options.count, options.min_score)
        logger.debug(f"Ranked {len(ranked)} of {len(merged)} candidates "
                     f"(min_score={options.min_score}, {raw_seen} raw)")
        return self._attach_domains(ranked, options, deadline)

    def rank_names(self,
                   names: Sequence[str],
                   concept: Optional[str] = None,
                   style: Optional[str] = None,
                   timeout: Optional[float] = None) -> List[Candidate]:
        """
        Score and order caller-supplied names, best first.

        Every name is kept (duplicates collapse case-insensitively). The
        heuristic score always applies; AI verdicts are blended in for the
        calls that answer within the timeout.

        Raises:
            InvalidOptions: A name with no letters or digits, or bad style/timeout
        """
        options = GenerationOptions(style=style, concept=concept, validate=True, timeout=timeout)
        profile = self.bank.style(options.style)

        candidates: Dict[str, Candidate] = {}
        for name in names:
            if not name or not clean_word(name):
                raise InvalidOptions(f"name must contain at least one letter or digit, got {name!r}")
            candidate = self._heuristic(name.strip(), PatternKind.INVENTED, ())
            candidates.setdefault(candidate.key, candidate)
        if not candidates:
            return []

        scored = self.validate_candidates(list(candidates.values()), options, profile)
        return rank_candidates(scored, len(scored), 0.0)

    def validate_name(self,
                      name: str,
                      concept: Optional[str] = None,
                      style: Optional[str] = None,
                      min_score: Optional[float] = None) -> NameValidation:
        """
        Score a single, caller-supplied name.

        The heuristic verdict always applies; the AI verdict is blended in
        when the adapter answers.
        """
        if not name or not clean_word(name):
            raise InvalidOptions("name must contain at least one letter or digit")
        profile = self.bank.style(style or require_setting("generation.style"))
        if min_score is None:
            min_score = require_setting("generation.min_score")

        analysis = self.scorer.analyze(name.strip())
        score = analysis.total
        reasoning = None
        if self.ai is not None:
            try:
                verdict = self.ai.validate(name.strip(), concept)
                score = combine_scores(score, verdict.score, profile.heuristic_weight)
                reasoning = verdict.reasoning
            except Exception as e:
                logger.warning(f"AI validation unavailable for {name}: {e}")

        return NameValidation(
            name=name.strip(),
            valid=score >= min_score and len(clean_word(name)) >= 3,
            score=round(score, 4),
            reasoning=reasoning,
            issues=tuple(analysis.issues),
        )


__all__ = [
    'NameGenerator',
]

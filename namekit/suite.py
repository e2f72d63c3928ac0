#!/usr/bin/env python3
"""
Naming Suite Orchestrator
=========================
Builds a complete naming suite for one concept: a primary name, feature
or pricing-tier names, and a tagline.

One pass per call through a fixed sequence of stages:

    START -> PRIMARY -> SECONDARY -> TAGLINE -> ASSEMBLE -> DONE

Only the PRIMARY stage can fail the call. Secondary names are topped up
from the tier ladder when the pipeline comes back short, and a failed
tagline is replaced with a template built from the primary name.

Usage:
    builder = NamingSuiteBuilder(NameGenerator(ai=LocalNameAI()))
    suite = builder.build("project management for remote teams",
                          GenerationOptions(category="projectManagement"))
    print(suite.primary.name, suite.tagline)
"""

from __future__ import annotations

import logging
import zlib
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from namekit.errors import InvalidOptions, NoCandidates
from namekit.models import Candidate, GenerationOptions, NamingSuite, PatternKind
from namekit.pipeline import NameGenerator
from namekit.settings import get_setting

logger = logging.getLogger(__name__)

SECONDARY_KINDS = ('features', 'tiers')


class SuiteStage(Enum):
    START = "start"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TAGLINE = "tagline"
    ASSEMBLE = "assemble"
    DONE = "done"


@dataclass
class _SuiteRun:
    """Working state of one build() call."""
    concept: str
    options: GenerationOptions
    secondary_kind: str
    secondary_count: int
    stage: SuiteStage = SuiteStage.START
    primary: Optional[Candidate] = None
    secondary: List[Candidate] = field(default_factory=list)
    tagline: Optional[str] = None
    suite: Optional[NamingSuite] = None


class NamingSuiteBuilder:
    """Sequences generation, secondary naming and tagline writing."""

    def __init__(self, generator: NameGenerator):
        self.generator = generator
        self.bank = generator.bank
        self.ai = generator.ai

        cfg = get_setting("suite", {}) or {}
        self.default_secondary = cfg.get("secondary")
        self.feature_count = cfg.get("feature_count")
        self.tier_count = cfg.get("tier_count")
        self.tagline_templates = tuple(cfg.get("tagline_templates") or ())
        if (self.default_secondary is None or self.feature_count is None
                or self.tier_count is None or not self.tagline_templates):
            raise ValueError("suite settings (secondary, feature_count, tier_count, "
                             "tagline_templates) must be set in app.yaml")

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def _primary(self, run: _SuiteRun) -> SuiteStage:
        ranked = self.generator.generate(run.options)
        if not ranked:
            raise NoCandidates(
                f"No name for '{run.concept}' reached min_score {run.options.min_score}"
            )
        run.primary = ranked[0]
        logger.debug(f"Primary name: {run.primary.name} ({run.primary.score:.2f})")
        return SuiteStage.SECONDARY

    def _secondary(self, run: _SuiteRun) -> SuiteStage:
        if run.secondary_kind == 'tiers':
            run.secondary = self.tier_names(run.primary, run.secondary_count)
        else:
            run.secondary = self.feature_names(run.primary, run.concept,
                                               run.options, run.secondary_count)
        return SuiteStage.TAGLINE

    def _tagline(self, run: _SuiteRun) -> SuiteStage:
        run.tagline = self.tagline(run.primary.name, run.concept)
        return SuiteStage.ASSEMBLE

    def _assemble(self, run: _SuiteRun) -> SuiteStage:
        run.suite = NamingSuite(
            concept=run.concept,
            primary=run.primary,
            secondary=tuple(run.secondary),
            tagline=run.tagline,
            secondary_kind=run.secondary_kind,
        )
        return SuiteStage.DONE

    # -------------------------------------------------------------------------
    # Secondary names
    # -------------------------------------------------------------------------

    def _tier_candidate(self, primary: Candidate, word: str) -> Candidate:
        name = f"{primary.name} {word}"
        candidate = Candidate(name=name, pattern=PatternKind.COMPOUND,
                              source_words=(primary.key, word.lower()))
        return self.generator.scorer.score_candidate(candidate)

    def tier_names(self,
                   primary: Candidate,
                   count: int,
                   exclude: Optional[set] = None) -> List[Candidate]:
        """
        "<Primary> <Tier>" names walking the pricing ladder in order
        (free -> enterprise), best-scoring word of each step first. Past
        the end of the ladder the walk restarts with each step's next word.
        """
        exclude = set(exclude or ())
        per_step = []
        for step in self.bank.tier_steps():
            scored = [self._tier_candidate(primary, w) for w in self.bank.tiers(step)]
            scored.sort(key=lambda c: -c.score)
            per_step.append(scored)

        names = []
        depth = max((len(s) for s in per_step), default=0)
        for i in range(depth):
            for step in per_step:
                if i >= len(step) or step[i].key in exclude:
                    continue
                exclude.add(step[i].key)
                names.append(step[i])
                if len(names) >= count:
                    return names
        return names

    def feature_names(self,
                      primary: Candidate,
                      concept: str,
                      options: GenerationOptions,
                      count: int) -> List[Candidate]:
        """
        Feature names from the same pipeline, seeded with the primary name
        and action/descriptive words; topped up with tier names when short.
        """
        feature_options = options.replace(
            concept=f"{primary.name} {concept}",
            keywords=(*options.keywords, *self.bank.actions[:5], *self.bank.adjectives[:5]),
            exclude=(*options.exclude, primary.name),
            count=count,
            creative_count=0,
            include_domains=False,
        )
        try:
            features = self.generator.generate(feature_options)
        except NoCandidates as e:
            logger.warning(f"No feature names generated: {e}")
            features = []

        if len(features) < count:
            logger.debug(f"Topping up {count - len(features)} feature names with tiers")
            taken = {primary.key, *(f.key for f in features)}
            features.extend(self.tier_names(primary, count - len(features), exclude=taken))
        return features[:count]

    # -------------------------------------------------------------------------
    # Tagline
    # -------------------------------------------------------------------------

    def template_tagline(self, name: str, concept: str) -> str:
        """Placeholder tagline; the template is picked from the name, not at random."""
        index = zlib.crc32(name.lower().encode('utf-8')) % len(self.tagline_templates)
        return self.tagline_templates[index].format(name=name, concept=concept.strip())

    def tagline(self, name: str, concept: str) -> str:
        text = ""
        if self.ai is not None:
            prompt = (f'Write one short, catchy tagline for a product named "{name}": '
                      f'{concept}. Reply with the tagline only.')
            try:
                text = self.ai.generate_text(prompt) or ""
            except Exception as e:
                logger.warning(f"Tagline generation failed, using template: {e}")
                text = ""
        lines = [l.strip().strip('"') for l in text.splitlines() if l.strip()]
        if lines and lines[0]:
            return lines[0]
        return self.template_tagline(name, concept)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def build(self,
              concept: str,
              options: Optional[GenerationOptions] = None,
              secondary: Optional[str] = None,
              secondary_count: Optional[int] = None) -> NamingSuite:
        """
        Produce a complete NamingSuite for a concept.

        Args:
            concept: Free-text product idea
            options: Generation options for the primary name
            secondary: 'features' or 'tiers'
            secondary_count: Number of secondary names (default per kind)

        Raises:
            InvalidOptions: Bad options, concept or secondary settings
            NoCandidates: No primary name could be produced
        """
        if not concept or not concept.strip():
            raise InvalidOptions("concept must not be empty")
        concept = concept.strip()
        secondary = secondary or self.default_secondary
        if secondary not in SECONDARY_KINDS:
            raise InvalidOptions(f"secondary must be one of {', '.join(SECONDARY_KINDS)}, "
                                 f"got '{secondary}'")
        if secondary_count is None:
            secondary_count = self.tier_count if secondary == 'tiers' else self.feature_count
        max_secondary = len(self.bank.tiers())
        if isinstance(secondary_count, bool) or not isinstance(secondary_count, int) \
                or not 0 < secondary_count <= max_secondary:
            raise InvalidOptions(f"secondary_count must be between 1 and {max_secondary}, "
                                 f"got {secondary_count!r}")

        options = options or GenerationOptions()
        if not options.concept:
            options = options.replace(concept=concept)

        run = _SuiteRun(concept=concept, options=options,
                        secondary_kind=secondary, secondary_count=secondary_count)
        transitions = {
            SuiteStage.START: lambda r: SuiteStage.PRIMARY,
            SuiteStage.PRIMARY: self._primary,
            SuiteStage.SECONDARY: self._secondary,
            SuiteStage.TAGLINE: self._tagline,
            SuiteStage.ASSEMBLE: self._assemble,
        }
        while run.stage is not SuiteStage.DONE:
            logger.debug(f"Suite stage: {run.stage.value}")
            run.stage = transitions[run.stage](run)
        return run.suite


__all__ = [
    'SuiteStage',
    'SECONDARY_KINDS',
    'NamingSuiteBuilder',
]

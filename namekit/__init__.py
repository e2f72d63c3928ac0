#!/usr/bin/env python3
"""
NameKit - Startup & Product Name Generator
==========================================

Pattern-based name generation with AI seed words and validation,
heuristic scoring and ranking, domain hints and complete naming suites
(primary name + feature/tier names + tagline).

Quick Start
-----------
    from namekit import NameKit

    kit = NameKit()

    # Ranked names for a category
    names = kit.generate(category="crm", count=10, keywords=["deal"])

    # Primary name, features and tagline for a concept
    suite = kit.suite("project management for remote teams",
                      category="projectManagement", style="modern")

Modules
-------
    namekit.generators - Pattern bank and construction patterns
    namekit.scoring    - Heuristic scoring and ranking
    namekit.adapters   - AI (Anthropic / local) and domain availability
    namekit.pipeline   - One generation call, end to end
    namekit.suite      - Naming suite orchestration

CLI Usage
---------
    python -m namekit generate --category saas -n 10
    python -m namekit suite "AI-powered customer support" --category support
    python -m namekit validate Trackr
    python -m namekit rank Cloudify DataSync Flowbase
"""

__version__ = "0.1.0"
__author__ = "NameKit"

from typing import Any, Dict, List, Optional, Sequence, Tuple

# =============================================================================
# Submodule Imports
# =============================================================================

from . import generators
from . import adapters
from . import config

from .errors import (
    NameKitError,
    InvalidOptions,
    NoCandidates,
    AdapterUnavailable,
)
from .models import (
    PatternKind,
    Candidate,
    DomainResult,
    GenerationOptions,
    NameValidation,
    NamingSuite,
)
from .generators import (
    PatternBank,
    PatternGenerator,
    load_pattern_bank,
    get_pattern_tables,
    apply_modifier,
)
from .scoring import NameScorer, combine_scores, rank_candidates
from .adapters import (
    NameAI,
    AnthropicNameAI,
    LocalNameAI,
    get_name_ai,
    DomainChecker,
    DnsDomainChecker,
    suggest_domains,
)
from .pipeline import NameGenerator
from .suite import NamingSuiteBuilder, SuiteStage
from .config import Config, get_config


def _options(options: Optional[GenerationOptions], overrides: Dict[str, Any]) -> GenerationOptions:
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if options is None:
        return GenerationOptions(**overrides)
    if isinstance(options, dict):
        return GenerationOptions(**{**options, **overrides})
    return options.replace(**overrides) if overrides else options


# =============================================================================
# NameKit Main Class
# =============================================================================

class NameKit:
    """
    Main interface for name generation, validation and naming suites.

    Wires the configured AI strategy (Anthropic when ANTHROPIC_API_KEY is
    set, local otherwise) and the DNS domain checker around the shared,
    read-only pattern bank.

    Examples
    --------
        >>> kit = NameKit(offline=True)
        >>> for c in kit.generate(category="fintech", count=5):
        ...     print(f"{c.name}: {c.score:.2f} ({c.pattern.value})")
    """

    def __init__(self,
                 ai: Optional[NameAI] = None,
                 domain_checker: Optional[DomainChecker] = None,
                 bank: Optional[PatternBank] = None,
                 offline: bool = False):
        """
        Parameters
        ----------
        ai : NameAI, optional
            AI strategy. Defaults to get_name_ai().
        domain_checker : DomainChecker, optional
            Defaults to DnsDomainChecker().
        bank : PatternBank, optional
            Vocabulary. Defaults to the process-wide bank.
        offline : bool
            Force the local AI strategy.
        """
        self._config = get_config()
        self._bank = bank or load_pattern_bank()
        self._ai = ai or get_name_ai(self._config, offline=offline, bank=self._bank)
        self._domains = domain_checker or DnsDomainChecker()
        self._generator = NameGenerator(self._bank, self._ai, self._domains)
        self._suite = NamingSuiteBuilder(self._generator)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def config(self) -> Config:
        return self._config

    @property
    def bank(self) -> PatternBank:
        return self._bank

    @property
    def ai(self) -> NameAI:
        return self._ai

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def generate(self, options: Optional[GenerationOptions] = None, **kwargs) -> List[Candidate]:
        """
        Generate ranked candidate names.

        Parameters
        ----------
        options : GenerationOptions or dict, optional
        **kwargs
            GenerationOptions fields overriding options

        Returns
        -------
        list of Candidate
            Unique names, best first, all at or above min_score

        Raises
        ------
        InvalidOptions
            Malformed options or unknown category/style
        NoCandidates
            No candidate could be produced at all
        """
        return self._generator.generate(_options(options, kwargs))

    def suite(self,
              concept: str,
              options: Optional[GenerationOptions] = None,
              secondary: Optional[str] = None,
              secondary_count: Optional[int] = None,
              **kwargs) -> NamingSuite:
        """Primary name, secondary names ('features' or 'tiers') and tagline."""
        return self._suite.build(concept, _options(options, kwargs),
                                 secondary=secondary, secondary_count=secondary_count)

    def validate(self, name: str, concept: Optional[str] = None,
                 style: Optional[str] = None) -> NameValidation:
        """Heuristic + AI verdict for one name."""
        return self._generator.validate_name(name, concept=concept, style=style)

    def rank(self, names: Sequence[str], concept: Optional[str] = None,
             style: Optional[str] = None) -> List[Candidate]:
        """
        Score and order caller-supplied names.

        Parameters
        ----------
        names : sequence of str
            Names to rank; duplicates collapse case-insensitively
        concept : str, optional
            Product idea given to the AI as context
        style : str, optional
            Naming style whose heuristic weight blends the scores

        Returns
        -------
        list of Candidate
            Every distinct name, best first, with score and reasoning
        """
        return self._generator.rank_names(names, concept=concept, style=style)

    def domains(self, name: str, tlds: Optional[Sequence[str]] = None) -> Tuple[DomainResult, ...]:
        """Per-TLD availability hints, in request order."""
        return self._domains.check_availability(name, tlds)

    def patterns(self) -> Dict[str, Any]:
        """Raw pattern tables (copies)."""
        return self._bank.to_dict()


# =============================================================================
# Module-level Functions
# =============================================================================

_default_kit = None

def get_kit() -> NameKit:
    """Get the default NameKit instance."""
    global _default_kit
    if _default_kit is None:
        _default_kit = NameKit()
    return _default_kit


def generate_names(options: Optional[GenerationOptions] = None, **kwargs) -> List[Candidate]:
    """Ranked candidate names using the default kit."""
    return get_kit().generate(options, **kwargs)


def generate_naming_suite(concept: str,
                          options: Optional[GenerationOptions] = None,
                          **kwargs) -> NamingSuite:
    """Complete naming suite for a concept using the default kit."""
    return get_kit().suite(concept, options, **kwargs)


def validate_name(name: str, concept: Optional[str] = None) -> NameValidation:
    """Validate a single name using the default kit."""
    return get_kit().validate(name, concept=concept)


def rank_names(names: Sequence[str], concept: Optional[str] = None,
               style: Optional[str] = None) -> List[Candidate]:
    """Rank caller-supplied names using the default kit."""
    return get_kit().rank(names, concept=concept, style=style)


def check_domains(name: str, tlds: Optional[Sequence[str]] = None) -> Tuple[DomainResult, ...]:
    """Domain availability hints using the default kit."""
    return get_kit().domains(name, tlds)


__all__ = [
    # Main class
    'NameKit',
    'get_kit',
    # Functions
    'generate_names',
    'generate_naming_suite',
    'validate_name',
    'rank_names',
    'check_domains',
    'get_pattern_tables',
    'suggest_domains',
    'apply_modifier',
    # Models
    'PatternKind',
    'Candidate',
    'DomainResult',
    'GenerationOptions',
    'NameValidation',
    'NamingSuite',
    # Components
    'PatternBank',
    'PatternGenerator',
    'load_pattern_bank',
    'NameScorer',
    'combine_scores',
    'rank_candidates',
    'NameGenerator',
    'NamingSuiteBuilder',
    'SuiteStage',
    'NameAI',
    'AnthropicNameAI',
    'LocalNameAI',
    'get_name_ai',
    'DomainChecker',
    'DnsDomainChecker',
    'Config',
    'get_config',
    # Errors
    'NameKitError',
    'InvalidOptions',
    'NoCandidates',
    'AdapterUnavailable',
]

#!/usr/bin/env python3
"""
Name Generators
===============
- patterns: the read-only lexical pattern bank
- pattern_generator: deterministic construction patterns over a word pool
"""

from .patterns import (
    LOOKUP_KINDS,
    SuffixGroup,
    StyleProfile,
    WordPool,
    PatternBank,
    load_pattern_bank,
    reload_pattern_bank,
    get_pattern_tables,
)
from .pattern_generator import (
    RawCandidate,
    MODIFIERS,
    apply_modifier,
    capitalize,
    PatternGenerator,
    take_candidates,
)

__all__ = [
    'LOOKUP_KINDS',
    'SuffixGroup',
    'StyleProfile',
    'WordPool',
    'PatternBank',
    'load_pattern_bank',
    'reload_pattern_bank',
    'get_pattern_tables',
    'RawCandidate',
    'MODIFIERS',
    'apply_modifier',
    'capitalize',
    'PatternGenerator',
    'take_candidates',
]

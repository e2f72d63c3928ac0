#!/usr/bin/env python3
"""
NameKit Errors
==============
Only InvalidOptions and NoCandidates reach callers. AdapterUnavailable is
raised by adapters and recovered inside the pipeline by degrading output.
"""


class NameKitError(Exception):
    """Base class for all NameKit errors."""


class InvalidOptions(NameKitError, ValueError):
    """Generation options are malformed (bad count, unknown category, ...)."""


class NoCandidates(NameKitError):
    """Every generation source failed and not a single candidate was produced."""


class AdapterUnavailable(NameKitError):
    """An external collaborator (AI or domain service) failed or timed out."""

    def __init__(self, adapter: str, reason: str):
        self.adapter = adapter
        self.reason = reason
        super().__init__(f"{adapter} unavailable: {reason}")


__all__ = [
    'NameKitError',
    'InvalidOptions',
    'NoCandidates',
    'AdapterUnavailable',
]

#!/usr/bin/env python3
"""
Domain Availability Adapter
===========================
Availability hints for a candidate name across a set of TLDs.

Each TLD is looked up independently and in parallel. A TLD whose lookup
fails or runs past the deadline comes back with available=None and the
error text; it is never dropped and never raised.

Usage:
    checker = DnsDomainChecker()
    for result in checker.check_availability("voltix", ["com", "io"]):
        print(result.domain, result.available)
"""

from __future__ import annotations

import logging
import socket
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from namekit.models import DomainResult
from namekit.parallel import ParallelConfig, fan_out
from namekit.settings import get_setting

logger = logging.getLogger(__name__)

# getaddrinfo errors that mean "no such name"
_NXDOMAIN_ERRORS = {
    code for code in (
        getattr(socket, "EAI_NONAME", None),
        getattr(socket, "EAI_NODATA", None),
    )
    if code is not None
}


def domain_label(name: str) -> str:
    """Clean a brand name for domain use."""
    return ''.join(c for c in name.lower() if c.isalnum() or c == '-')


def normalize_tlds(tlds: Optional[Sequence[str]]) -> Tuple[str, ...]:
    if tlds is None:
        tlds = get_setting("domains.default_tlds")
    if not tlds:
        raise ValueError("domains.default_tlds must be set in app.yaml")
    return tuple(str(t).strip().lstrip('.').lower() for t in tlds if str(t).strip('. '))


class DomainChecker(ABC):
    """
    Base class for domain availability services.

    Subclasses implement lookup() for a single fully qualified domain.
    """

    name = "domains"

    def __init__(self,
                 max_workers: Optional[int] = None,
                 timeout: Optional[float] = None):
        parallel = ParallelConfig(domain_workers=max_workers, domain_timeout=timeout)
        self.max_workers = parallel.domain_workers
        self.timeout = parallel.domain_timeout

    @abstractmethod
    def lookup(self, domain: str) -> Optional[bool]:
        """
        True if the domain looks available, False if taken, None if unknown.
        May raise; the error is recorded on that TLD's result.
        """

    def _check_single_domain(self, label: str, tld: str) -> DomainResult:
        domain = f"{label}.{tld}"
        try:
            return DomainResult(domain=domain, tld=tld, available=self.lookup(domain))
        except Exception as e:
            logger.warning(f"Domain lookup failed for {domain}: {e}")
            return DomainResult(domain=domain, tld=tld, available=None, error=str(e))

    def check_availability(self,
                           name: str,
                           tlds: Optional[Sequence[str]] = None) -> Tuple[DomainResult, ...]:
        """
        Check name against every TLD.

        Returns:
            One DomainResult per requested TLD, in request order
        """
        label = domain_label(name)
        tlds = normalize_tlds(tlds)
        results = fan_out(
            lambda tld: self._check_single_domain(label, tld),
            tlds,
            max_workers=self.max_workers,
            timeout=self.timeout,
            label=f"domain lookup ({label})",
        )
        return tuple(
            results.get(tld) or DomainResult(
                domain=f"{label}.{tld}",
                tld=tld,
                available=None,
                error=f"lookup did not finish within {self.timeout}s",
            )
            for tld in tlds
        )


class DnsDomainChecker(DomainChecker):
    """
    DNS-based availability hint.

    A domain that resolves is taken; NXDOMAIN suggests it is available.
    DNS cannot tell "registered but unused" from "available", so this is a
    hint, not a registrar answer.
    """

    name = "dns"

    def lookup(self, domain: str) -> Optional[bool]:
        try:
            socket.getaddrinfo(domain, None)
            return False
        except socket.gaierror as e:
            if e.errno in _NXDOMAIN_ERRORS:
                return True
            raise


def suggest_domains(name: str,
                    prefixes: Optional[Sequence[str]] = None,
                    suffixes: Optional[Sequence[str]] = None,
                    tld: str = "com") -> List[str]:
    """
    Hint variants for when the bare domain is taken:
    get<name>.com, try<name>.com, use<name>.com, <name>hq.com
    """
    if prefixes is None:
        prefixes = get_setting("domains.hint_prefixes", []) or []
    if suffixes is None:
        suffixes = get_setting("domains.hint_suffixes", []) or []
    label = domain_label(name)
    if not label:
        return []
    variants = [f"{p}{label}.{tld}" for p in prefixes]
    variants.extend(f"{label}{s}.{tld}" for s in suffixes)
    return variants


# Singleton
_default_checker = None

def get_domain_checker() -> DomainChecker:
    """Get default checker instance"""
    global _default_checker
    if _default_checker is None:
        _default_checker = DnsDomainChecker()
    return _default_checker


def check_domains(name: str, tlds: Optional[Sequence[str]] = None) -> Tuple[DomainResult, ...]:
    """Quick check for a single name."""
    return get_domain_checker().check_availability(name, tlds)


__all__ = [
    'DomainChecker',
    'DnsDomainChecker',
    'domain_label',
    'normalize_tlds',
    'suggest_domains',
    'get_domain_checker',
    'check_domains',
]

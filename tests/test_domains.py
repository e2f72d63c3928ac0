"""
Tests for Domain Availability
=============================
Tests for DomainChecker fan-out, the DNS strategy and hint variants in
namekit/adapters/domains.py.
"""

import socket
import threading
from unittest.mock import patch

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from namekit.adapters.domains import (
    DnsDomainChecker,
    DomainChecker,
    domain_label,
    normalize_tlds,
    suggest_domains,
)


class MapChecker(DomainChecker):
    """Answers from a dict; an Exception value is raised."""

    def __init__(self, answers, **kwargs):
        super().__init__(**kwargs)
        self.answers = answers

    def lookup(self, domain):
        answer = self.answers.get(domain)
        if isinstance(answer, Exception):
            raise answer
        return answer


class TestCheckAvailability:
    """Tests for per-TLD fan-out."""

    def test_partial_failure_keeps_order(self):
        """One failing TLD is unknown; the others still report."""
        checker = MapChecker({
            "voltix.com": False,
            "voltix.io": OSError("registry timeout"),
            "voltix.ai": True,
        })
        results = checker.check_availability("Voltix", ["com", "io", "ai", "co"])

        assert [r.tld for r in results] == ["com", "io", "ai", "co"]
        assert [r.domain for r in results] == ["voltix.com", "voltix.io", "voltix.ai", "voltix.co"]
        assert results[0].available is False
        assert results[1].available is None
        assert "registry timeout" in results[1].error
        assert results[2].available is True
        assert results[3].available is None
        assert results[3].error is None

    def test_slow_tld_reported_unknown(self):
        release = threading.Event()

        class SlowChecker(DomainChecker):
            def lookup(self, domain):
                if domain.endswith(".io"):
                    release.wait(5)
                return True

        try:
            results = SlowChecker(timeout=0.2).check_availability("voltix", ["com", "io"])
        finally:
            release.set()

        assert results[0].available is True
        assert results[1].available is None
        assert "did not finish" in results[1].error

    def test_default_tlds(self):
        results = MapChecker({}).check_availability("voltix")
        assert [r.tld for r in results] == ["com", "io", "co", "ai", "app"]

    def test_tlds_normalised(self):
        assert normalize_tlds([".COM", "io"]) == ("com", "io")

    def test_label_cleaned(self):
        assert domain_label("Task Bloom!") == "taskbloom"
        results = MapChecker({}).check_availability("Task Bloom", ["com"])
        assert results[0].domain == "taskbloom.com"


class TestDnsDomainChecker:
    """Tests for the DNS lookup strategy (resolver mocked)."""

    def test_resolving_domain_is_taken(self):
        with patch("socket.getaddrinfo", return_value=[("info",)]):
            assert DnsDomainChecker().lookup("google.com") is False

    def test_nxdomain_is_available(self):
        error = socket.gaierror(socket.EAI_NONAME, "Name or service not known")
        with patch("socket.getaddrinfo", side_effect=error):
            assert DnsDomainChecker().lookup("zzqqxvoltix.com") is True

    def test_other_resolver_error_is_unknown(self):
        error = socket.gaierror(socket.EAI_AGAIN, "Temporary failure in name resolution")
        with patch("socket.getaddrinfo", side_effect=error):
            results = DnsDomainChecker().check_availability("voltix", ["com"])
        assert results[0].available is None
        assert "Temporary failure" in results[0].error


class TestSuggestDomains:
    """Tests for suggest_domains()."""

    def test_default_variants(self):
        assert suggest_domains("Voltix") == [
            "getvoltix.com", "tryvoltix.com", "usevoltix.com", "voltixhq.com",
        ]

    def test_custom_variants(self):
        assert suggest_domains("voltix", prefixes=["my"], suffixes=[], tld="io") == ["myvoltix.io"]

    def test_empty_label(self):
        assert suggest_domains("!!!") == []

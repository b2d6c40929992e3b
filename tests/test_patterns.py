"""Tests for wildcard domain pattern matching."""

import pytest

from srv_portal.routing.patterns import (
    DEFAULT_PORTAL_DOMAIN,
    DomainPatternSet,
    compile_domain_pattern,
    derive_portal_domain,
    parse_domain_list,
)

from conftest import make_record


class TestDomainMatcher:
    """Single pattern behaviour."""

    @pytest.mark.parametrize("hostname,expected", [
        ("dav.nat.example.com", True),
        ("a.b.nat.example.com", True),      # wildcard spans labels
        (".nat.example.com", True),         # wildcard may be empty
        ("nat.example.com", False),
        ("dav.nat.example.com.evil.org", False),
        ("davxnatxexample.com", False),
        ("dav.nat-example.com", False),
    ])
    def test_wildcard(self, hostname, expected):
        assert compile_domain_pattern("*.nat.example.com").test(hostname) is expected

    def test_literal_pattern(self):
        matcher = compile_domain_pattern("d1.example.com")
        assert matcher.test("d1.example.com")
        assert not matcher.test("xd1.example.com")
        assert not matcher.test("d1.example.com.au")
        assert not matcher.test("d1xexample.com")

    def test_regex_characters_are_literal(self):
        matcher = compile_domain_pattern("a+b.example.com")
        assert matcher.test("a+b.example.com")
        assert not matcher.test("aab.example.com")

    def test_compiled_patterns_are_cached(self):
        assert compile_domain_pattern("*.cached.example.com") is compile_domain_pattern("*.cached.example.com")


class TestDomainPatternSet:
    """Matching against the managed pattern list."""

    def test_matches_any(self):
        patterns = DomainPatternSet(["*.nat.example.com", "d1.example.com"])
        assert patterns.matches("x.nat.example.com")
        assert patterns.matches("d1.example.com")
        assert not patterns.matches("d2.example.com")

    def test_empty_set_matches_nothing(self):
        patterns = DomainPatternSet([])
        assert not patterns
        assert not patterns.matches("anything.example.com")

    def test_filter_keeps_order(self):
        records = [
            make_record("_http._tcp.b.nat.example.com", "b.lan"),
            make_record("_http._tcp.other.org", "o.lan"),
            make_record("_http._tcp.a.nat.example.com", "a.lan"),
        ]
        kept = DomainPatternSet(["*.nat.example.com"]).filter(records)
        assert [r.hostname for r in kept] == ["b.nat.example.com", "a.nat.example.com"]


class TestDomainConfiguration:
    """Parsing DOMAINS and deriving the portal domain."""

    def test_parse_domain_list(self):
        assert parse_domain_list(" *.nat.example.com , d1.example.com,, ") == ["*.nat.example.com", "d1.example.com"]
        assert parse_domain_list("") == []

    def test_portal_from_first_wildcard(self):
        assert derive_portal_domain(["d1.example.com", "*.nat.example.com"]) == "nat.example.com"

    def test_portal_from_first_domain(self):
        assert derive_portal_domain(["d1.example.com", "d2.example.com"]) == "d1.example.com"

    def test_portal_placeholder(self):
        assert derive_portal_domain([]) == DEFAULT_PORTAL_DOMAIN

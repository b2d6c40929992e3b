"""Tests for routing decisions."""

import pytest

from srv_portal.routing.cache import SrvSnapshot
from srv_portal.routing.engine import RoutingDecisionType, RoutingEngine
from srv_portal.routing.overrides import RedirectOverrideStore
from srv_portal.routing.patterns import DomainPatternSet

from conftest import make_record


@pytest.fixture
def snapshot(sample_records) -> SrvSnapshot:
    return SrvSnapshot(records=tuple(sample_records), fetched_at=0)


class TestWebRedirects:
    """Hostnames with web SRV records redirect."""

    def test_tls_record_redirects_to_https(self, engine, snapshot, overrides):
        decision = engine.route("dav.nat.example.com", "/remote.php?x=1", snapshot, overrides)

        assert decision.type == RoutingDecisionType.REDIRECT
        assert decision.scheme == "https"
        assert decision.target == "dav-backend.lan"
        assert decision.port == 5006
        assert decision.status == 302
        assert decision.location == "https://dav-backend.lan:5006/remote.php?x=1"
        assert decision.via_portal_fallback is False

    def test_https_service(self, engine, snapshot, overrides):
        decision = engine.route("nas.nat.example.com", "/", snapshot, overrides)
        assert decision.location == "https://nas.lan:5001/"

    def test_plain_http(self, engine, snapshot, overrides):
        decision = engine.route("plain.nat.example.com", "/", snapshot, overrides)
        assert decision.scheme == "http"
        assert decision.location == "http://plain.lan:8080/"

    def test_literal_domain_pattern(self, engine, snapshot, overrides):
        decision = engine.route("d1.example.com", "/index.html", snapshot, overrides)
        assert decision.location == "http://d1-backend.lan:80/index.html"

    def test_first_record_wins(self, engine, overrides):
        snapshot = SrvSnapshot(records=(
            make_record("_http._tcp.multi.nat.example.com", "first.lan", 80, priority=20),
            make_record("_http._tcp.multi.nat.example.com", "second.lan", 80, priority=1, weight=100),
        ))
        decision = engine.route("multi.nat.example.com", "/", snapshot, overrides)
        assert decision.target == "first.lan"


class TestRedirectStatus:
    """Default status and per-hostname overrides."""

    def test_default_status(self, engine, snapshot, overrides):
        assert engine.route("d1.example.com", "/", snapshot, overrides).status == 302

    def test_configured_default(self, snapshot, overrides):
        engine = RoutingEngine(DomainPatternSet(["d1.example.com"]), "d1.example.com", default_status=301)
        assert engine.route("d1.example.com", "/", snapshot, overrides).status == 301

    def test_override(self, engine, snapshot, overrides):
        overrides.set("d1.example.com", 307)
        assert engine.route("d1.example.com", "/", snapshot, overrides).status == 307

    def test_invalid_override_ignored(self, engine, snapshot, overrides):
        overrides.set("d1.example.com", 999)
        assert engine.route("d1.example.com", "/", snapshot, overrides).status == 302

        overrides.set("d1.example.com", 308)
        overrides.set("d1.example.com", 999)
        assert engine.route("d1.example.com", "/", snapshot, overrides).status == 308


class TestServiceInfo:
    """Non-web records produce service information."""

    def test_ssh_record(self, engine, snapshot, overrides):
        decision = engine.route("shell.nat.example.com", "/", snapshot, overrides)

        assert decision.type == RoutingDecisionType.SERVICE_INFO
        assert decision.service == "_ssh"
        assert decision.protocol == "_tcp"
        assert decision.target == "shell.lan"
        assert decision.port == 2222
        assert decision.local_link == "ssh://shell.lan:2222"
        assert decision.status is None

    def test_unknown_service_has_no_link(self, engine, snapshot, overrides):
        decision = engine.route("mc.nat.example.com", "/", snapshot, overrides)
        assert decision.type == RoutingDecisionType.SERVICE_INFO
        assert decision.local_link is None


class TestNotFound:
    """Hostnames without a managed record."""

    def test_unmanaged_record_is_ignored(self, engine, snapshot, overrides):
        decision = engine.route("other.unmanaged.org", "/", snapshot, overrides)
        assert decision.type == RoutingDecisionType.NOT_FOUND

    def test_unknown_hostname(self, engine, snapshot, overrides):
        assert engine.route("nothing.example.com", "/", snapshot, overrides).type == RoutingDecisionType.NOT_FOUND

    def test_empty_snapshot(self, engine, overrides):
        decision = engine.route("dav.nat.example.com", "/", SrvSnapshot(), overrides)
        assert decision.type == RoutingDecisionType.NOT_FOUND

    def test_hostname_outside_patterns_always_not_found(self, overrides, sample_records):
        """Without the wildcard pattern nothing under nat.example.com is routed."""
        engine = RoutingEngine(DomainPatternSet(["d1.example.com"]), portal_domain="nat.example.com")
        snapshot = SrvSnapshot(records=tuple(sample_records))

        for hostname in ("xyz.nat.example.com", "dav.nat.example.com", "web.nat.example.com"):
            decision = engine.route(hostname, "/", snapshot, overrides)
            assert decision.type == RoutingDecisionType.NOT_FOUND, hostname


class TestPortalFallback:
    """Synthesized redirects for direct subdomains of the portal domain."""

    def test_web_prefix_rewritten(self, engine, snapshot, overrides):
        decision = engine.route("foo.nat.example.com", "/path?q=1", snapshot, overrides)

        assert decision.type == RoutingDecisionType.REDIRECT
        assert decision.via_portal_fallback is True
        assert decision.target == "foo.home.lan"
        assert decision.port == 8443
        assert decision.scheme == "http"
        assert decision.location == "http://foo.home.lan:8443/path?q=1"

    def test_portal_prefix_rewritten_case_insensitive(self, engine, overrides):
        snapshot = SrvSnapshot(records=(
            make_record("_https._tcp.web.nat.example.com", "Portal.home.lan", 443),
        ))
        decision = engine.route("foo.nat.example.com", "/", snapshot, overrides)
        assert decision.target == "foo.home.lan"
        assert decision.location == "https://foo.home.lan:443/"

    def test_target_without_prefix(self, engine, overrides):
        snapshot = SrvSnapshot(records=(
            make_record("_http._tcp.web.nat.example.com", "web-backend.internal", 80),
        ))
        decision = engine.route("foo.nat.example.com", "/", snapshot, overrides)
        assert decision.type == RoutingDecisionType.NOT_FOUND

    def test_nested_label_not_rewritten(self, engine, snapshot, overrides):
        decision = engine.route("a.b.nat.example.com", "/", snapshot, overrides)
        assert decision.type == RoutingDecisionType.NOT_FOUND

    def test_requires_web_record(self, engine, overrides):
        snapshot = SrvSnapshot(records=(
            make_record("_ssh._tcp.web.nat.example.com", "web.home.lan", 22),
        ))
        decision = engine.route("foo.nat.example.com", "/", snapshot, overrides)
        assert decision.type == RoutingDecisionType.NOT_FOUND

    def test_literal_record_takes_precedence(self, engine, snapshot, overrides):
        decision = engine.route("dav.nat.example.com", "/", snapshot, overrides)
        assert decision.via_portal_fallback is False
        assert decision.target == "dav-backend.lan"

    def test_fallback_uses_override_of_requested_hostname(self, engine, snapshot, overrides):
        overrides.set("foo.nat.example.com", 308)
        decision = engine.route("foo.nat.example.com", "/", snapshot, overrides)
        assert decision.status == 308

    def test_other_domains_not_rewritten(self, engine, snapshot, overrides):
        decision = engine.route("foo.example.com", "/", snapshot, overrides)
        assert decision.type == RoutingDecisionType.NOT_FOUND


class TestManagedRecords:
    """Filtering by domain patterns."""

    def test_managed_records(self, engine, snapshot):
        hostnames = [r.hostname for r in engine.managed_records(snapshot)]
        assert "other.unmanaged.org" not in hostnames
        assert hostnames[0] == "dav.nat.example.com"
        assert len(hostnames) == 7

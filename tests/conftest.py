"""Pytest configuration and shared fixtures."""

from typing import Any, Dict, List, Optional, Sequence, Union

import httpx
import pytest

from srv_portal.routing.cache import SrvRecordCache
from srv_portal.routing.engine import RoutingEngine
from srv_portal.routing.overrides import RedirectOverrideStore
from srv_portal.routing.patterns import DomainPatternSet
from srv_portal.routing.records import SrvRecord, parse_srv_record
from srv_portal.routing.store import RoutingStore
from srv_portal.shared.config import Settings

DOMAINS = "*.nat.example.com,d1.example.com"
PORTAL_DOMAIN = "nat.example.com"
PASSWORD = "secret-pass"


def make_record(name: str, target: str, port: int = 443, priority: int = 0, weight: int = 0) -> SrvRecord:
    """Build a record the way the Cloudflare source would."""
    return parse_srv_record(name, {"target": f"{target}.", "port": port, "priority": priority, "weight": weight})


def api_item(name: str, target: str, port: int, record_id: str = "rec-1") -> Dict[str, Any]:
    """One Cloudflare ``dns_records`` result item."""
    return {
        "id": record_id,
        "zone_id": "zone-123",
        "zone_name": "example.com",
        "name": name,
        "type": "SRV",
        "content": f"0 {port} {target}",
        "data": {"priority": 0, "weight": 0, "port": port, "target": f"{target}."},
    }


class FakeRecordSource:
    """Record source returning scripted results.

    Each entry of ``responses`` is either a list of records or an exception
    to raise; once exhausted, ``records`` is returned.
    """

    def __init__(
        self,
        records: Sequence[SrvRecord] = (),
        responses: Optional[List[Union[Sequence[SrvRecord], Exception]]] = None,
        configured: bool = True,
    ):
        self.records = list(records)
        self.responses = list(responses or [])
        self._configured = configured
        self.calls = 0

    @property
    def configured(self) -> bool:
        return self._configured

    async def fetch_all_srv_records(self) -> List[SrvRecord]:
        self.calls += 1
        result = self.responses.pop(0) if self.responses else self.records
        if isinstance(result, Exception):
            raise result
        return list(result)


@pytest.fixture
def sample_records() -> List[SrvRecord]:
    """A typical zone: web, tls web, ssh, an unmanaged record and a fallback record."""
    return [
        make_record("_http._tls.dav.nat.example.com", "dav-backend.lan", 5006),
        make_record("_https._tcp.nas.nat.example.com", "nas.lan", 5001),
        make_record("_http._tcp.plain.nat.example.com", "plain.lan", 8080),
        make_record("_ssh._tcp.shell.nat.example.com", "shell.lan", 2222),
        make_record("_minecraft._tcp.mc.nat.example.com", "mc.lan", 25565),
        make_record("_http._tcp.web.nat.example.com", "web.home.lan", 8443),
        make_record("_http._tcp.d1.example.com", "d1-backend.lan", 80),
        make_record("_http._tcp.other.unmanaged.org", "other.lan", 80),
    ]


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the host environment."""
    return Settings(
        _env_file=None,
        domains=DOMAINS,
        portal_domain=PORTAL_DOMAIN,
        portal_password=PASSWORD,
        cf_api_token="token",
        cf_zone_id="zone-123",
        default_redirect_status=302,
        debug_mode=False,
    )


@pytest.fixture
def engine() -> RoutingEngine:
    return RoutingEngine(DomainPatternSet(DOMAINS.split(",")), portal_domain=PORTAL_DOMAIN, default_status=302)


@pytest.fixture
def overrides() -> RedirectOverrideStore:
    return RedirectOverrideStore()


@pytest.fixture
def fake_source(sample_records) -> FakeRecordSource:
    return FakeRecordSource(sample_records)


@pytest.fixture
def store(fake_source, engine, overrides) -> RoutingStore:
    return RoutingStore(SrvRecordCache(fake_source, ttl=300), engine, overrides)


@pytest.fixture
def probe_client() -> httpx.AsyncClient:
    """Liveness probe client: ``*.lan`` hosts starting with ``dav`` are online."""
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host.startswith("dav"):
            return httpx.Response(200, text="ok")
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))

"""ASGI application assembly.

Usage:
    hypercorn "srv_portal.app:create_app()"
    uvicorn srv_portal.app:create_app --factory

Requests for the portal domain go to the portal application, every other
hostname goes to the SRV redirect application. Both share one
:class:`RoutingStore`.
"""

import logging
import re
from contextlib import asynccontextmanager
from typing import Callable, Optional

import httpx
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Host, Mount

from .cloudflare.client import CloudflareRecordSource
from .portal.server import create_portal_app
from .proxy.app import SrvRedirectApp
from .routing.cache import RecordSource, SrvRecordCache
from .routing.engine import RoutingEngine
from .routing.overrides import RedirectOverrideStore
from .routing.patterns import DomainPatternSet
from .routing.store import RoutingStore
from .shared.config import Settings, get_settings

logger = logging.getLogger(__name__)

CONFIG_ERROR_MESSAGE = (
    "Configuration problem: check the following environment variables:\n"
    "1. DOMAINS - comma-separated list of domains, wildcards allowed.\n"
    "2. PORTAL_DOMAIN - portal domain (defaults to the first wildcard's parent domain)."
)


class PortalHost(Host):
    """Host route matching the portal domain regardless of case."""

    def __init__(self, host: str, app, name: Optional[str] = None):
        super().__init__(host.lower(), app=app, name=name)
        self.host_regex = re.compile(self.host_regex.pattern, re.IGNORECASE)


class RoutingStoreMiddleware(BaseHTTPMiddleware):
    """Refreshes the SRV cache before every request."""

    def __init__(self, app, store: RoutingStore, settings: Settings):
        super().__init__(app)
        self.store = store
        self.settings = settings

    async def dispatch(self, request: Request, call_next):
        if not self.settings.domain_list or not self.settings.portal_domain:
            logger.error("DOMAINS is empty, refusing request")
            return PlainTextResponse(CONFIG_ERROR_MESSAGE, status_code=500)

        await self.store.ensure_fresh()
        return await call_next(request)


def build_store(
    settings: Settings,
    source: RecordSource,
    clock: Optional[Callable[[], float]] = None,
) -> RoutingStore:
    """Wire cache, overrides and engine into a routing store."""
    cache_kwargs = {}
    if clock is not None:
        cache_kwargs["clock"] = clock
    cache = SrvRecordCache(
        source,
        ttl=settings.cache_ttl,
        failure_backoff=settings.refresh_failure_backoff,
        **cache_kwargs,
    )
    engine = RoutingEngine(
        DomainPatternSet(settings.domain_list),
        portal_domain=settings.portal_domain,
        default_status=settings.default_redirect_status,
    )
    return RoutingStore(cache, engine, RedirectOverrideStore())


def create_app(
    settings: Optional[Settings] = None,
    source: Optional[RecordSource] = None,
    clock: Optional[Callable[[], float]] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> Starlette:
    """Create the ASGI application.

    Args:
        settings: Settings (defaults to the environment)
        source: Record source (defaults to the Cloudflare API)
        clock: Time source for cache freshness
        http_client: Client for portal liveness probes

    Returns:
        Starlette application with ``state.store`` set
    """
    settings = settings or get_settings()

    if not settings.domain_list:
        logger.warning("No domains parsed from DOMAINS, check the configuration")

    owned_source = None
    if source is None:
        owned_source = CloudflareRecordSource(
            settings.cf_api_token,
            settings.cf_zone_id,
            base_url=settings.cf_api_base_url,
            timeout=settings.cf_api_timeout,
        )
        source = owned_source

    owns_http_client = http_client is None
    if http_client is None:
        http_client = httpx.AsyncClient(
            verify=settings.health_check_verify_tls,
            timeout=httpx.Timeout(settings.health_check_timeout),
        )

    store = build_store(settings, source, clock)
    portal_app = create_portal_app(store, settings, http_client)
    redirect_app = SrvRedirectApp(store, debug_mode=settings.debug_mode)

    @asynccontextmanager
    async def lifespan(app: Starlette):
        """Log configuration on startup, close HTTP clients on shutdown."""
        logger.info(f"SRV portal starting: {settings.summary()}")
        if not settings.has_api_credentials:
            logger.warning("CF_API_TOKEN or CF_ZONE_ID missing, SRV records will not be fetched")
        yield
        logger.info("SRV portal shutting down")
        if owned_source is not None:
            await owned_source.aclose()
        if owns_http_client:
            await http_client.aclose()

    app = Starlette(
        routes=[
            PortalHost(settings.portal_domain, app=portal_app, name="portal"),
            Mount("", app=redirect_app, name="redirect"),
        ],
        middleware=[
            Middleware(RoutingStoreMiddleware, store=store, settings=settings),
        ],
        lifespan=lifespan,
        debug=settings.debug_mode,
    )
    app.state.settings = settings
    app.state.store = store
    return app

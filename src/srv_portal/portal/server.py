"""FastAPI application for the portal domain."""

import logging
from typing import List

import httpx
from fastapi import FastAPI, Form, Query
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from ..routing.store import RoutingStore
from ..shared.config import Settings
from .health import build_resources
from .models import HealthStatus
from .views import portal_url, render_login_page, render_portal_page

logger = logging.getLogger(__name__)


def _warnings(settings: Settings) -> List[str]:
    warnings = []
    if not settings.domain_list:
        warnings.append("DOMAINS is not configured, no domain can be matched.")
    if not settings.has_api_credentials:
        warnings.append(
            "CF_API_TOKEN or CF_ZONE_ID is missing, SRV records cannot be fetched "
            "automatically. Only cached data (if any) is shown."
        )
    return warnings


def create_portal_app(store: RoutingStore, settings: Settings, http_client: httpx.AsyncClient) -> FastAPI:
    """Create the portal application.

    Args:
        store: Routing store shared with the redirect application
        settings: Application settings
        http_client: Client used for backend liveness probes
    """
    app = FastAPI(
        title="SRV Portal",
        description="Summary of SRV-routed resources",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    def authorized(password: str) -> bool:
        return password == settings.portal_password

    @app.get("/", response_class=HTMLResponse)
    async def portal_page(pwd: str = Query(default="")):
        """Password-protected listing of all managed SRV records."""
        if not authorized(pwd):
            if settings.debug_mode:
                logger.warning("Portal password wrong or missing")
            error = "Wrong password." if pwd else None
            return HTMLResponse(render_login_page(error), status_code=401)

        snapshot = store.snapshot
        managed = store.managed_records()
        logger.debug(f"Portal listing {len(managed)} of {len(snapshot)} cached records")

        resources = await build_resources(
            managed,
            http_client,
            timeout=settings.health_check_timeout,
            include_raw=settings.debug_mode,
        )
        for resource in resources:
            if resource.is_web:
                resource.redirect_status = store.redirect_status(resource.domain)

        debug_sections = None
        if settings.debug_mode:
            debug_sections = [
                ("Configuration", settings.summary()),
                ("All SRV records", [r.model_dump(exclude={"raw"}) for r in snapshot.records]),
                ("Managed records", [r.model_dump(exclude={"raw"}) for r in managed]),
                ("Redirect overrides", store.overrides.items()),
            ]

        return HTMLResponse(render_portal_page(
            resources,
            password=pwd,
            warnings=_warnings(settings),
            debug_sections=debug_sections,
        ))

    @app.post("/redirect-status")
    async def set_redirect_status(
        hostname: str = Form(...),
        status: str = Form(default=""),
        pwd: str = Form(default=""),
    ):
        """Override the redirect status for one hostname."""
        if not authorized(pwd):
            return PlainTextResponse("Unauthorized: wrong or missing password.", status_code=401)

        try:
            code = int(status)
        except ValueError:
            code = None

        if code is None or not store.set_redirect_status(hostname, code):
            logger.warning(f"Rejected redirect status {status!r} for {hostname}")

        return RedirectResponse(portal_url(pwd), status_code=303)

    @app.get("/health", response_model=HealthStatus)
    async def health_check():
        """Health check endpoint."""
        stats = store.cache.stats()
        if stats["fetched_at"] is not None:
            status = "healthy"
        elif stats["source_configured"]:
            status = "degraded"
        else:
            status = "unconfigured"
        return HealthStatus(
            status=status,
            records_cached=stats["records"],
            managed_records=len(store.managed_records()),
            fetched_at=stats["fetched_at"],
            source_configured=stats["source_configured"],
            last_refresh_error=stats["last_error"],
            redirect_overrides=len(store.overrides),
        )

    return app

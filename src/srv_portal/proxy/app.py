"""Minimal ASGI application serving SRV redirects.

Every hostname other than the portal domain lands here. The request is
routed against the cached SRV records and answered with a redirect, a
service information page, or a 404.
"""

import logging

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse, Response
from starlette.routing import Route

from ..portal.views import render_service_info_page
from ..routing.engine import RoutingDecisionType
from ..routing.store import RoutingStore

logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


def path_and_query(request: Request) -> str:
    """Original path plus ``?query`` when present.

    The path keeps its percent-encoding (``raw_path``), so ``%2F`` and
    ``%3F`` reach the target unchanged.
    """
    raw_path = request.scope.get("raw_path")
    if raw_path:
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = request.url.path
    path = path or "/"
    if request.url.query:
        return f"{path}?{request.url.query}"
    return path


class SrvRedirectApp:
    """Redirect application for SRV-backed hostnames."""

    def __init__(self, store: RoutingStore, debug_mode: bool = False):
        self.store = store
        self.debug_mode = debug_mode
        self.app = Starlette(
            routes=[
                Route("/srv-health", self.handle_health, methods=["GET"]),
                Route("/{path:path}", self.handle_redirect, methods=ALL_METHODS),
            ],
        )

    async def __call__(self, scope, receive, send):
        await self.app(scope, receive, send)

    async def handle_health(self, request: Request) -> Response:
        """Liveness of the redirect application."""
        return JSONResponse({"status": "healthy", "records": len(self.store.snapshot)})

    async def handle_redirect(self, request: Request) -> Response:
        """Route the request by hostname."""
        hostname = request.url.hostname or ""
        if not hostname:
            return PlainTextResponse("Missing Host header.", status_code=404)

        logger.debug(f"Looking up SRV records for {hostname}")
        decision = self.store.route(hostname, path_and_query(request))

        if decision.type == RoutingDecisionType.REDIRECT:
            logger.info(f"{hostname} -> {decision.location} ({decision.status})")
            return RedirectResponse(decision.location, status_code=decision.status)

        if decision.type == RoutingDecisionType.SERVICE_INFO:
            html = render_service_info_page(decision, debug_mode=self.debug_mode)
            return HTMLResponse(html)

        logger.debug(f"No usable SRV record for {hostname}")
        return PlainTextResponse(
            f"No SRV record found for {hostname}, cannot continue.",
            status_code=404,
        )

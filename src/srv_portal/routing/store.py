"""Routing store shared by all request handlers."""

import logging
from typing import List, Optional

from .cache import SrvRecordCache, SrvSnapshot
from .engine import RoutingDecision, RoutingEngine
from .overrides import RedirectOverrideStore
from .records import SrvRecord

logger = logging.getLogger(__name__)


class RoutingStore:
    """Owns the SRV cache, the redirect overrides and the routing engine.

    One instance is created per application and handed to the request
    handlers, replacing process-wide globals.
    """

    def __init__(
        self,
        cache: SrvRecordCache,
        engine: RoutingEngine,
        overrides: Optional[RedirectOverrideStore] = None,
    ):
        self.cache = cache
        self.engine = engine
        self.overrides = overrides if overrides is not None else RedirectOverrideStore()

    @property
    def snapshot(self) -> SrvSnapshot:
        return self.cache.snapshot

    async def ensure_fresh(self, now: Optional[float] = None) -> None:
        await self.cache.ensure_fresh(now)

    def route(self, hostname: str, path_and_query: str = "") -> RoutingDecision:
        """Route a request against one stable snapshot."""
        snapshot = self.cache.snapshot
        return self.engine.route(hostname, path_and_query, snapshot, self.overrides)

    def managed_records(self) -> List[SrvRecord]:
        return self.engine.managed_records(self.cache.snapshot)

    def redirect_status(self, hostname: str) -> int:
        return self.engine.redirect_status(hostname, self.overrides)

    def set_redirect_status(self, hostname: str, status: int) -> bool:
        return self.overrides.set(hostname, status)

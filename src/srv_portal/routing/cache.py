"""Time-based SRV record cache with stale-on-failure semantics.

Refresh Policy:
1. A snapshot older than the TTL (or one that was never fetched) is stale
2. A stale snapshot triggers one refresh shared by all concurrent callers
3. A successful, non-empty refresh replaces the snapshot wholesale
4. A failed or empty refresh keeps the previous snapshot and logs a warning

Request handling never sees an exception from this module.
"""

import asyncio
import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from .errors import UpstreamFetchError
from .records import SrvRecord

logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    """Anything that can deliver the full SRV record list."""

    @property
    def configured(self) -> bool: ...

    async def fetch_all_srv_records(self) -> List[SrvRecord]: ...


@dataclass(frozen=True)
class SrvSnapshot:
    """Immutable view of the cached records."""
    records: Tuple[SrvRecord, ...] = ()
    fetched_at: Optional[float] = None  # None until the first successful refresh

    def __len__(self) -> int:
        return len(self.records)


class SrvRecordCache:
    """Owns the SRV record snapshot and decides when to refresh it."""

    def __init__(
        self,
        source: RecordSource,
        ttl: int = 300,
        clock: Callable[[], float] = time.time,
        failure_backoff: float = 0.0,
    ):
        """Initialize the cache.

        Args:
            source: Record source used for refreshes
            ttl: Snapshot lifetime in seconds
            clock: Time source returning seconds
            failure_backoff: Seconds to wait after a failed refresh before
                trying again (0 disables, jittered by up to 25%)
        """
        self.source = source
        self.ttl = ttl
        self.failure_backoff = failure_backoff
        self._clock = clock
        self._snapshot = SrvSnapshot()
        self._refresh_task: Optional[asyncio.Task] = None
        self._retry_not_before: Optional[float] = None

        self.refresh_count = 0
        self.failure_count = 0
        self.last_error: Optional[str] = None

    @property
    def snapshot(self) -> SrvSnapshot:
        return self._snapshot

    def is_stale(self, now: float) -> bool:
        """Check whether the snapshot needs a refresh at ``now``."""
        fetched_at = self._snapshot.fetched_at
        return fetched_at is None or now - fetched_at > self.ttl

    async def ensure_fresh(self, now: Optional[float] = None) -> None:
        """Refresh the snapshot if it is stale.

        Safe to call on every request. Concurrent callers that find the
        snapshot stale wait on the same refresh instead of issuing their own
        upstream calls.
        """
        if now is None:
            now = self._clock()

        if not self.is_stale(now):
            logger.debug(
                f"SRV cache still fresh, {self.ttl - (now - self._snapshot.fetched_at):.0f}s remaining"
            )
            return

        if not self.source.configured:
            logger.debug("Record source has no API credentials, skipping SRV refresh")
            return

        if self._retry_not_before is not None and now < self._retry_not_before:
            logger.debug(f"SRV refresh backing off until {self._retry_not_before:.0f}")
            return

        if self._refresh_task is None or self._refresh_task.done():
            logger.debug("SRV cache stale or empty, starting refresh")
            self._refresh_task = asyncio.ensure_future(self._refresh(now))

        # Shield so a cancelled request does not abort the shared refresh
        await asyncio.shield(self._refresh_task)

    async def _refresh(self, now: float) -> None:
        self.refresh_count += 1
        try:
            records = await self.source.fetch_all_srv_records()
        except UpstreamFetchError as e:
            self._record_failure(now, str(e))
            logger.warning(f"SRV refresh failed, keeping {len(self._snapshot)} cached records: {e}")
            return
        except Exception as e:
            self._record_failure(now, f"{type(e).__name__}: {e}")
            logger.exception(f"Unexpected error during SRV refresh, keeping {len(self._snapshot)} cached records")
            return

        if not records:
            self._record_failure(now, "no SRV records returned")
            logger.warning(f"No SRV records returned by the API, keeping {len(self._snapshot)} cached records")
            return

        self._snapshot = SrvSnapshot(records=tuple(records), fetched_at=now)
        self._retry_not_before = None
        self.last_error = None
        logger.info(f"SRV cache refreshed with {len(records)} records")

    def _record_failure(self, now: float, error: str) -> None:
        self.failure_count += 1
        self.last_error = error
        if self.failure_backoff > 0:
            self._retry_not_before = now + self.failure_backoff * (1 + random.uniform(0, 0.25))

    def stats(self) -> Dict[str, Any]:
        """Cache statistics for the health endpoint."""
        return {
            "records": len(self._snapshot),
            "fetched_at": self._snapshot.fetched_at,
            "ttl": self.ttl,
            "source_configured": self.source.configured,
            "refresh_count": self.refresh_count,
            "failure_count": self.failure_count,
            "last_error": self.last_error,
        }

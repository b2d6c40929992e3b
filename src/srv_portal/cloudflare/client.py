"""Cloudflare DNS API client for SRV record retrieval.

Cloudflare returns SRV records without separate service/protocol fields,
so every record name (``_http._tls.dav.nat.example.com``) is parsed by
:func:`srv_portal.routing.records.record_from_api_item`.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..routing.errors import SourceNotConfiguredError, UpstreamFetchError
from ..routing.records import SrvRecord, record_from_api_item

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.cloudflare.com/client/v4"
PAGE_SIZE = 100


class CloudflareRecordSource:
    """Fetches all SRV records of one zone, page by page."""

    def __init__(
        self,
        api_token: str,
        zone_id: str,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the record source.

        Args:
            api_token: Cloudflare API token with DNS read permission
            zone_id: Zone to list records from
            base_url: API base URL
            timeout: Timeout in seconds for each page request
            client: Optional preconfigured client (not closed by this source)
        """
        self.api_token = api_token or ""
        self.zone_id = zone_id or ""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    @property
    def configured(self) -> bool:
        return bool(self.api_token and self.zone_id)

    @property
    def records_url(self) -> str:
        return f"{self.base_url}/zones/{self.zone_id}/dns_records"

    async def fetch_all_srv_records(self) -> List[SrvRecord]:
        """Fetch and parse every SRV record in the zone.

        Returns:
            Parsed records in API order

        Raises:
            SourceNotConfiguredError: If token or zone id is missing
            UpstreamFetchError: If any page fails; records from earlier
                pages are discarded
        """
        if not self.configured:
            raise SourceNotConfiguredError("CF_API_TOKEN or CF_ZONE_ID is not set")

        items: List[Dict[str, Any]] = []
        page = 1
        while True:
            payload = await self._fetch_page(page)
            result = payload.get("result") or []
            items.extend(result)
            logger.debug(f"Page {page}: {len(result)} SRV records")

            info = payload.get("result_info") or {}
            total_pages = info.get("total_pages")
            if total_pages is None or info.get("page", page) >= total_pages:
                break
            page += 1

        records = [record_from_api_item(item) for item in items]
        logger.debug(f"Fetched {len(records)} SRV records in {page} page(s)")
        return records

    async def _fetch_page(self, page: int) -> Dict[str, Any]:
        params = {"type": "SRV", "per_page": PAGE_SIZE, "page": page}
        headers = {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

        try:
            response = await self.client.get(
                self.records_url, params=params, headers=headers, timeout=self.timeout
            )
        except httpx.TimeoutException as e:
            raise UpstreamFetchError(f"Cloudflare API timed out on page {page}: {e}") from e
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"Cloudflare API request failed on page {page}: {e}") from e

        if not response.is_success:
            logger.error(f"Cloudflare API call failed: {response.status_code} {response.text[:500]}")
            raise UpstreamFetchError(
                f"Cloudflare API returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamFetchError(f"Cloudflare API returned invalid JSON: {e}") from e

        if not isinstance(payload, dict) or not payload.get("success"):
            errors = payload.get("errors") if isinstance(payload, dict) else payload
            logger.error(f"Cloudflare API reported failure: {errors}")
            raise UpstreamFetchError(f"Cloudflare API reported failure: {errors}")

        return payload

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

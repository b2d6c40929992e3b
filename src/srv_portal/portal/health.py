"""Liveness probes and resource rows for the portal listing."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import httpx

from ..routing.records import SrvRecord
from ..routing.services import classify_service, local_scheme_link

logger = logging.getLogger(__name__)

STATUS_ONLINE = "Online"
STATUS_OFFLINE = "Offline"
STATUS_SERVICE = "Service"


@dataclass
class PortalResource:
    """One row of the portal listing."""
    domain: str
    service: str
    protocol: str
    target: str
    port: int
    is_web: bool
    status: str
    accessible_url: str = ""
    redirect_status: Optional[int] = None
    raw: Optional[Dict[str, Any]] = None


async def check_health(client: httpx.AsyncClient, url: str, timeout: float = 2.0) -> bool:
    """Probe a web backend.

    Args:
        client: HTTP client used for the probe
        url: URL to GET
        timeout: Probe timeout in seconds

    Returns:
        True if the backend answered with a 2xx status
    """
    try:
        response = await client.get(url, timeout=timeout, follow_redirects=True)
        return response.is_success
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        # Expected for offline backends
        logger.debug(f"Health check failed for {url}: {type(e).__name__}: {e}")
        return False


async def build_resources(
    records: Iterable[SrvRecord],
    client: httpx.AsyncClient,
    timeout: float = 2.0,
    include_raw: bool = False,
) -> List[PortalResource]:
    """Turn managed SRV records into portal rows, probing web services concurrently."""
    records = list(records)
    probes = []
    for rec in records:
        kind = classify_service(rec.service, rec.protocol)
        if kind.is_web:
            probes.append(check_health(client, f"{kind.scheme}://{rec.target}:{rec.port}/", timeout))
    results = iter(await asyncio.gather(*probes))

    resources = []
    for rec in records:
        kind = classify_service(rec.service, rec.protocol)
        if kind.is_web:
            url = f"{kind.scheme}://{rec.target}:{rec.port}/"
            online = next(results)
            status = STATUS_ONLINE if online else STATUS_OFFLINE
            accessible_url = url if online else ""
        else:
            status = STATUS_SERVICE
            accessible_url = local_scheme_link(kind, rec.target, rec.port) or ""

        resources.append(PortalResource(
            domain=rec.hostname,
            service=rec.service,
            protocol=rec.protocol,
            target=rec.target,
            port=rec.port,
            is_web=kind.is_web,
            status=status,
            accessible_url=accessible_url,
            raw=rec.raw if include_raw else None,
        ))
    return resources

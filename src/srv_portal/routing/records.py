"""SRV record model and parsing of Cloudflare record names."""

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class SrvRecord(BaseModel):
    """A parsed SRV record.

    The DNS API only returns the full record name (for example
    ``_http._tls.dav.nat.example.com``), so service, protocol and the
    logical hostname are derived from it by :func:`parse_srv_name`.
    """
    model_config = ConfigDict(frozen=True)

    original_name: str
    service: str = ""
    protocol: str = ""
    hostname: str
    target: str = ""
    port: int = 0
    priority: int = 0
    weight: int = 0

    # Informational fields, only used by the portal listing
    record_id: Optional[str] = None
    zone_name: Optional[str] = None
    content: str = ""
    raw: Optional[Dict[str, Any]] = Field(default=None, repr=False)


def parse_srv_name(name: str) -> Tuple[str, str, str]:
    """Split an SRV record name into ``(service, protocol, hostname)``.

    Args:
        name: Full record name, e.g. ``_http._tls.dav.nat.example.com``

    Returns:
        Tuple of service label, protocol label and the remaining hostname.
        Names with fewer than three labels return ``("", "", name)``.
    """
    parts = name.split(".")
    if len(parts) < 3:
        return "", "", name
    return parts[0], parts[1], ".".join(parts[2:])


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def parse_srv_record(raw_name: str, raw_data: Optional[Dict[str, Any]], **extra: Any) -> SrvRecord:
    """Build an :class:`SrvRecord` from a record name and its SRV data block.

    Never raises: malformed names degrade per :func:`parse_srv_name` and
    missing numeric fields default to 0.
    """
    raw_name = raw_name or ""
    data = raw_data or {}
    service, protocol, hostname = parse_srv_name(raw_name)

    target = str(data.get("target") or "")
    if target.endswith("."):
        target = target[:-1]

    return SrvRecord(
        original_name=raw_name,
        service=service,
        protocol=protocol,
        hostname=hostname,
        target=target,
        port=_as_int(data.get("port")),
        priority=_as_int(data.get("priority")),
        weight=_as_int(data.get("weight")),
        **extra,
    )


def record_from_api_item(item: Dict[str, Any]) -> SrvRecord:
    """Parse one item of the Cloudflare ``dns_records`` result list."""
    return parse_srv_record(
        item.get("name", ""),
        item.get("data"),
        record_id=item.get("id"),
        zone_name=item.get("zone_name"),
        content=item.get("content") or "",
        raw=item,
    )

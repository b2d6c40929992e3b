"""Classification of SRV service/protocol labels."""

from enum import Enum
from typing import Optional


class ServiceKind(str, Enum):
    """What kind of service an SRV record points at."""
    HTTP = "http"
    HTTPS = "https"
    SSH = "ssh"
    SFTP = "sftp"
    RDP = "rdp"
    VNC = "vnc"
    UNKNOWN = "unknown"

    @property
    def is_web(self) -> bool:
        return self in (ServiceKind.HTTP, ServiceKind.HTTPS)

    @property
    def scheme(self) -> Optional[str]:
        """URL scheme for web services."""
        return self.value if self.is_web else None

    @property
    def local_scheme(self) -> Optional[str]:
        """URL scheme for services opened by a local client (ssh://, rdp://...)."""
        if self.is_web or self is ServiceKind.UNKNOWN:
            return None
        return self.value


# Service labels that map to a local client scheme
_LOCAL_SERVICES = {
    "_ssh": ServiceKind.SSH,
    "_sftp": ServiceKind.SFTP,
    "_rdp": ServiceKind.RDP,
    "_vnc": ServiceKind.VNC,
}


def classify_service(service: str, protocol: str) -> ServiceKind:
    """Classify an SRV record by its service and protocol labels.

    Any service starting with ``_http`` is a web service. It is served over
    https when the service starts with ``_https`` or when either label
    mentions ``tls`` (``_http._tls`` is https).

    Args:
        service: Service label, e.g. ``_http``
        protocol: Protocol label, e.g. ``_tls`` or ``_tcp``

    Returns:
        The service kind
    """
    s = (service or "").lower()
    p = (protocol or "").lower()

    if s.startswith("_http"):
        if s.startswith("_https") or "tls" in p or "tls" in s:
            return ServiceKind.HTTPS
        return ServiceKind.HTTP

    return _LOCAL_SERVICES.get(s, ServiceKind.UNKNOWN)


def local_scheme_link(kind: ServiceKind, target: str, port: int) -> Optional[str]:
    """Build a local client link such as ``ssh://host:22``."""
    scheme = kind.local_scheme
    if not scheme:
        return None
    return f"{scheme}://{target}:{port}"

"""Routing decisions for SRV-backed hostnames.

Given a request hostname and the current SRV snapshot, the engine decides
whether to redirect the browser, show a service information page, or
report that nothing is configured for the hostname.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from .cache import SrvSnapshot
from .overrides import RedirectOverrideStore
from .patterns import DomainPatternSet
from .records import SrvRecord
from .services import ServiceKind, classify_service, local_scheme_link

logger = logging.getLogger(__name__)

# Target prefixes rewritten by the portal subdomain fallback
FALLBACK_TARGET_PREFIXES = ("web.", "portal.")


class RoutingDecisionType(str, Enum):
    """Types of routing decisions."""
    REDIRECT = "redirect"          # Web service, send an HTTP redirect
    SERVICE_INFO = "service_info"  # Non-web service, show connection details
    NOT_FOUND = "not_found"        # No managed record for the hostname


@dataclass
class RoutingDecision:
    """Result of routing evaluation."""
    type: RoutingDecisionType
    hostname: str
    scheme: Optional[str] = None
    target: Optional[str] = None
    port: Optional[int] = None
    status: Optional[int] = None        # redirect only
    location: Optional[str] = None      # redirect only
    service: Optional[str] = None
    protocol: Optional[str] = None
    local_link: Optional[str] = None    # service info only
    record: Optional[SrvRecord] = None
    via_portal_fallback: bool = False

    @property
    def is_redirect(self) -> bool:
        return self.type == RoutingDecisionType.REDIRECT

    @classmethod
    def not_found(cls, hostname: str) -> "RoutingDecision":
        return cls(type=RoutingDecisionType.NOT_FOUND, hostname=hostname)


class RoutingEngine:
    """Matches hostnames against cached SRV records."""

    def __init__(self, patterns: DomainPatternSet, portal_domain: str, default_status: int = 302):
        self.patterns = patterns
        self.portal_domain = portal_domain
        self.default_status = default_status

    def managed_records(self, snapshot: SrvSnapshot) -> List[SrvRecord]:
        """Records whose hostname belongs to one of the managed domains."""
        return self.patterns.filter(snapshot.records)

    def route(
        self,
        hostname: str,
        path_and_query: str,
        snapshot: SrvSnapshot,
        overrides: RedirectOverrideStore,
    ) -> RoutingDecision:
        """Produce a routing decision for a request.

        Args:
            hostname: Request hostname
            path_and_query: Original path plus query string, appended to
                redirect locations
            snapshot: SRV snapshot to route against
            overrides: Per-hostname redirect status overrides

        Returns:
            RoutingDecision of type redirect, service_info or not_found
        """
        managed = self.managed_records(snapshot)
        candidates = [rec for rec in managed if rec.hostname == hostname]
        logger.debug(f"{len(candidates)} SRV records for {hostname} ({len(managed)} managed)")

        if candidates:
            # Priority and weight are not used; first record in snapshot order wins
            record = candidates[0]
            kind = classify_service(record.service, record.protocol)
            if kind.is_web:
                return self._redirect(hostname, path_and_query, kind, record.target, record, overrides)
            return self._service_info(hostname, kind, record)

        return self._portal_fallback(hostname, path_and_query, managed, overrides)

    def redirect_status(self, hostname: str, overrides: RedirectOverrideStore) -> int:
        """Effective redirect status for a hostname."""
        status = overrides.get(hostname)
        return status if status is not None else self.default_status

    def _redirect(
        self,
        hostname: str,
        path_and_query: str,
        kind: ServiceKind,
        target: str,
        record: SrvRecord,
        overrides: RedirectOverrideStore,
        via_portal_fallback: bool = False,
    ) -> RoutingDecision:
        status = self.redirect_status(hostname, overrides)
        location = f"{kind.scheme}://{target}:{record.port}{path_and_query}"
        logger.debug(f"Redirecting {hostname} -> {location} ({status})")
        return RoutingDecision(
            type=RoutingDecisionType.REDIRECT,
            hostname=hostname,
            scheme=kind.scheme,
            target=target,
            port=record.port,
            status=status,
            location=location,
            service=record.service,
            protocol=record.protocol,
            record=record,
            via_portal_fallback=via_portal_fallback,
        )

    def _service_info(self, hostname: str, kind: ServiceKind, record: SrvRecord) -> RoutingDecision:
        return RoutingDecision(
            type=RoutingDecisionType.SERVICE_INFO,
            hostname=hostname,
            target=record.target,
            port=record.port,
            service=record.service,
            protocol=record.protocol,
            local_link=local_scheme_link(kind, record.target, record.port),
            record=record,
        )

    def _portal_fallback(
        self,
        hostname: str,
        path_and_query: str,
        managed: Iterable[SrvRecord],
        overrides: RedirectOverrideStore,
    ) -> RoutingDecision:
        """Synthesize a redirect for ``<label>.<portal domain>`` hostnames.

        The ``web.<portal domain>`` web record stands in for every direct
        subdomain of the portal domain: a target of ``web.backend.lan``
        becomes ``<label>.backend.lan`` (same for a ``portal.`` prefix).
        """
        suffix = f".{self.portal_domain}"
        if not hostname.endswith(suffix) or not self.patterns.matches(hostname):
            return RoutingDecision.not_found(hostname)

        label = hostname[: -len(suffix)]
        if not label or "." in label:
            return RoutingDecision.not_found(hostname)

        web_hostname = f"web{suffix}"
        for record in managed:
            if record.hostname != web_hostname or not record.service.lower().startswith("_http"):
                continue
            target_lower = record.target.lower()
            for prefix in FALLBACK_TARGET_PREFIXES:
                if target_lower.startswith(prefix):
                    target = f"{label}.{record.target[len(prefix):]}"
                    kind = classify_service(record.service, record.protocol)
                    logger.debug(f"Portal fallback for {hostname}: {record.target} -> {target}")
                    return self._redirect(
                        hostname, path_and_query, kind, target, record, overrides,
                        via_portal_fallback=True,
                    )
            logger.debug(f"Portal fallback record target {record.target} has no rewritable prefix")
            break

        return RoutingDecision.not_found(hostname)

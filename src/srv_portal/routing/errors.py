"""Exceptions raised by the SRV routing core."""

from typing import Optional


class SrvPortalError(Exception):
    """Base class for all SRV portal errors."""


class UpstreamFetchError(SrvPortalError):
    """The DNS management API could not deliver the SRV record list.

    Covers transport failures, timeouts, non-2xx responses and
    ``success=false`` payloads. The cache manager catches this and keeps
    serving the last good snapshot.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SourceNotConfiguredError(UpstreamFetchError):
    """API token or zone id is missing."""

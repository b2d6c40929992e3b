"""Per-hostname redirect status overrides.

Entries are set from the portal's admin form and live for the lifetime of
the process. Last write wins.
"""

import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)

VALID_REDIRECT_STATUSES = (301, 302, 307, 308)


class RedirectOverrideStore:
    """In-memory mapping of hostname to redirect status code."""

    def __init__(self):
        self._statuses: Dict[str, int] = {}

    def set(self, hostname: str, status: int) -> bool:
        """Override the redirect status for a hostname.

        Statuses outside 301/302/307/308 are ignored.

        Returns:
            True if the override was stored
        """
        if not hostname or status not in VALID_REDIRECT_STATUSES:
            logger.debug(f"Ignoring redirect override {hostname!r} -> {status!r}")
            return False
        self._statuses[hostname] = status
        logger.info(f"Redirect status for {hostname} set to {status}")
        return True

    def get(self, hostname: str) -> Optional[int]:
        return self._statuses.get(hostname)

    def items(self) -> Dict[str, int]:
        """Copy of all overrides."""
        return dict(self._statuses)

    def __len__(self) -> int:
        return len(self._statuses)

    def __contains__(self, hostname: str) -> bool:
        return hostname in self._statuses

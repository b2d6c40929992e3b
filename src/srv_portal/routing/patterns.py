"""Wildcard domain pattern matching.

Patterns come from the ``DOMAINS`` setting, e.g. ``*.nat.example.com`` or
``d1.example.com``. A ``*`` matches any run of characters, dots included,
so ``*.nat.example.com`` also matches ``a.b.nat.example.com``.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, List, Pattern, Sequence, TypeVar

from ..shared.log_levels import TRACE

logger = logging.getLogger(__name__)

DEFAULT_PORTAL_DOMAIN = "portal.example.com"

T = TypeVar("T")


@dataclass(frozen=True)
class DomainMatcher:
    """Compiled form of a single domain pattern."""
    pattern: str
    regex: Pattern[str]

    def test(self, hostname: str) -> bool:
        """Check whether the whole hostname matches the pattern."""
        return self.regex.fullmatch(hostname) is not None


@lru_cache(maxsize=256)
def compile_domain_pattern(pattern: str) -> DomainMatcher:
    """Compile a domain pattern into an anchored matcher.

    Args:
        pattern: Domain pattern, optionally containing ``*``

    Returns:
        DomainMatcher for the pattern
    """
    regex = ".*".join(re.escape(part) for part in pattern.split("*"))
    logger.log(TRACE, f"Compiled domain pattern {pattern!r} -> {regex!r}")
    return DomainMatcher(pattern=pattern, regex=re.compile(regex))


class DomainPatternSet:
    """The set of managed domain patterns."""

    def __init__(self, patterns: Iterable[str]):
        self.patterns: List[str] = [p for p in patterns if p]
        self._matchers = [compile_domain_pattern(p) for p in self.patterns]

    def __bool__(self) -> bool:
        return bool(self._matchers)

    def __len__(self) -> int:
        return len(self._matchers)

    def matches(self, hostname: str) -> bool:
        """True if any managed pattern matches the hostname."""
        return any(m.test(hostname) for m in self._matchers)

    def filter(self, records: Iterable[T]) -> List[T]:
        """Keep records whose ``hostname`` attribute is managed."""
        return [r for r in records if self.matches(r.hostname)]


def parse_domain_list(raw: str) -> List[str]:
    """Split a comma-separated ``DOMAINS`` value."""
    return [d.strip() for d in (raw or "").split(",") if d.strip()]


def derive_portal_domain(patterns: Sequence[str]) -> str:
    """Pick a portal domain when none is configured.

    The first wildcard pattern with its ``*.`` prefix removed wins, then the
    first plain pattern, then a placeholder.
    """
    for pattern in patterns:
        if "*." in pattern:
            return pattern.replace("*.", "", 1)
    if patterns:
        return patterns[0]
    return DEFAULT_PORTAL_DOMAIN

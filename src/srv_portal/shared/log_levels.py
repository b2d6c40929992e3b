"""Custom logging levels for the SRV portal.

Adds a TRACE level below DEBUG for per-pattern and per-record output
that is too noisy even for debug mode.
"""

import logging

# Define TRACE level (below DEBUG)
TRACE = 5


def setup_trace_logging():
    """Register the TRACE level and a ``Logger.trace`` helper."""
    logging.addLevelName(TRACE, "TRACE")

    def trace(self, message, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, message, args, **kwargs)

    logging.Logger.trace = trace
    return TRACE


def resolve_level(name: str) -> int:
    """Map a level name (including TRACE) to its numeric value."""
    name = (name or "INFO").upper()
    if name == "TRACE":
        return TRACE
    if name == "WARN":
        name = "WARNING"
    return getattr(logging, name, logging.INFO)


# Initialize TRACE level when module is imported
TRACE_LEVEL = setup_trace_logging()

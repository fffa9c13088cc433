"""
Logging utilities for library callers and the operator scripts.

Provides a consistent logging format. The package itself only emits records
through module-level loggers and never configures handlers on import.
"""

import logging
import sys

_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "INFO", *, quiet_http: bool = True) -> None:
    """Configure root logging; keep httpx request lines at WARNING unless asked."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )
    if quiet_http:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["configure_logging"]

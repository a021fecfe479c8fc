"""
Pagecache — Observability Module

Diagnostic sink and structured logging for the cache backend layer.

Usage:
    from pagecache.observability import Diagnostics, configure_logging

    configure_logging("DEBUG")
    diagnostics = Diagnostics("local", debug_enabled=True)
    diagnostics.log("backend OK", logging.INFO)
"""

from .diagnostics import Diagnostics
from .logging import LOGGER_NAME, JSONFormatter, configure_logging

__all__ = [
    "Diagnostics",
    "JSONFormatter",
    "LOGGER_NAME",
    "configure_logging",
]

"""
Pagecache — Diagnostics

The gated diagnostic sink shared by the facade and its driver. Every
operation outcome goes through Diagnostics.log(); whether a line reaches the
underlying logger depends on the configured logging/debug flags.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ..config.schemas import BackendConfig
from .logging import LOGGER_NAME


class Diagnostics:
    """
    Leveled, flag-gated diagnostic sink.

    - logging disabled: nothing is emitted
    - debug disabled: only WARNING and above are emitted
    - debug enabled: every level is emitted

    Structured messages (dicts, lists, tuples) are flattened to a JSON string
    before emission.
    """

    def __init__(
        self,
        backend_type: str,
        logging_enabled: bool = True,
        debug_enabled: bool = False,
        sink: logging.Logger | None = None,
    ):
        self.backend_type = backend_type
        self.logging_enabled = logging_enabled
        self.debug_enabled = debug_enabled
        self.sink = sink or logging.getLogger(LOGGER_NAME)

    @classmethod
    def from_config(cls, config: BackendConfig, sink: logging.Logger | None = None) -> Diagnostics:
        return cls(
            backend_type=config.backend_type.value,
            logging_enabled=config.logging_enabled,
            debug_enabled=config.debug_enabled,
            sink=sink,
        )

    @staticmethod
    def flatten(message: Any) -> str:
        """Serialize a structured message to a flat string."""
        if isinstance(message, str):
            return message
        if isinstance(message, (dict, list, tuple)):
            return json.dumps(message, default=repr, sort_keys=True)
        return str(message)

    def should_emit(self, level: int) -> bool:
        if not self.logging_enabled:
            return False
        return level >= logging.WARNING or self.debug_enabled

    def log(self, message: Any, level: int = logging.WARNING) -> bool:
        """
        Emit a diagnostic line.

        Args:
            message: String or structured message
            level: stdlib logging level

        Returns:
            True if the line was handed to the sink
        """
        if not self.should_emit(level):
            return False

        self.sink.log(
            level,
            "pagecache with %s %s",
            self.backend_type,
            self.flatten(message),
            extra={"backend": self.backend_type},
        )
        return True

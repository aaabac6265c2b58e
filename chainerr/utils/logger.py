"""
Loguru bridge for error chains.

`ErrorLogger` emits an error and its whole cause chain as a single Loguru
record. The human-readable text carries the indented chain summary while the
structured form is bound as ``extra["error"]`` so JSON sinks
(``serialize=True``) and custom handlers receive the nested records.
"""

from __future__ import annotations

from typing import Any, Optional

from loguru import logger

from chainerr.core.rendering import print_cause_chain, render_full_stack, to_structured
from chainerr.utils.settings import get_settings


class ErrorLogger:
    """Thin convenience wrapper around Loguru for cause chains."""

    def __init__(self, level: Optional[str] = None, **context: Any) -> None:
        self.level = level
        self._logger = logger.bind(**context) if context else logger

    def _level(self, level: Optional[str]) -> str:
        return level or self.level or get_settings().get("logging.level")

    def log(self, error: Any, message: Optional[str] = None, level: Optional[str] = None) -> None:
        """Emit ``error`` with its cause chain at ``level``."""
        chain = print_cause_chain(error)
        bound = self._logger.bind(error=to_structured(error))
        if message:
            bound.log(self._level(level), "{}\n{}", message, chain)
        else:
            bound.log(self._level(level), "{}", chain)

    def log_full_stack(self, error: Any) -> None:
        """Emit the flat full stack of ``error`` at debug level."""
        self._logger.debug("{}", render_full_stack(error))

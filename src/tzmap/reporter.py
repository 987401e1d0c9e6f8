"""Diagnostic sink for mapping store errors.

The editor session and the CLI never decide severity themselves: every
caught TzMapError is handed to an ErrorReporter. LoggingErrorReporter is the
default sink and writes to the standard logging hierarchy; CollectingReporter
keeps errors in memory for callers (and tests) that want to inspect them.
"""

from __future__ import annotations

import logging
from typing import Protocol

from .errors import (
    LoadError,
    SaveError,
    StructuralError,
    TzMapError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class ErrorReporter(Protocol):
    def report(self, error: TzMapError) -> None: ...


class LoggingErrorReporter:
    """Log each error with enough context (row, field, value, path) to diagnose."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def report(self, error: TzMapError) -> None:
        if isinstance(error, ValidationError):
            self._log.warning(
                "Cell[%d][%s] has invalid value of '%s'. Removing.",
                error.row,
                error.column,
                error.value,
            )
        elif isinstance(error, LoadError):
            self._log.error("Could not load %s: %s", error.path, error.reason)
        elif isinstance(error, SaveError):
            self._log.error(
                "Could not save timezone mappings to %s: %s", error.path, error.reason
            )
        elif isinstance(error, StructuralError):
            self._log.error("Timezone map table error: %s", error, exc_info=error)
        else:
            self._log.error("%s", error)


class CollectingReporter:
    """Keep reported errors in order; optionally forward to another reporter."""

    def __init__(self, forward: ErrorReporter | None = None) -> None:
        self.errors: list[TzMapError] = []
        self._forward = forward

    def report(self, error: TzMapError) -> None:
        self.errors.append(error)
        if self._forward is not None:
            self._forward.report(error)

    def of_type(self, kind: type[TzMapError]) -> list[TzMapError]:
        return [e for e in self.errors if isinstance(e, kind)]

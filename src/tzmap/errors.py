"""Error taxonomy for the mapping store.

All errors derive from TzMapError so callers can catch the whole family at
the boundary of a user action and hand it to an ErrorReporter.

  - ValidationError: a cell value is not acceptable (row is invalidated).
  - LoadError: the persisted file could not be read; carries the partial table.
  - SaveError: the table could not be written; the old file is untouched.
  - StructuralError: an internal invariant was violated (a bug, not user input).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .table import MappingTable


class TzMapError(Exception):
    """Base class for all mapping store errors."""


class ValidationError(TzMapError):
    """A cell commit carried a value that is not allowed in its column."""

    def __init__(self, row: int, column: str, value: str) -> None:
        self.row = row
        self.column = column
        self.value = value
        super().__init__(
            f"Cell[{row}][{column}] has invalid value of '{value}'"
        )


class LoadError(TzMapError):
    """The mapping file exists but could not be parsed."""

    def __init__(
        self,
        path: Path,
        reason: str,
        partial: MappingTable | None = None,
    ) -> None:
        self.path = path
        self.reason = reason
        self.partial = partial
        super().__init__(f"Could not load timezone mappings from {path}: {reason}")


class SaveError(TzMapError):
    """The mapping file could not be written."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not save timezone mappings to {path}: {reason}")


class StructuralError(TzMapError):
    """The table is in a state that correct callers never produce."""

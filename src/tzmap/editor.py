"""Editing session that binds a MappingTable to a grid view.

The view is any object implementing GridView (render rows, close). It feeds
user actions back through the session callbacks:

  - on_cell_commit(row, column, value): a cell edit was committed.
  - on_error(row, column, value): the view itself rejected a value.
  - on_save(): persist the table and end the session.

Every TzMapError raised by the table or the store is caught here and handed
to the ErrorReporter; none of them ends the session abnormally.

Key class: MappingEditor.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from .errors import LoadError, SaveError, StructuralError, TzMapError, ValidationError
from .known import KnownTimezoneSet
from .reporter import ErrorReporter, LoggingErrorReporter
from .store import load_mappings, save_mappings
from .table import MappingTable
from .types import TimezoneMapping, column_name

logger = logging.getLogger(__name__)


class GridView(Protocol):
    def render_rows(self, rows: Sequence[TimezoneMapping]) -> None: ...

    def close(self) -> None: ...


class MappingEditor:
    """One editing session over the mapping file at *path*."""

    def __init__(
        self,
        path: Path,
        known: KnownTimezoneSet,
        view: GridView,
        reporter: ErrorReporter | None = None,
        indent: int = 4,
    ) -> None:
        self.path = path
        self.known = known
        self.view = view
        self.reporter: ErrorReporter = reporter or LoggingErrorReporter()
        self.indent = indent
        self.table = MappingTable()
        self.closed = False

    @property
    def rows(self) -> list[TimezoneMapping]:
        return self.table.rows

    def open(self, seed: tuple[str, str] | None = None) -> None:
        """Load the mapping file, apply the optional seed row and render."""
        logger.info("Opening timezone mapping editor.")
        try:
            self.table = load_mappings(self.path)
        except LoadError as e:
            self.reporter.report(e)
            self.table = e.partial if e.partial is not None else MappingTable()

        if seed is not None:
            try:
                self.table.append_or_insert(*seed)
            except StructuralError as e:
                self.reporter.report(e)
        self._render()

    def on_cell_commit(self, row: int, column: int | str, value: str) -> bool:
        """Route a cell edit through the table. Returns False if rejected."""
        try:
            if row == len(self.table):
                self.table.add_placeholder()
            self.table.set_cell(row, column, value, known=self.known)
        except TzMapError as e:
            self.reporter.report(e)
            return False
        finally:
            self._render()
        return True

    def on_error(self, row: int, column: int | str, value: str) -> None:
        """The view refused *value*; clear the row and report it once."""
        try:
            name = column_name(column)
            self.table.invalidate(row)
        except KeyError:
            self.reporter.report(StructuralError(f"Unknown mapping column: {column!r}"))
            return
        except StructuralError as e:
            self.reporter.report(e)
            return
        self.reporter.report(ValidationError(row, name, value))
        self._render()

    def on_save(self) -> bool:
        """Persist the table, then close the view whatever the outcome."""
        try:
            save_mappings(self.path, self.table, indent=self.indent)
        except SaveError as e:
            self.reporter.report(e)
            return False
        finally:
            self.close()
        return True

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.view.close()

    def _render(self) -> None:
        self.view.render_rows(self.table.rows)

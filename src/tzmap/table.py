"""In-memory ordered table of timezone mappings.

The table always starts with one empty "placeholder" row, which is the
target of the next addition. Rows are never removed while a session is
open: invalid rows are cleared in place so row indices held by a grid view
stay valid. Blank rows are dropped only by compact_for_save().

Key class: MappingTable.
Key functions: validate_table().
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .errors import StructuralError, ValidationError
from .known import KnownTimezoneSet
from .types import SYSTEM_TZ, TimezoneMapping, column_name

logger = logging.getLogger(__name__)


class MappingTable:
    """Ordered (organiser_tz, system_tz) rows owned by one editing session."""

    def __init__(self, seed: tuple[str, str] | None = None) -> None:
        self._rows: list[TimezoneMapping] = [TimezoneMapping()]
        if seed is not None:
            self.append_or_insert(*seed)

    # --- Read access ---

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[TimezoneMapping]:
        return iter(self._rows)

    def __getitem__(self, index: int) -> TimezoneMapping:
        return self._rows[index]

    def __repr__(self) -> str:
        return f"MappingTable({self._rows!r})"

    @property
    def rows(self) -> list[TimezoneMapping]:
        """The live rows, in display order."""
        return self._rows

    def lookup(self, organiser_tz: str) -> str | None:
        """Return the system timezone mapped to *organiser_tz*, or None.

        When the same organiser id appears more than once the last row wins,
        matching what a user sees as the most recent entry.
        """
        wanted = organiser_tz.strip()
        if not wanted:
            return None
        for row in reversed(self._rows):
            if row.organiser_tz.strip() == wanted and row.system_tz:
                return row.system_tz
        return None

    # --- Mutation ---

    def append_or_insert(self, organiser_tz: str, system_tz: str) -> int:
        """Write a mapping after the last populated row.

        Fills the trailing placeholder if there is one, otherwise inserts a
        new row right after the last row. Returns the index written.
        """
        if not self._rows:
            raise StructuralError("Mapping table has no rows to append after")
        last = len(self._rows) - 1
        if self._rows[last].organiser_tz:
            last += 1
            self._rows.insert(last, TimezoneMapping())
        self._rows[last].organiser_tz = organiser_tz
        self._rows[last].system_tz = system_tz
        return last

    def add_placeholder(self) -> int:
        """Ensure the table ends with an empty row and return its index."""
        if not self._rows or self._rows[-1].organiser_tz:
            self._rows.append(TimezoneMapping())
        return len(self._rows) - 1

    def invalidate(self, row_index: int) -> None:
        """Clear both fields of a row without removing it."""
        self._row(row_index).clear()

    def set_cell(
        self,
        row_index: int,
        column: int | str,
        value: str,
        known: KnownTimezoneSet | None = None,
    ) -> None:
        """Write a single cell, validating system timezones against *known*.

        An invalid system timezone clears the whole row and raises
        ValidationError; the row stays in place.
        """
        row = self._row(row_index)
        try:
            name = column_name(column)
        except KeyError:
            raise StructuralError(f"Unknown mapping column: {column!r}") from None

        value = value if value is not None else ""
        if name == SYSTEM_TZ and known is not None and not known.is_valid(value):
            row.clear()
            raise ValidationError(row_index, name, value)
        row.set(name, value)

    # --- Projection ---

    def compact_for_save(self) -> list[TimezoneMapping]:
        """Copies of the rows worth persisting (organiser id not blank)."""
        return [
            TimezoneMapping(row.organiser_tz, row.system_tz)
            for row in self._rows
            if not row.is_blank
        ]

    def _row(self, row_index: int) -> TimezoneMapping:
        if not 0 <= row_index < len(self._rows):
            raise StructuralError(
                f"Row {row_index} out of range for table of {len(self._rows)} rows"
            )
        return self._rows[row_index]


def validate_table(
    table: MappingTable, known: KnownTimezoneSet
) -> list[ValidationError]:
    """Return one ValidationError per row whose system timezone is unknown.

    Read-only: unlike set_cell(), rows are reported but not cleared.
    """
    errors: list[ValidationError] = []
    for index, row in enumerate(table):
        if not known.is_valid(row.system_tz):
            errors.append(ValidationError(index, SYSTEM_TZ, row.system_tz))
    if errors:
        logger.debug("%d mapping(s) reference unknown system timezones", len(errors))
    return errors

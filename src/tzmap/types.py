"""Data models for the timezone mapping table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Persisted field names, also used as grid column names (in column order)
ORGANISER_TZ = "OrganiserTz"
SYSTEM_TZ = "SystemTz"
COLUMNS: tuple[str, str] = (ORGANISER_TZ, SYSTEM_TZ)


def column_name(column: int | str) -> str:
    """Normalize a column index or name to its name.

    Raises KeyError for anything that is not one of COLUMNS.
    """
    if isinstance(column, int):
        if 0 <= column < len(COLUMNS):
            return COLUMNS[column]
        raise KeyError(column)
    if column in COLUMNS:
        return column
    raise KeyError(column)


@dataclass
class TimezoneMapping:
    """One row: organiser timezone id -> system timezone id."""

    organiser_tz: str = ""  # as reported by the calendar service
    system_tz: str = ""  # key of KnownTimezoneSet, or empty

    @property
    def is_blank(self) -> bool:
        """True for placeholder rows (no usable organiser id)."""
        return not self.organiser_tz.strip()

    def clear(self) -> None:
        self.organiser_tz = ""
        self.system_tz = ""

    def get(self, column: int | str) -> str:
        if column_name(column) == ORGANISER_TZ:
            return self.organiser_tz
        return self.system_tz

    def set(self, column: int | str, value: str) -> None:
        if column_name(column) == ORGANISER_TZ:
            self.organiser_tz = value
        else:
            self.system_tz = value

    def to_dict(self) -> dict[str, Any]:
        return {ORGANISER_TZ: self.organiser_tz, SYSTEM_TZ: self.system_tz}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimezoneMapping:
        return cls(
            organiser_tz=data.get(ORGANISER_TZ) or "",
            system_tz=data.get(SYSTEM_TZ) or "",
        )

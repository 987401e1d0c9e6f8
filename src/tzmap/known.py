"""Known system timezones, read once per session from the host.

The host timezone provider is any callable returning (identifier, display
name) pairs; the default one enumerates the IANA database through
zoneinfo. The resulting KnownTimezoneSet is immutable and is used both to
populate the selectable values of a grid view and to reject unknown ids.

Key class: KnownTimezoneSet.
Key functions: host_timezones(), display_name().
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from datetime import datetime, timezone
from types import MappingProxyType
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

logger = logging.getLogger(__name__)

TimezoneProvider = Callable[[], Iterable[tuple[str, str]]]


def display_name(tz_id: str, when: datetime | None = None) -> str | None:
    """Return "(UTC+hh:mm) <id>" for a zoneinfo key, or None if unknown."""
    try:
        tz = ZoneInfo(tz_id)
    except (ZoneInfoNotFoundError, ValueError):
        logger.debug("Skipping unloadable timezone: %s", tz_id)
        return None
    when = when or datetime.now(timezone.utc)
    offset = when.astimezone(tz).utcoffset()
    if offset is None:
        return f"(UTC) {tz_id}"
    minutes = int(offset.total_seconds()) // 60
    sign = "+" if minutes >= 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return f"(UTC{sign}{hours:02d}:{mins:02d}) {tz_id}"


def host_timezones() -> list[tuple[str, str]]:
    """All timezones known to the running host, sorted by identifier."""
    now = datetime.now(timezone.utc)
    pairs: list[tuple[str, str]] = []
    for tz_id in sorted(available_timezones()):
        name = display_name(tz_id, now)
        if name is not None:
            pairs.append((tz_id, name))
    logger.debug("Host provides %d system timezones", len(pairs))
    return pairs


class KnownTimezoneSet(Mapping[str, str]):
    """Read-only mapping of system timezone id -> display name."""

    def __init__(self, pairs: Iterable[tuple[str, str]]) -> None:
        self._names = MappingProxyType(dict(pairs))

    @classmethod
    def from_host(cls, provider: TimezoneProvider | None = None) -> KnownTimezoneSet:
        """Build the set from *provider*, defaulting to host_timezones()."""
        return cls((provider or host_timezones)())

    def __getitem__(self, tz_id: str) -> str:
        return self._names[tz_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def is_valid(self, system_tz: str) -> bool:
        """Empty means "not chosen yet" and is always accepted."""
        return not system_tz or system_tz in self._names

    def search(self, text: str) -> list[tuple[str, str]]:
        """Case-insensitive substring match over ids and display names."""
        needle = text.lower()
        return [
            (tz_id, name)
            for tz_id, name in self._names.items()
            if needle in tz_id.lower() or needle in name.lower()
        ]

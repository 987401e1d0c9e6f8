"""Shared fixtures for tzmap tests."""

from pathlib import Path

import pytest

from tzmap.known import KnownTimezoneSet


@pytest.fixture
def known() -> KnownTimezoneSet:
    return KnownTimezoneSet(
        [
            ("America/Los_Angeles", "(UTC-08:00) America/Los_Angeles"),
            ("Europe/Berlin", "(UTC+01:00) Europe/Berlin"),
            ("Asia/Taipei", "(UTC+08:00) Asia/Taipei"),
        ]
    )


@pytest.fixture
def map_path(tmp_path: Path) -> Path:
    return tmp_path / "tzmap.xml"

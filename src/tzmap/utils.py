"""Shared path helpers."""

from __future__ import annotations

import os
from pathlib import Path

DIR_ENV_VAR = "TZMAP_DIR"


def tzmap_dir() -> Path:
    """Config directory: $TZMAP_DIR if set, else ~/.tzmap."""
    raw = os.environ.get(DIR_ENV_VAR, "").strip()
    if raw:
        return Path(os.path.expanduser(raw))
    return Path.home() / ".tzmap"

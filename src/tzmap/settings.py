"""Settings — reads .env + optional settings.toml to produce a TzMapConfig.

settings.toml is optional; every key has a default. Recognized keys under
the [tzmap] table:

    map_file = "tzmap.xml"   # mapping file name inside the config dir
    indent = 4               # XML indentation width (0 disables)
    log_level = "INFO"       # level of the "tzmap" logger

TZMAP_LOG_LEVEL in the environment (or a .env file) overrides log_level.

Key entities:
  - TzMapConfig: frozen dataclass with all resolved config.
  - load_settings(): parse .env + settings.toml -> TzMapConfig.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .store import DEFAULT_MAP_FILE, mappings_path
from .utils import tzmap_dir

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class TzMapConfig:
    """Resolved configuration for one tzmap run."""

    config_dir: Path = field(default_factory=lambda: tzmap_dir())
    map_file: str = DEFAULT_MAP_FILE
    indent: int = 4
    log_level: str = "INFO"

    @property
    def map_path(self) -> Path:
        return mappings_path(self.config_dir, self.map_file)

    @property
    def settings_file(self) -> Path:
        return self.config_dir / "settings.toml"


def load_settings(config_dir: Path | None = None) -> TzMapConfig:
    """Read .env + settings.toml and return a TzMapConfig.

    Args:
        config_dir: Override for the base config directory.
                    Defaults to ``tzmap_dir()``.
    """
    if config_dir is None:
        config_dir = tzmap_dir()

    # Load .env files (local cwd first, then config_dir)
    local_env = Path(".env")
    global_env = config_dir / ".env"
    if local_env.is_file():
        load_dotenv(local_env)
    if global_env.is_file():
        load_dotenv(global_env)

    raw: dict = {}
    toml_path = config_dir / "settings.toml"
    if toml_path.is_file():
        with open(toml_path, "rb") as f:
            raw = tomllib.load(f).get("tzmap", {})
    else:
        logger.debug("No settings file at %s, using defaults", toml_path)

    map_file = str(raw.get("map_file", DEFAULT_MAP_FILE)).strip()
    if not map_file or Path(map_file).name != map_file:
        raise ValueError(f"map_file must be a plain file name, got {map_file!r}")

    indent = raw.get("indent", 4)
    if not isinstance(indent, int) or isinstance(indent, bool) or indent < 0:
        raise ValueError(f"indent must be a non-negative integer, got {indent!r}")

    log_level = os.getenv("TZMAP_LOG_LEVEL") or str(raw.get("log_level", "INFO"))
    log_level = log_level.upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"Unknown log_level {log_level!r}")

    return TzMapConfig(
        config_dir=config_dir,
        map_file=map_file,
        indent=indent,
        log_level=log_level,
    )

"""XML persistence for the timezone mapping table.

File layout (one TimeZoneMap record per mapping, fields in this order):

    <TimeZoneMaps>
        <TimeZoneMap>
            <OrganiserTz>Pacific Standard Time</OrganiserTz>
            <SystemTz>America/Los_Angeles</SystemTz>
        </TimeZoneMap>
    </TimeZoneMaps>

A missing file and a file with no root element both mean "no mappings".
Saves go through a temp file in the same directory and os.replace(), so a
failed save never leaves a half-written mapping file behind.
"""

from __future__ import annotations

import logging
import os
import re
import stat
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from xml.parsers.expat import errors as expat_errors

from .errors import LoadError, SaveError
from .table import MappingTable
from .types import ORGANISER_TZ, SYSTEM_TZ, TimezoneMapping

logger = logging.getLogger(__name__)

DEFAULT_MAP_FILE = "tzmap.xml"
ROOT_TAG = "TimeZoneMaps"
RECORD_TAG = "TimeZoneMap"

# expat code for "no element found" (empty document / root element missing)
_NO_ELEMENTS = expat_errors.codes[expat_errors.XML_ERROR_NO_ELEMENTS]

_XML_DECLARATION = b"<?xml version='1.0' encoding='utf-8'?>\n"

# Outside the XML 1.0 Char production (lone surrogates can't be encoded either)
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def mappings_path(config_dir: Path, file_name: str = DEFAULT_MAP_FILE) -> Path:
    """Return the path of the mapping file inside *config_dir*."""
    return config_dir / file_name


def store_mtime(path: Path) -> float:
    """Return mtime of the mapping file, or 0.0 if not found."""
    try:
        return path.stat().st_mtime
    except OSError:
        return 0.0


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------


def _parse_root(path: Path) -> ET.Element | None:
    """Parse *path* and return its root element, or None if it has none.

    A document that starts an element and then breaks off is corrupt, not
    empty, even though expat reports both as "no element found".
    """
    root: ET.Element | None = None
    try:
        with open(path, "rb") as f:
            for _event, elem in ET.iterparse(f, events=("start",)):
                if root is None:
                    root = elem
    except ET.ParseError as e:
        if e.code == _NO_ELEMENTS and root is None:
            return None
        raise
    return root


def load_mappings(path: Path) -> MappingTable:
    """Read the mapping file into a fresh table.

    Returns a table holding just the placeholder row when the file is
    missing or empty. Raises LoadError (with the partially filled table)
    for anything else that prevents reading the file.
    """
    table = MappingTable()
    if not path.is_file():
        logger.debug("No timezone mapping file at %s", path)
        return table

    logger.debug("Loading timezone mappings from %s", path)
    try:
        root = _parse_root(path)
    except ET.ParseError as e:
        raise LoadError(path, str(e), table) from e
    except OSError as e:
        raise LoadError(path, str(e), table) from e

    if root is None:
        logger.debug("%s is empty.", path.name)
        return table
    if root.tag != ROOT_TAG:
        raise LoadError(path, f"unexpected root element <{root.tag}>", table)

    for index, record in enumerate(root.findall(RECORD_TAG)):
        organiser = record.find(ORGANISER_TZ)
        if organiser is None:
            raise LoadError(
                path, f"record #{index} has no <{ORGANISER_TZ}> element", table
            )
        system = record.find(SYSTEM_TZ)
        organiser_tz = organiser.text or ""
        # The .NET DataSet writer omits null columns entirely
        system_tz = (system.text if system is not None else None) or ""
        if not organiser_tz.strip():
            logger.debug("Skipping record #%d with blank %s", index, ORGANISER_TZ)
            continue
        table.append_or_insert(organiser_tz, system_tz)

    logger.debug("Loaded %d timezone mapping(s)", len(table.compact_for_save()))
    return table


# ---------------------------------------------------------------------------
# Save
# ---------------------------------------------------------------------------


def _check_storable(path: Path, rows: list[TimezoneMapping]) -> None:
    """Raise SaveError if a value holds a character XML 1.0 cannot carry."""
    for index, row in enumerate(rows):
        for name in (ORGANISER_TZ, SYSTEM_TZ):
            match = _XML_ILLEGAL.search(row.get(name))
            if match is not None:
                raise SaveError(
                    path,
                    f"mapping #{index} {name} contains character "
                    f"{match.group()!r} that XML cannot store",
                )


def _build_root(rows: list[TimezoneMapping], indent: int) -> ET.Element:
    root = ET.Element(ROOT_TAG)
    for row in rows:
        record = ET.SubElement(root, RECORD_TAG)
        ET.SubElement(record, ORGANISER_TZ).text = row.organiser_tz
        ET.SubElement(record, SYSTEM_TZ).text = row.system_tz
    if indent > 0:
        ET.indent(root, space=" " * indent)
    return root


def _serialize(root: ET.Element) -> bytes:
    # Parsers normalize a raw CR to LF; a character reference survives
    text = ET.tostring(root, encoding="unicode").replace("\r", "&#13;")
    return text.encode("utf-8") + b"\n"


def save_mappings(path: Path, table: MappingTable, indent: int = 4) -> int:
    """Write the non-blank rows of *table* to *path* atomically.

    Returns the number of records written. Raises SaveError on failure, in
    which case the previous file content is left as it was. An existing
    file keeps its permission bits.
    """
    rows = table.compact_for_save()
    _check_storable(path, rows)
    root = _build_root(rows, indent)
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(_XML_DECLARATION)
            tmp.write(_serialize(root))
            tmp.flush()
            os.fsync(tmp.fileno())
        if path.exists():
            os.chmod(tmp_name, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp_name, path)
    except (OSError, ValueError) as e:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
        raise SaveError(path, str(e)) from e

    logger.info("Saved %d timezone mapping(s) to %s", len(rows), path)
    return len(rows)

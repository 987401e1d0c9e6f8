"""Application entry point — CLI dispatcher for the mapping store.

Subcommands:
  1. `tzmap list` — print the persisted mappings.
  2. `tzmap add <organiser> <system>` — validate, append and save one mapping.
  3. `tzmap check` — report mappings whose system timezone the host doesn't know.
  4. `tzmap zones [filter]` — list known system timezones.
  5. `tzmap edit [<organiser> <system>]` — interactive console editor, optionally
     seeded with an unmapped organiser timezone.

Every subcommand returns an exit status; errors are routed through the
logging ErrorReporter and never raise out of main().
"""

import logging
import sys

USAGE = """\
Usage: tzmap <command> [args]

  list                          show saved timezone mappings
  add <organiser> <system>      add a mapping and save
  check                         report mappings with unknown system timezones
  zones [filter]                list system timezones known to this host
  edit [<organiser> <system>]   open the interactive editor
"""


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.WARNING,
    )
    logging.getLogger("tzmap").setLevel(level)


def _cmd_list(cfg) -> int:
    from .console import format_rows
    from .errors import LoadError
    from .reporter import LoggingErrorReporter
    from .store import load_mappings

    try:
        table = load_mappings(cfg.map_path)
    except LoadError as e:
        LoggingErrorReporter().report(e)
        return 1
    rows = table.compact_for_save()
    if not rows:
        print(f"No timezone mappings in {cfg.map_path}")
        return 0
    print(format_rows(rows))
    return 0


def _cmd_add(cfg, organiser_tz: str, system_tz: str) -> int:
    from .errors import LoadError, SaveError, StructuralError, ValidationError
    from .known import KnownTimezoneSet
    from .reporter import LoggingErrorReporter
    from .store import load_mappings, save_mappings
    from .types import SYSTEM_TZ

    reporter = LoggingErrorReporter()
    if not organiser_tz.strip():
        print("Error: organiser timezone must not be empty.")
        return 1

    known = KnownTimezoneSet.from_host()
    try:
        table = load_mappings(cfg.map_path)
    except LoadError as e:
        # Refuse to overwrite a file we could not read
        reporter.report(e)
        return 1

    row = table.append_or_insert(organiser_tz, "")
    try:
        table.set_cell(row, SYSTEM_TZ, system_tz, known=known)
        save_mappings(cfg.map_path, table, indent=cfg.indent)
    except ValidationError as e:
        reporter.report(e)
        print(f"Error: '{system_tz}' is not a known system timezone.")
        return 1
    except (SaveError, StructuralError) as e:
        reporter.report(e)
        return 1
    print(f"Mapped '{organiser_tz}' -> '{system_tz}'")
    return 0


def _cmd_check(cfg) -> int:
    from .errors import LoadError
    from .known import KnownTimezoneSet
    from .reporter import LoggingErrorReporter
    from .store import load_mappings
    from .table import validate_table

    try:
        table = load_mappings(cfg.map_path)
    except LoadError as e:
        LoggingErrorReporter().report(e)
        return 1
    errors = validate_table(table, KnownTimezoneSet.from_host())
    for err in errors:
        print(f"Row {err.row}: '{table[err.row].organiser_tz}' -> unknown '{err.value}'")
    if errors:
        return 1
    print(f"All {len(table.compact_for_save())} mapping(s) are valid.")
    return 0


def _cmd_zones(text: str = "") -> int:
    from .known import KnownTimezoneSet

    known = KnownTimezoneSet.from_host()
    pairs = known.search(text) if text else list(known.items())
    for tz_id, name in pairs:
        print(f"{tz_id:<40} {name}")
    return 0


def _cmd_edit(cfg, seed: tuple[str, str] | None = None) -> int:
    from .console import HELP_TEXT, ConsoleGridView
    from .editor import MappingEditor
    from .known import KnownTimezoneSet

    view = ConsoleGridView()
    editor = MappingEditor(
        cfg.map_path, KnownTimezoneSet.from_host(), view, indent=cfg.indent
    )
    print(HELP_TEXT)
    editor.open(seed=seed)
    view.run(editor)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = sys.argv[1:] if argv is None else argv
    if not args or args[0] in ("-h", "--help", "help"):
        print(USAGE)
        return 0

    from .settings import load_settings

    try:
        cfg = load_settings()
    except (ValueError, OSError) as e:
        print(f"Error: invalid settings: {e}")
        return 2
    _configure_logging(cfg.log_level)

    cmd, rest = args[0], args[1:]
    if cmd == "list" and not rest:
        return _cmd_list(cfg)
    if cmd == "add" and len(rest) == 2:
        return _cmd_add(cfg, rest[0], rest[1])
    if cmd == "check" and not rest:
        return _cmd_check(cfg)
    if cmd == "zones" and len(rest) <= 1:
        return _cmd_zones(rest[0] if rest else "")
    if cmd == "edit" and len(rest) in (0, 2):
        return _cmd_edit(cfg, (rest[0], rest[1]) if rest else None)

    print(USAGE)
    return 2


if __name__ == "__main__":
    sys.exit(main())

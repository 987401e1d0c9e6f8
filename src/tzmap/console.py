"""Plain-text grid view for the mapping editor.

ConsoleGridView renders the table as an indexed two-column listing and
runs a small command loop that turns typed commands into MappingEditor
callbacks:

    set <row> <column> <value>   column is 0/1 or OrganiserTz/SystemTz
    add <organiser> <system>     append after the last mapping
    clear <row>                  empty both cells of a row
    save                         save and close
    quit                         close without saving
    help

Values containing spaces may be quoted ("Pacific Standard Time").
"""

from __future__ import annotations

import shlex
import sys
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, TextIO

from .types import COLUMNS, TimezoneMapping

if TYPE_CHECKING:
    from .editor import MappingEditor

HELP_TEXT = """\
Commands:
  set <row> <column> <value>   edit a cell (column: 0/1 or OrganiserTz/SystemTz)
  add <organiser> <system>     add a mapping
  clear <row>                  clear a row
  save                         save and exit
  quit                         exit without saving
"""


def format_rows(rows: Sequence[TimezoneMapping]) -> str:
    """Render rows as an aligned table with a header line."""
    width = max([len(COLUMNS[0])] + [len(r.organiser_tz) for r in rows])
    lines = [f"  #  {COLUMNS[0]:<{width}}  {COLUMNS[1]}"]
    for index, row in enumerate(rows):
        marker = "*" if row.is_blank else " "
        lines.append(f"{marker}{index:>2}  {row.organiser_tz:<{width}}  {row.system_tz}")
    return "\n".join(lines)


class ConsoleGridView:
    """GridView that prints to a text stream."""

    def __init__(self, out: TextIO | None = None) -> None:
        self.out = out or sys.stdout
        self.closed = False

    def render_rows(self, rows: Sequence[TimezoneMapping]) -> None:
        print(format_rows(rows), file=self.out)

    def close(self) -> None:
        self.closed = True

    def run(
        self,
        editor: MappingEditor,
        read_line: Callable[[str], str] | None = None,
    ) -> None:
        """Read commands until the editor is closed or input ends."""
        read = read_line or input
        while not editor.closed:
            try:
                line = read("tzmap> ")
            except EOFError:
                editor.close()
                break
            self.handle(editor, line)

    def handle(self, editor: MappingEditor, line: str) -> None:
        """Dispatch one command line to the editor."""
        try:
            parts = shlex.split(line)
        except ValueError as e:
            print(f"Error: {e}", file=self.out)
            return
        if not parts:
            return

        cmd, args = parts[0].lower(), parts[1:]
        if cmd == "set" and len(args) == 3 and args[0].isdigit():
            column: int | str = int(args[1]) if args[1].isdigit() else args[1]
            editor.on_cell_commit(int(args[0]), column, args[2])
        elif cmd == "add" and len(args) == 2:
            row = len(editor.rows)
            if editor.rows and editor.rows[-1].is_blank:
                row -= 1
            if editor.on_cell_commit(row, COLUMNS[1], args[1]):
                editor.on_cell_commit(row, COLUMNS[0], args[0])
        elif cmd == "clear" and len(args) == 1 and args[0].isdigit():
            if int(args[0]) < len(editor.rows):
                editor.table.invalidate(int(args[0]))
                self.render_rows(editor.rows)
            else:
                print(f"Error: no row {args[0]}", file=self.out)
        elif cmd == "save":
            if editor.on_save():
                print(f"Saved to {editor.path}", file=self.out)
            else:
                print("Save failed; see log for details.", file=self.out)
        elif cmd == "quit":
            editor.close()
        elif cmd == "help":
            print(HELP_TEXT, file=self.out)
        else:
            print(f"Unknown command: {line.strip()}", file=self.out)
            print(HELP_TEXT, file=self.out)

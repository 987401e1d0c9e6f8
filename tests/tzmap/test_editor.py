"""Tests for MappingEditor — grid view binding, error routing, save-and-close."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from tzmap.editor import MappingEditor
from tzmap.errors import LoadError, SaveError, StructuralError, ValidationError
from tzmap.reporter import CollectingReporter
from tzmap.store import load_mappings, save_mappings
from tzmap.table import MappingTable
from tzmap.types import ORGANISER_TZ, SYSTEM_TZ


def _editor(map_path: Path, known) -> tuple[MappingEditor, MagicMock, CollectingReporter]:
    view = MagicMock()
    reporter = CollectingReporter()
    return MappingEditor(map_path, known, view, reporter), view, reporter


class TestOpen:
    def test_missing_file_renders_placeholder(self, map_path: Path, known):
        editor, view, reporter = _editor(map_path, known)
        editor.open()
        assert len(editor.rows) == 1
        assert editor.rows[0].is_blank
        view.render_rows.assert_called_once_with(editor.rows)
        assert reporter.errors == []

    def test_seed_after_loaded_rows(self, map_path: Path, known):
        save_mappings(map_path, MappingTable(seed=("A", "Asia/Taipei")))
        editor, _view, _ = _editor(map_path, known)
        editor.open(seed=("Pacific Standard Time", "America/Los_Angeles"))
        assert [r.organiser_tz for r in editor.rows] == ["A", "Pacific Standard Time"]

    def test_corrupt_file_reported_and_editor_opens(self, map_path: Path, known):
        map_path.write_text("<TimeZoneMaps><oops>")
        editor, view, reporter = _editor(map_path, known)
        editor.open(seed=("X", "Asia/Taipei"))
        assert len(reporter.of_type(LoadError)) == 1
        assert [r.organiser_tz for r in editor.rows] == ["X"]
        view.render_rows.assert_called_once()

    def test_partial_table_kept(self, map_path: Path, known):
        map_path.write_text(
            "<TimeZoneMaps>"
            "<TimeZoneMap><OrganiserTz>A</OrganiserTz><SystemTz>Asia/Taipei</SystemTz></TimeZoneMap>"
            "<TimeZoneMap />"
            "</TimeZoneMaps>"
        )
        editor, _view, reporter = _editor(map_path, known)
        editor.open()
        assert len(reporter.errors) == 1
        assert editor.rows[0].organiser_tz == "A"


class TestCellCommit:
    def test_valid_commit(self, map_path: Path, known):
        editor, view, reporter = _editor(map_path, known)
        editor.open()
        assert editor.on_cell_commit(0, ORGANISER_TZ, "W. Europe Standard Time")
        assert editor.on_cell_commit(0, SYSTEM_TZ, "Europe/Berlin")
        assert editor.rows[0].system_tz == "Europe/Berlin"
        assert reporter.errors == []
        assert view.render_rows.call_count == 3

    def test_invalid_system_tz_clears_row_and_reports_once(self, map_path: Path, known):
        editor, _view, reporter = _editor(map_path, known)
        editor.open(seed=("A", "Asia/Taipei"))
        assert not editor.on_cell_commit(0, 1, "Bogus/Zone")
        assert len(editor.rows) == 1
        assert editor.rows[0].organiser_tz == ""
        assert editor.rows[0].system_tz == ""
        assert len(reporter.errors) == 1
        err = reporter.errors[0]
        assert isinstance(err, ValidationError)
        assert (err.row, err.column, err.value) == (0, SYSTEM_TZ, "Bogus/Zone")

    def test_commit_past_end_adds_row(self, map_path: Path, known):
        editor, _view, reporter = _editor(map_path, known)
        editor.open(seed=("A", "Asia/Taipei"))
        assert editor.on_cell_commit(1, ORGANISER_TZ, "B")
        assert [r.organiser_tz for r in editor.rows] == ["A", "B"]
        assert reporter.errors == []

    def test_commit_out_of_range_is_structural(self, map_path: Path, known):
        editor, view, reporter = _editor(map_path, known)
        editor.open()
        assert not editor.on_cell_commit(7, ORGANISER_TZ, "B")
        assert len(reporter.of_type(StructuralError)) == 1
        assert view.render_rows.call_count == 2


class TestOnError:
    def test_invalidates_row(self, map_path: Path, known):
        editor, _view, reporter = _editor(map_path, known)
        editor.open(seed=("A", "Asia/Taipei"))
        editor.on_error(0, 1, "Bad/Value")
        assert editor.rows[0].is_blank
        assert len(editor.rows) == 1
        assert len(reporter.of_type(ValidationError)) == 1

    def test_bad_row(self, map_path: Path, known):
        editor, _view, reporter = _editor(map_path, known)
        editor.open()
        editor.on_error(4, 1, "x")
        assert len(reporter.of_type(StructuralError)) == 1


class TestSave:
    def test_save_persists_and_closes(self, map_path: Path, known):
        editor, view, reporter = _editor(map_path, known)
        editor.open(seed=("Pacific Standard Time", "America/Los_Angeles"))
        editor.on_cell_commit(1, ORGANISER_TZ, "Central European Time")
        editor.on_cell_commit(1, SYSTEM_TZ, "Europe/Berlin")
        assert editor.on_save()
        view.close.assert_called_once()
        assert editor.closed
        assert [
            (r.organiser_tz, r.system_tz) for r in load_mappings(map_path).compact_for_save()
        ] == [
            ("Pacific Standard Time", "America/Los_Angeles"),
            ("Central European Time", "Europe/Berlin"),
        ]
        assert reporter.errors == []

    def test_failed_save_still_closes(self, map_path: Path, known):
        editor, view, reporter = _editor(map_path, known)
        editor.open(seed=("A", "Asia/Taipei"))
        with patch(
            "tzmap.editor.save_mappings",
            side_effect=SaveError(map_path, "read-only file system"),
        ):
            assert not editor.on_save()
        view.close.assert_called_once()
        assert len(reporter.of_type(SaveError)) == 1

    def test_close_is_idempotent(self, map_path: Path, known):
        editor, view, _ = _editor(map_path, known)
        editor.close()
        editor.close()
        view.close.assert_called_once()

"""Tests for display and widget formatting helpers."""

from pathlib import Path
from unittest.mock import patch

from dircensus.display import count_label, show_census, type_label
from dircensus.models import PARENT_LABEL, DirectoryEntry
from dircensus.tui.widgets import KEY_HINTS, key_hints, row_cells


def entry(name, is_dir=True, count=None, is_parent=False):
    return DirectoryEntry(
        name=name, path=Path("/p") / name, is_dir=is_dir, file_count=count, is_parent=is_parent
    )


class TestLabels:
    def test_type_label(self):
        assert "Dir" in type_label(entry("a"))
        assert "blue" in type_label(entry("a"))
        assert "File" in type_label(entry("a", is_dir=False))

    def test_count_label_known(self):
        assert count_label(entry("a", count=12)) == "12"

    def test_count_label_pending(self):
        assert count_label(entry("a"), spinner=".. ") == ".. "

    def test_count_label_file(self):
        assert count_label(entry("a", is_dir=False)) == "-"


class TestShowCensus:
    def test_prints_rows(self):
        with patch("dircensus.display.console") as mock_console:
            show_census("/p (Total files: 3)", [entry("src", count=3), entry("a.txt", is_dir=False)])
            assert mock_console.print.call_count >= 2

    def test_empty_listing(self):
        with patch("dircensus.display.console") as mock_console:
            show_census("/p (Total files: 0)", [])
            printed = " ".join(str(c) for c in mock_console.print.call_args_list)
            assert "empty" in printed


class TestRowCells:
    def test_directory_row(self):
        type_cell, name_cell, count_cell = row_cells(entry("src", count=4), "...")
        assert type_cell.plain == "Dir"
        assert name_cell.plain == "src"
        assert count_cell.plain == "4"

    def test_pending_row_shows_spinner(self):
        _, _, count_cell = row_cells(entry("src"), ".  ")
        assert count_cell.plain == ".  "

    def test_file_row(self):
        type_cell, _, count_cell = row_cells(entry("a.txt", is_dir=False), "...")
        assert type_cell.plain == "File"
        assert count_cell.plain == "-"

    def test_parent_row_is_green(self):
        _, name_cell, _ = row_cells(entry(PARENT_LABEL, count=1, is_parent=True), "...")
        assert name_cell.plain == PARENT_LABEL
        assert "green" in str(name_cell.style)

    def test_name_with_brackets_kept_literal(self):
        _, name_cell, _ = row_cells(entry("[red]x[/red]", is_dir=False), "...")
        assert name_cell.plain == "[red]x[/red]"


class TestKeyHints:
    def test_lists_every_binding(self):
        text = key_hints().plain
        for hint in KEY_HINTS:
            assert hint in text
        assert text.count(" | ") == len(KEY_HINTS) - 1

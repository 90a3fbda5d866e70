"""Custom widgets for the dircensus TUI."""

from rich.text import Text
from textual import events
from textual.coordinate import Coordinate
from textual.message import Message
from textual.widgets import DataTable, Static

from dircensus.display import count_label
from dircensus.models import DirectoryEntry

KEY_HINTS = ["q - Quit", "↑/↓/k/j - Move", "Enter - Open", "h - Home"]


def row_cells(entry: DirectoryEntry, spinner: str) -> tuple[Text, Text, Text]:
    """Type, Name and Count cells for one listing row."""
    if entry.is_dir:
        type_cell = Text("Dir", style="blue")
    else:
        type_cell = Text("File", style="grey62")

    name_cell = Text(entry.name, style="green" if entry.is_parent else "")
    count_cell = Text(count_label(entry, spinner), justify="right")
    return type_cell, name_cell, count_cell


def key_hints() -> Text:
    """Footer line listing the key bindings."""
    text = Text()
    for i, hint in enumerate(KEY_HINTS):
        if i:
            text.append(" | ")
        text.append(hint, style="bold yellow")
    return text


class DirectoryHeader(Static):
    """Current directory path with its total file count."""

    def show(self, header: str) -> None:
        self.update(Text(header))


class CensusTable(DataTable):
    """Listing table whose cursor mirrors the engine selection."""

    class RowActivated(Message):
        """A data row was clicked."""

        def __init__(self, row: int) -> None:
            self.row = row
            super().__init__()

    def row_at(self, event: events.MouseEvent) -> int | None:
        """Data row under the pointer, or None for the header and empty space."""
        offset = event.get_content_offset(self)
        if offset is None:
            return None
        # Rows are one line high and the header does not scroll
        y = offset.y - (self.header_height if self.show_header else 0)
        if y < 0:
            return None
        row = y + self.scroll_offset.y
        return row if row < self.row_count else None

    def on_click(self, event: events.Click) -> None:
        row = self.row_at(event)
        if row is not None:
            self.post_message(self.RowActivated(row))

    def show_entries(
        self,
        entries: list[DirectoryEntry],
        selected: int | None,
        spinner: str,
    ) -> None:
        """Replace all rows and restore the cursor."""
        self.clear()
        for entry in entries:
            self.add_row(*row_cells(entry, spinner))
        if selected is not None:
            self.move_cursor(row=selected)

    def animate_pending(self, entries: list[DirectoryEntry], spinner: str) -> None:
        """Advance the spinner in rows that are still counting."""
        for row, entry in enumerate(entries):
            if entry.is_counting and row < self.row_count:
                self.update_cell_at(
                    Coordinate(row, 2), Text(spinner, justify="right")
                )

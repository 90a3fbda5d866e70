"""Main TUI application for dircensus."""

import logging
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import DataTable, Static

from dircensus.cache import CensusCache
from dircensus.config import BrowserConfig
from dircensus.dispatcher import WorkDispatcher
from dircensus.navigation import NavigationEngine
from dircensus.tui.widgets import CensusTable, DirectoryHeader, key_hints

logger = logging.getLogger(__name__)


class CensusApp(App):
    """Directory browser showing recursive file counts."""

    TITLE = "dircensus"

    CSS_PATH = "styles.tcss"

    # Priority: the table has its own up/down/enter bindings
    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("up,k", "retreat", "Up", priority=True),
        Binding("down,j", "advance", "Down", priority=True),
        Binding("enter", "open", "Open", priority=True),
        Binding("h", "home", "Home", priority=True),
    ]

    def __init__(self, start_dir: Path, config: BrowserConfig | None = None):
        super().__init__()
        self.config = config or BrowserConfig()
        self.dispatcher = WorkDispatcher(CensusCache(), max_workers=self.config.workers)
        self.engine = NavigationEngine(
            start_dir,
            self.dispatcher,
            show_hidden=self.config.show_hidden,
        )
        self.spinner_index = 0

    @property
    def spinner(self) -> str:
        frames = self.config.spinner_frames
        return frames[self.spinner_index % len(frames)]

    def compose(self) -> ComposeResult:
        panel = DirectoryHeader(id="dir-panel")
        panel.border_title = "Current Directory"
        yield panel

        table = CensusTable(id="census-table")
        table.border_title = "File Counter"
        yield table

        yield Static(key_hints(), id="key-hints")

    def on_mount(self) -> None:
        """Start the polling loop and draw the first listing."""
        table = self.query_one(CensusTable)
        table.cursor_type = "row"
        table.add_columns("Type", "Name", "Count")

        self.set_interval(self.config.poll_interval, self._tick)
        self._redraw()

    def _redraw(self) -> None:
        spinner = self.spinner
        self.query_one(DirectoryHeader).show(self.engine.header_text(spinner))
        self.query_one(CensusTable).show_entries(
            self.engine.items, self.engine.selected, spinner
        )

    def _tick(self) -> None:
        """Drain finished counts, run the pending action, redraw if needed."""
        self.spinner_index = (self.spinner_index + 1) % len(self.config.spinner_frames)

        try:
            redraw = self.engine.poll()
            if self.engine.process_pending_action():
                redraw = True
        except Exception as e:
            logger.exception("Failed to process navigation update")
            self.notify(f"Error: {e}", severity="error", timeout=3)
            return

        if redraw:
            self._redraw()
        elif self.engine.has_pending_counts:
            spinner = self.spinner
            self.query_one(DirectoryHeader).show(self.engine.header_text(spinner))
            self.query_one(CensusTable).animate_pending(self.engine.items, spinner)

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        """Follow cursor moves made by the table itself (home, end, paging, clicks)."""
        self.engine.select(event.cursor_row)

    def on_census_table_row_activated(self, event: CensusTable.RowActivated) -> None:
        """A click on a row selects it and opens it on the next tick."""
        self.engine.select(event.row)
        self.engine.request_enter(event.row)

    def _move_cursor(self) -> None:
        if self.engine.selected is not None:
            self.query_one(CensusTable).move_cursor(row=self.engine.selected)

    def action_advance(self) -> None:
        self.engine.advance_selection()
        self._move_cursor()

    def action_retreat(self) -> None:
        self.engine.retreat_selection()
        self._move_cursor()

    def action_open(self) -> None:
        """Queue entering the selected directory."""
        if self.engine.selected is not None:
            self.engine.request_enter(self.engine.selected)

    def action_home(self) -> None:
        self.engine.go_home()
        self._redraw()


def run_tui(start_dir: Path, config: BrowserConfig | None = None) -> None:
    """Run the interactive browser.

    Args:
        start_dir: Directory to start in, also the top of navigation
        config: Runtime settings, defaults when omitted
    """
    app = CensusApp(start_dir, config=config)
    try:
        app.run()
    finally:
        app.dispatcher.shutdown(wait=False)

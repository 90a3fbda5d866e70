"""Directory listing, ordering and cursor logic for the browser.

The engine never blocks on counting. It asks the dispatcher for counts it
does not have, and the UI loop calls ``poll`` to fold finished counts back
into the listing.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dircensus.cache import CensusCache
from dircensus.dispatcher import WorkDispatcher
from dircensus.models import PARENT_LABEL, ActionKind, DirectoryEntry, PendingAction

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"


def entry_sort_key(entry: DirectoryEntry) -> tuple:
    """
    Ordering key for listing rows.

    Directories come first, ordered by known count descending, then unknown
    counts, with case-insensitive name as the tie-break. Files follow by
    case-insensitive name.
    """
    if entry.is_dir:
        if entry.file_count is None:
            return (0, 1, 0, entry.sort_name)
        return (0, 0, -entry.file_count, entry.sort_name)
    return (1, 0, 0, entry.sort_name)


def sort_entries(entries: list[DirectoryEntry]) -> None:
    """Sort a listing in place, keeping a leading parent row pinned."""
    if entries and entries[0].is_parent:
        entries[1:] = sorted(entries[1:], key=entry_sort_key)
    else:
        entries.sort(key=entry_sort_key)


def _display_name(name: str) -> str:
    # Undecodable bytes survive os.scandir as lone surrogates
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return UNKNOWN_NAME
    return name


def read_directory(directory: Path, show_hidden: bool = True) -> list[DirectoryEntry]:
    """
    List the immediate children of a directory.

    Returns an empty list if the directory cannot be read. Entries whose type
    cannot be determined are listed as files.
    """
    items: list[DirectoryEntry] = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                if not show_hidden and entry.name.startswith("."):
                    continue
                try:
                    is_dir = entry.is_dir()
                except OSError:
                    is_dir = False
                items.append(
                    DirectoryEntry(
                        name=_display_name(entry.name),
                        path=directory / entry.name,
                        is_dir=is_dir,
                    )
                )
    except (PermissionError, OSError) as e:
        logger.debug("Cannot list %s: %s", directory, e)
        return []
    return items


class NavigationEngine:
    """Owns the current directory, its listing and the selection cursor."""

    def __init__(
        self,
        start_dir: Path,
        dispatcher: WorkDispatcher,
        show_hidden: bool = True,
    ):
        self.home_dir = Path(start_dir).expanduser().absolute()
        self.current_dir = self.home_dir
        self.current_dir_count: Optional[int] = None
        self.dispatcher = dispatcher
        self.show_hidden = show_hidden
        self.items: list[DirectoryEntry] = []
        self.selected: Optional[int] = None
        self.pending_action: Optional[PendingAction] = None

        self.refresh_items()

    @property
    def cache(self) -> CensusCache:
        return self.dispatcher.cache

    @property
    def at_home(self) -> bool:
        return self.current_dir == self.home_dir

    @property
    def selected_entry(self) -> Optional[DirectoryEntry]:
        if self.selected is None or not self.items:
            return None
        return self.items[self.selected]

    @property
    def has_pending_counts(self) -> bool:
        """Whether anything on screen is still waiting for a count."""
        return self.current_dir_count is None or any(e.is_counting for e in self.items)

    def _lookup(self, path: Path) -> Optional[int]:
        count = self.cache.get(path)
        if count is None:
            self.dispatcher.request(path)
        return count

    def refresh_items(self) -> None:
        """Rebuild the listing for current_dir from the live filesystem."""
        previous = self.selected or 0

        self.current_dir_count = self._lookup(self.current_dir)

        items: list[DirectoryEntry] = []
        if not self.at_home:
            parent = self.current_dir.parent
            items.append(
                DirectoryEntry(
                    name=PARENT_LABEL,
                    path=parent,
                    is_dir=True,
                    file_count=self._lookup(parent),
                    is_parent=True,
                )
            )

        for entry in read_directory(self.current_dir, self.show_hidden):
            if entry.is_dir:
                entry.file_count = self._lookup(entry.path)
            items.append(entry)

        sort_entries(items)
        self.items = items
        self.selected = min(previous, len(items) - 1) if items else None

        logger.debug(
            "Listed %s: %d entries, %d pending",
            self.current_dir,
            len(items),
            sum(1 for e in items if e.is_counting),
        )

    def advance_selection(self) -> None:
        """Move the cursor down, wrapping from the last row to the first."""
        if not self.items:
            return
        if self.selected is None or self.selected >= len(self.items) - 1:
            self.selected = 0
        else:
            self.selected += 1

    def retreat_selection(self) -> None:
        """Move the cursor up, wrapping from the first row to the last."""
        if not self.items:
            return
        if self.selected is None or self.selected == 0:
            self.selected = len(self.items) - 1
        else:
            self.selected -= 1

    def select(self, index: int) -> None:
        if 0 <= index < len(self.items):
            self.selected = index

    def merge_count_update(self, path: Path, count: int) -> bool:
        """
        Apply one finished count to the visible state.

        The header and the rows are checked independently since one path
        can match both.

        Returns:
            True if the header or any row changed
        """
        changed = False
        if path == self.current_dir:
            self.current_dir_count = count
            changed = True

        for entry in self.items:
            if entry.path == path:
                entry.file_count = count
                changed = True
                break

        return changed

    def resort(self) -> None:
        """Reorder the listing, keeping the cursor on the same entry."""
        current = self.selected_entry
        sort_entries(self.items)
        if current is None:
            return
        for i, entry in enumerate(self.items):
            if entry is current:
                self.selected = i
                break

    def poll(self) -> bool:
        """
        Fold every finished count into the listing.

        Returns:
            True if anything visible changed
        """
        changed = False
        for result in self.dispatcher.drain():
            if self.merge_count_update(result.path, result.count):
                changed = True
        if changed:
            self.resort()
        return changed

    def _within_home(self, path: Path) -> bool:
        return path == self.home_dir or self.home_dir in path.parents

    def enter(self, index: int) -> bool:
        """
        Make the directory at index the current directory.

        Returns:
            True if the directory changed. Files, out-of-range indices and
            targets above the home directory are ignored.
        """
        if not 0 <= index < len(self.items):
            return False
        entry = self.items[index]
        if not entry.is_dir or not self._within_home(entry.path):
            return False

        logger.debug("Entering %s", entry.path)
        self.current_dir = entry.path
        self.refresh_items()
        return True

    def go_home(self) -> None:
        """Return to the directory the session started in."""
        self.current_dir = self.home_dir
        self.refresh_items()

    def request_enter(self, index: int) -> None:
        """Queue entering index on the next tick, replacing any queued intent."""
        self.pending_action = PendingAction(kind=ActionKind.ENTER, index=index)

    def process_pending_action(self) -> bool:
        """Consume the queued intent. Returns True if the directory changed."""
        action, self.pending_action = self.pending_action, None
        if action is None:
            return False
        if action.kind == ActionKind.ENTER:
            return self.enter(action.index)
        return False

    def header_text(self, spinner: str = "") -> str:
        """Current directory line shown above the listing."""
        if self.current_dir_count is not None:
            return f"{self.current_dir} (Total files: {self.current_dir_count})"
        return f"{self.current_dir} (Counting files{spinner})"

"""Thread-safe census cache shared by the worker pool and the engine."""

import threading
from pathlib import Path
from typing import Optional

from dircensus.models import CensusState

# Marker stored for paths a worker is currently counting
_IN_FLIGHT = object()


class CensusCache:
    """
    Mapping from directory path to its last computed file count.

    Each path moves from absent to in-flight (via ``claim``) and then to
    ready (via ``insert``). Ready counts are never evicted or re-validated.
    The lock only guards dictionary access and is never held across I/O.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[Path, object] = {}

    def get(self, path: Path) -> Optional[int]:
        """Return the ready count for path, or None."""
        with self._lock:
            value = self._entries.get(path)
        if value is None or value is _IN_FLIGHT:
            return None
        return value

    def insert(self, path: Path, count: int) -> None:
        """Store a count, overwriting any previous value or claim."""
        with self._lock:
            self._entries[path] = count

    def claim(self, path: Path) -> bool:
        """
        Atomically mark an absent path as in-flight.

        Returns:
            True only for the caller that performed the transition. False if
            the path is already being counted or already has a count.
        """
        with self._lock:
            if path in self._entries:
                return False
            self._entries[path] = _IN_FLIGHT
            return True

    def release(self, path: Path) -> None:
        """Drop an in-flight claim so the path can be requested again."""
        with self._lock:
            if self._entries.get(path) is _IN_FLIGHT:
                del self._entries[path]

    def state(self, path: Path) -> CensusState:
        """Where path is in its census lifecycle."""
        with self._lock:
            if path not in self._entries:
                return CensusState.ABSENT
            if self._entries[path] is _IN_FLIGHT:
                return CensusState.IN_FLIGHT
            return CensusState.READY

    def __contains__(self, path: object) -> bool:
        return self.get(path) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for v in self._entries.values() if v is not _IN_FLIGHT)

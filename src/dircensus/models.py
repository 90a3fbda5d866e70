"""Data models for dircensus."""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

PARENT_LABEL = ".. (Back to parent directory)"


class CensusState(str, Enum):
    """Lifecycle of a path in the census cache."""

    ABSENT = "absent"  # Never requested
    IN_FLIGHT = "in_flight"  # Claimed, a worker is counting
    READY = "ready"  # Count available


class ActionKind(str, Enum):
    """Navigation intents that are deferred to the next engine tick."""

    ENTER = "enter"


class DirectoryEntry(BaseModel):
    """One row of a directory listing."""

    name: str = Field(..., description="Display name (base name or parent label)")
    path: Path = Field(..., description="Filesystem path, unique within a listing")
    is_dir: bool = Field(..., description="Whether the entry is a directory")
    file_count: Optional[int] = Field(
        None, description="Recursive file count, None while still counting"
    )
    is_parent: bool = Field(False, description="Synthesized 'back to parent' row")

    @property
    def is_counting(self) -> bool:
        """Directory whose count has not arrived yet."""
        return self.is_dir and self.file_count is None

    @property
    def sort_name(self) -> str:
        """Case-insensitive name used for ordering."""
        return self.name.lower()


class CountResult(BaseModel):
    """A finished census delivered from a worker to the navigation engine."""

    path: Path = Field(..., description="Directory that was counted")
    count: int = Field(..., ge=0, description="Number of regular files reachable")


class PendingAction(BaseModel):
    """The single queued navigation intent."""

    kind: ActionKind = Field(ActionKind.ENTER, description="What to do")
    index: int = Field(..., description="Listing index the action applies to")

"""Runtime configuration for dircensus."""

import os

from pydantic import BaseModel, Field

DEFAULT_SPINNER_FRAMES = ["   ", ".  ", ".. ", "..."]


def default_workers() -> int:
    """One worker per available processing unit."""
    return os.cpu_count() or 1


class BrowserConfig(BaseModel):
    """Settings shared by the engine, the worker pool and the TUI."""

    workers: int = Field(
        default_factory=default_workers,
        ge=1,
        description="Number of counting threads",
    )
    poll_interval: float = Field(
        0.1,
        gt=0,
        description="Seconds between result-channel drains in the UI loop",
    )
    spinner_frames: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SPINNER_FRAMES),
        min_length=1,
        description="Animation frames shown while a count is pending",
    )
    show_hidden: bool = Field(True, description="List dot-files and dot-directories")

    @classmethod
    def from_options(cls, **options) -> "BrowserConfig":
        """Build a config from CLI options, leaving unset (None) ones at their defaults."""
        return cls(**{k: v for k, v in options.items() if v is not None})

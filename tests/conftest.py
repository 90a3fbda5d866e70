"""Shared fixtures for dircensus tests."""

import time

import pytest

from dircensus.cache import CensusCache
from dircensus.dispatcher import WorkDispatcher


def make_files(directory, count, prefix="f"):
    """Create count empty files in directory."""
    directory.mkdir(parents=True, exist_ok=True)
    for i in range(count):
        (directory / f"{prefix}{i}.txt").write_text("x")


def wait_for_counts(engine, timeout=10.0):
    """Poll the engine until nothing on screen is still counting."""
    deadline = time.monotonic() + timeout
    while engine.has_pending_counts:
        engine.poll()
        if time.monotonic() > deadline:
            raise AssertionError("Counts did not resolve in time")
        time.sleep(0.01)
    engine.poll()


@pytest.fixture
def dispatcher():
    d = WorkDispatcher(CensusCache(), max_workers=2)
    yield d
    d.shutdown(wait=True)

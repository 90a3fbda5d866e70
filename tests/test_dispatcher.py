"""Tests for the worker pool and result channel."""

import threading
import time
from pathlib import Path

from dircensus.cache import CensusCache
from dircensus.dispatcher import ResultChannel, WorkDispatcher
from dircensus.models import CensusState

from conftest import make_files


def drain_until(dispatcher, expected, timeout=5.0):
    """Collect results until expected many have arrived."""
    results = []
    deadline = time.monotonic() + timeout
    while len(results) < expected and time.monotonic() < deadline:
        results.extend(dispatcher.drain())
        time.sleep(0.01)
    return results


class TestResultChannel:
    def test_drain_empty(self):
        assert ResultChannel().drain() == []

    def test_drain_returns_in_order(self):
        channel = ResultChannel()
        channel.send(Path("/a"), 1)
        channel.send(Path("/b"), 2)

        results = channel.drain()
        assert [(r.path, r.count) for r in results] == [(Path("/a"), 1), (Path("/b"), 2)]
        assert channel.drain() == []

    def test_send_after_close_is_dropped(self):
        channel = ResultChannel()
        channel.close()
        assert channel.send(Path("/a"), 1) is False
        assert channel.drain() == []


class TestWorkDispatcher:
    def test_submit_counts_caches_and_reports(self, tmp_path, dispatcher):
        make_files(tmp_path / "sub", 4)

        dispatcher.submit(tmp_path / "sub")
        results = drain_until(dispatcher, 1)

        assert len(results) == 1
        assert results[0].path == tmp_path / "sub"
        assert results[0].count == 4
        assert dispatcher.cache.get(tmp_path / "sub") == 4

    def test_request_submits_once_per_miss(self, tmp_path, dispatcher):
        """Repeated requests for the same path only submit one job."""
        make_files(tmp_path, 2)

        assert dispatcher.request(tmp_path) is True
        assert dispatcher.request(tmp_path) is False
        drain_until(dispatcher, 1)

        assert dispatcher.request(tmp_path) is False
        assert dispatcher.submitted == 1

    def test_jobs_queue_when_pool_is_saturated(self, tmp_path):
        """More jobs than workers still all complete."""
        release = threading.Event()

        def slow_counter(path):
            release.wait(5)
            return 1

        dispatcher = WorkDispatcher(CensusCache(), max_workers=1, counter=slow_counter)
        try:
            for name in ["a", "b", "c"]:
                dispatcher.request(tmp_path / name)
            assert dispatcher.drain() == []
            release.set()

            results = drain_until(dispatcher, 3)
            assert sorted(r.path.name for r in results) == ["a", "b", "c"]
        finally:
            dispatcher.shutdown(wait=True)

    def test_failed_job_releases_claim(self, tmp_path):
        def broken_counter(path):
            raise ValueError("boom")

        dispatcher = WorkDispatcher(CensusCache(), max_workers=1, counter=broken_counter)
        dispatcher.request(tmp_path)
        dispatcher.shutdown(wait=True)

        assert dispatcher.cache.state(tmp_path) == CensusState.ABSENT
        assert dispatcher.drain() == []

    def test_result_cached_after_shutdown(self, tmp_path):
        """A running job still writes its count after the consumer leaves."""
        started = threading.Event()
        release = threading.Event()

        def gated_counter(path):
            started.set()
            release.wait(5)
            return 3

        dispatcher = WorkDispatcher(CensusCache(), max_workers=1, counter=gated_counter)
        dispatcher.request(tmp_path)
        assert started.wait(5)
        dispatcher.shutdown(wait=False)
        release.set()
        dispatcher.shutdown(wait=True)

        assert dispatcher.cache.get(tmp_path) == 3
        assert dispatcher.drain() == []

    def test_default_pool_size(self):
        dispatcher = WorkDispatcher(CensusCache())
        try:
            assert dispatcher.max_workers >= 1
        finally:
            dispatcher.shutdown()

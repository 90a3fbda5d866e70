"""Background counting jobs and the channel that carries their results."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from queue import Empty, Queue
from typing import Callable, Optional

from dircensus.cache import CensusCache
from dircensus.config import default_workers
from dircensus.counter import count_files
from dircensus.models import CountResult

logger = logging.getLogger(__name__)


class ResultChannel:
    """Many-producer, single-consumer queue of finished counts."""

    def __init__(self) -> None:
        self._queue: Queue[CountResult] = Queue()
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, path: Path, count: int) -> bool:
        """Deliver a result. Returns False if the consumer has gone away."""
        if self._closed.is_set():
            logger.debug("Dropping count for %s: channel closed", path)
            return False
        self._queue.put(CountResult(path=path, count=count))
        return True

    def drain(self) -> list[CountResult]:
        """Return every result currently available, without blocking."""
        out: list[CountResult] = []
        while True:
            try:
                out.append(self._queue.get_nowait())
            except Empty:
                break
        return out

    def close(self) -> None:
        self._closed.set()


class WorkDispatcher:
    """
    Fixed-size thread pool running census jobs.

    Submission is fire-and-forget: jobs queue when every worker is busy and
    always run to completion, writing their count to the cache even if no
    one is interested in the result anymore.
    """

    def __init__(
        self,
        cache: CensusCache,
        channel: Optional[ResultChannel] = None,
        max_workers: Optional[int] = None,
        counter: Callable[[Path], int] = count_files,
    ):
        self.cache = cache
        self.channel = channel if channel is not None else ResultChannel()
        self.max_workers = max_workers or default_workers()
        self._counter = counter
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="dircensus-count",
        )
        self._submitted = 0
        self._submitted_lock = threading.Lock()

    @property
    def submitted(self) -> int:
        """Number of jobs handed to the pool so far."""
        with self._submitted_lock:
            return self._submitted

    def _run_job(self, path: Path) -> None:
        try:
            count = self._counter(path)
        except Exception:
            logger.exception("Counting %s failed", path)
            self.cache.release(path)
            return

        self.cache.insert(path, count)
        self.channel.send(path, count)

    def submit(self, path: Path) -> None:
        """Queue a job that counts path, caches the count and reports it."""
        with self._submitted_lock:
            self._submitted += 1
        logger.debug("Submitting census job for %s", path)
        self._executor.submit(self._run_job, path)

    def request(self, path: Path) -> bool:
        """
        Submit a job for path unless one is running or a count exists.

        Returns:
            True if this call submitted the job
        """
        if not self.cache.claim(path):
            return False
        self.submit(path)
        return True

    def drain(self) -> list[CountResult]:
        """Results finished since the last drain."""
        return self.channel.drain()

    def shutdown(self, wait: bool = False) -> None:
        """Stop accepting jobs and drop the ones still queued."""
        self.channel.close()
        self._executor.shutdown(wait=wait, cancel_futures=True)

"""Concurrent download of the forecast files of one run."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from nomads_fetch.fetcher import FetchStatus, describe_status
from nomads_fetch.urls import build_filename, build_url
from nomads_fetch.utils.logging import logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from nomads_fetch.fetcher import Fetcher
    from nomads_fetch.forecasts import ForecastTask
    from nomads_fetch.runner import FetchRequest

__all__ = ["GRIB_MARKER", "FetchOutcome", "FetchWorkerPool", "TaskResult", "looks_like_grib"]

GRIB_MARKER = b"GRIB"
DEFAULT_WORKERS = 4
DEFAULT_MAX_ATTEMPTS = 6
_BODY_PREVIEW = 256


class FetchOutcome(StrEnum):
    """Terminal state of one forecast task."""

    OK = "ok"
    EXISTS = "exists"
    BAD = "bad"


@dataclass(frozen=True)
class TaskResult:
    """Outcome of one forecast task; ``path`` is None for bad tasks."""

    index: int
    hour: int
    outcome: FetchOutcome
    path: Path | None = None


def looks_like_grib(path: Path) -> bool:
    """Return True if *path* starts with the ``GRIB`` marker.

    Raises
    ------
    OSError
        If the file cannot be opened or read.
    """
    with path.open("rb") as f:
        return f.read(len(GRIB_MARKER)) == GRIB_MARKER


def _body_preview(path: Path) -> str:
    try:
        with path.open("rb") as f:
            head = f.read(_BODY_PREVIEW)
    except OSError as e:
        return f"<unreadable: {e}>"
    return head.decode("utf-8", errors="replace")


class FetchWorkerPool:
    """Fetch, retry and validate forecast files with a fixed set of threads.

    Workers claim tasks through a shared cursor and write each result into
    the slot of the claimed index, both under one lock, so every index is
    written exactly once and results come back in forecast order whatever
    the completion order.

    A file that does not start with the grib marker is deleted and marked
    bad. If the run is still being published, the cursor is moved past the
    last task so idle workers stop claiming work; downloads already under
    way finish normally.

    Parameters
    ----------
    tasks : sequence of ForecastTask
        Forecasts to fetch, indexed ``0..N-1``.
    fetcher : Fetcher
        Transport used for each attempt.
    request : FetchRequest
        Zone, model, run window and paths of the run.
    workers : int, optional
        Number of threads, defaults to 4.
    max_attempts : int, optional
        Fetch attempts per forecast before it is marked bad, defaults to 6.
    """

    def __init__(
        self,
        tasks: Sequence[ForecastTask],
        fetcher: Fetcher,
        request: FetchRequest,
        workers: int = DEFAULT_WORKERS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.tasks = list(tasks)
        self.fetcher = fetcher
        self.request = request
        self.workers = workers
        self.max_attempts = max_attempts
        self._lock = threading.Lock()
        self._cursor = 0
        self._results: list[TaskResult | None] = [None] * len(self.tasks)
        self.drained = False

    def run(self) -> list[TaskResult]:
        """Fetch every task and return the results in index order."""
        threads = [
            threading.Thread(target=self._worker, name=f"fetch-{i}", daemon=True)
            for i in range(min(self.workers, max(len(self.tasks), 1)))
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        results: list[TaskResult] = []
        for task, result in zip(self.tasks, self._results, strict=True):
            if result is None:
                # skipped by a drain
                result = TaskResult(task.index, task.hour, FetchOutcome.BAD)
            results.append(result)
        return results

    def _claim(self) -> ForecastTask | None:
        with self._lock:
            if self._cursor >= len(self.tasks):
                return None
            task = self.tasks[self._cursor]
            self._cursor += 1
            return task

    def _record(self, result: TaskResult) -> None:
        with self._lock:
            if self._results[result.index] is not None:
                raise RuntimeError(f"Forecast task {result.index} recorded twice")
            self._results[result.index] = result

    def _drain(self) -> None:
        with self._lock:
            skipped = len(self.tasks) - self._cursor
            self._cursor = len(self.tasks)
            self.drained = True
        if skipped:
            logger.warning("Run still in progress, skipping the remaining %d forecasts", skipped)

    def _worker(self) -> None:
        while (task := self._claim()) is not None:
            self._record(self._process(task))

    def _process(self, task: ForecastTask) -> TaskResult:
        request = self.request
        run_time = request.window.run_time
        dest = request.paths.forecast_path(build_filename(request.model, run_time, task.hour))

        if dest.exists():
            logger.debug("Forecast %03d exists: %s", task.hour, dest.name)
            return TaskResult(task.index, task.hour, FetchOutcome.EXISTS, dest)

        url = build_url(request.zone, request.model, run_time, task.hour)
        if not self._fetch(url, dest, task.hour):
            dest.unlink(missing_ok=True)
            logger.warning(
                "Forecast %03d failed after %d attempts", task.hour, self.max_attempts
            )
            return TaskResult(task.index, task.hour, FetchOutcome.BAD)

        try:
            valid = looks_like_grib(dest)
        except OSError as e:
            logger.warning("Forecast %03d unreadable: %s", task.hour, e)
            valid = False
        if not valid:
            logger.warning("Forecast %03d is not a grib file, discarding %s", task.hour, dest.name)
            logger.debug("Response body of %s:\n%s", dest.name, _body_preview(dest))
            dest.unlink(missing_ok=True)
            if request.window.in_progress:
                self._drain()
            return TaskResult(task.index, task.hour, FetchOutcome.BAD)

        logger.info("Fetched forecast %03d", task.hour)
        return TaskResult(task.index, task.hour, FetchOutcome.OK, dest)

    def _fetch(self, url: str, dest: Path, hour: int) -> bool:
        for attempt in range(1, self.max_attempts + 1):
            logger.debug("Forecast %03d attempt %d: %s", hour, attempt, url)
            try:
                status = self.fetcher(url, dest)
            except OSError as e:
                logger.debug("Forecast %03d fetch raised %s", hour, e)
                status = FetchStatus.ERROR
            if status == FetchStatus.OK:
                return True
            logger.warning(
                "Forecast %03d attempt %d/%d: %s (status %d)",
                hour,
                attempt,
                self.max_attempts,
                describe_status(status),
                status,
            )
        return False

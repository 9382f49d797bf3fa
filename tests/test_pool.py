"""Tests for nomads_fetch.pool module."""

from __future__ import annotations

import threading
import time

import pytest

from nomads_fetch.pool import (
    FetchOutcome,
    FetchWorkerPool,
    TaskResult,
    looks_like_grib,
)


@pytest.fixture
def request_closed(make_request, test_window, run_paths):
    run_paths.run_dir.mkdir(parents=True)
    return make_request(test_window)


@pytest.fixture
def request_in_progress(make_request, in_progress_window, run_paths):
    run_paths.run_dir.mkdir(parents=True)
    return make_request(in_progress_window)


class TestLooksLikeGrib:
    def test_grib(self, tmp_path, grib_bytes):
        path = tmp_path / "f"
        path.write_bytes(grib_bytes(0))
        assert looks_like_grib(path)

    def test_html(self, tmp_path):
        path = tmp_path / "f"
        path.write_bytes(b"<html>")
        assert not looks_like_grib(path)

    def test_short_file(self, tmp_path):
        path = tmp_path / "f"
        path.write_bytes(b"GR")
        assert not looks_like_grib(path)

    def test_missing_raises(self, tmp_path):
        with pytest.raises(OSError):
            looks_like_grib(tmp_path / "missing")


class TestFetchWorkerPool:
    def test_all_ok(self, request_closed, fake_fetcher, grib_bytes):
        fetcher = fake_fetcher()
        results = FetchWorkerPool(request_closed.tasks, fetcher, request_closed, workers=3).run()
        assert [r.index for r in results] == list(range(6))
        assert [r.hour for r in results] == [0, 1, 2, 3, 4, 5]
        assert all(r.outcome == FetchOutcome.OK for r in results)
        for r in results:
            assert r.path == request_closed.paths.run_dir / f"tst.t06z.f{r.hour:03d}"
            assert r.path.read_bytes() == grib_bytes(r.hour)
        assert fetcher.fetched_hours == [0, 1, 2, 3, 4, 5]

    def test_urls(self, request_closed, fake_fetcher):
        fetcher = fake_fetcher()
        FetchWorkerPool(request_closed.tasks, fetcher, request_closed, workers=1).run()
        hour, url = fetcher.calls[0]
        assert hour == 0
        assert "file=tst.t06z.f000" in url
        assert "&dir=%2Ftst.20240611" in url

    def test_existing_files_not_refetched(self, request_closed, fake_fetcher, grib_bytes):
        run_dir = request_closed.paths.run_dir
        (run_dir / "tst.t06z.f001").write_bytes(grib_bytes(1))
        (run_dir / "tst.t06z.f004").write_bytes(grib_bytes(4))
        fetcher = fake_fetcher()
        results = FetchWorkerPool(request_closed.tasks, fetcher, request_closed).run()
        assert fetcher.fetched_hours == [0, 2, 3, 5]
        assert results[1].outcome == FetchOutcome.EXISTS
        assert results[4].outcome == FetchOutcome.EXISTS
        assert results[4].path == run_dir / "tst.t06z.f004"

    def test_retry_until_success(self, request_closed, fake_fetcher):
        fetcher = fake_fetcher(flaky={2: 5})
        results = FetchWorkerPool(request_closed.tasks, fetcher, request_closed).run()
        assert results[2].outcome == FetchOutcome.OK
        assert fetcher.fetched_hours.count(2) == 6

    def test_retry_budget_exhausted(self, request_closed, fake_fetcher):
        fetcher = fake_fetcher(failing_hours={3}, partial_write=True)
        results = FetchWorkerPool(request_closed.tasks, fetcher, request_closed).run()
        assert results[3] == TaskResult(3, 3, FetchOutcome.BAD)
        assert fetcher.fetched_hours.count(3) == 6
        assert not (request_closed.paths.run_dir / "tst.t06z.f003").exists()
        assert all(r.outcome == FetchOutcome.OK for r in results if r.hour != 3)

    def test_custom_attempts(self, request_closed, fake_fetcher):
        fetcher = fake_fetcher(failing_hours={0})
        FetchWorkerPool(request_closed.tasks, fetcher, request_closed, max_attempts=2).run()
        assert fetcher.fetched_hours.count(0) == 2

    def test_any_status_retried(self, request_closed, fake_fetcher):
        fetcher = fake_fetcher(flaky={1: 2}, fail_status=99)
        results = FetchWorkerPool(request_closed.tasks, fetcher, request_closed).run()
        assert results[1].outcome == FetchOutcome.OK
        assert fetcher.fetched_hours.count(1) == 3

    def test_fetcher_oserror_is_a_failed_attempt(self, request_closed):
        def broken(url, dest):
            raise FileNotFoundError("curl")

        results = FetchWorkerPool(request_closed.tasks, broken, request_closed).run()
        assert all(r.outcome == FetchOutcome.BAD for r in results)

    def test_corrupt_file_closed_run(self, request_closed, fake_fetcher):
        fetcher = fake_fetcher(html_hours={2})
        pool = FetchWorkerPool(request_closed.tasks, fetcher, request_closed, workers=1)
        results = pool.run()
        assert results[2].outcome == FetchOutcome.BAD
        assert results[2].path is None
        assert not (request_closed.paths.run_dir / "tst.t06z.f002").exists()
        assert fetcher.fetched_hours.count(2) == 1
        assert not pool.drained
        assert [r.outcome for r in results[3:]] == [FetchOutcome.OK] * 3

    def test_corrupt_file_in_progress_drains(self, request_in_progress, fake_fetcher):
        fetcher = fake_fetcher(html_hours={2})
        pool = FetchWorkerPool(request_in_progress.tasks, fetcher, request_in_progress, workers=1)
        results = pool.run()
        assert pool.drained
        assert fetcher.fetched_hours == [0, 1, 2]
        assert [r.outcome for r in results] == [
            FetchOutcome.OK,
            FetchOutcome.OK,
            FetchOutcome.BAD,
            FetchOutcome.BAD,
            FetchOutcome.BAD,
            FetchOutcome.BAD,
        ]
        assert [r.hour for r in results] == [0, 1, 2, 3, 4, 5]

    def test_drain_lets_in_flight_finish(self, request_in_progress, fake_fetcher):
        # hour 0 is corrupt and only returns once hour 1 is under way; hour 1
        # only returns after the drain
        hour_1_started = threading.Event()
        inner = fake_fetcher(html_hours={0})

        def fetcher(url, dest):
            if dest.name.endswith("f001"):
                hour_1_started.set()
                deadline = time.monotonic() + 5
                while not pool.drained and time.monotonic() < deadline:
                    time.sleep(0.01)
            else:
                hour_1_started.wait(timeout=5)
            return inner(url, dest)

        pool = FetchWorkerPool(request_in_progress.tasks, fetcher, request_in_progress, workers=2)
        results = pool.run()
        assert pool.drained
        assert inner.fetched_hours == [0, 1]
        assert results[0].outcome == FetchOutcome.BAD
        assert results[1].outcome == FetchOutcome.OK
        assert all(r.outcome == FetchOutcome.BAD for r in results[2:])

    def test_every_index_written_once(self, request_closed, fake_fetcher):
        fetcher = fake_fetcher(html_hours={1}, failing_hours={4})
        results = FetchWorkerPool(request_closed.tasks, fetcher, request_closed, workers=8).run()
        assert len(results) == len(request_closed.tasks)
        assert [r.index for r in results] == list(range(len(results)))

    def test_no_tasks(self, request_closed, fake_fetcher):
        assert FetchWorkerPool([], fake_fetcher(), request_closed).run() == []

    def test_invalid_arguments(self, request_closed, fake_fetcher):
        with pytest.raises(ValueError, match="workers"):
            FetchWorkerPool(request_closed.tasks, fake_fetcher(), request_closed, workers=0)
        with pytest.raises(ValueError, match="max_attempts"):
            FetchWorkerPool(request_closed.tasks, fake_fetcher(), request_closed, max_attempts=0)

    def test_body_logged_for_diagnosis(self, request_closed, fake_fetcher, log_records):
        fetcher = fake_fetcher(html_hours={0})
        FetchWorkerPool(request_closed.tasks, fetcher, request_closed, workers=1).run()
        messages = [r.getMessage() for r in log_records]
        assert any("not a grib file" in m for m in messages)
        assert any("Data file is not present" in m for m in messages)

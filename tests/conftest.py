"""Shared fixtures for nomads_fetch tests."""

from __future__ import annotations

import logging
import threading
from datetime import UTC, datetime, timedelta

import pytest
import yaml

from nomads_fetch.config.catalog import BoundingBox, Catalog, ModelSpec, ZoneSpec
from nomads_fetch.config.schema import FetchConfig
from nomads_fetch.forecasts import build_forecast_tasks
from nomads_fetch.reconcile import RunPaths
from nomads_fetch.runner import FetchRequest
from nomads_fetch.urls import run_label
from nomads_fetch.utils.logging import logger
from nomads_fetch.window import RunWindow

HTML_BODY = b"<html><body>Data file is not present</body></html>"


def grib_body(hour: int) -> bytes:
    """A fake grib message for one forecast hour."""
    return b"GRIB" + f"-forecast-{hour:03d}-".encode() + bytes(range(16)) + b"7777"


def forecast_hour(name: str) -> int:
    """Forecast hour from a test model filename like ``tst.t06z.f003``."""
    return int(name.rsplit(".f", 1)[1])


class FakeFetcher:
    """Thread-safe stand-in for a transport.

    Writes a fake grib body for every hour unless the hour is listed in
    ``html_hours`` (writes an HTML error page), ``failing_hours`` (always
    returns ``fail_status``) or ``flaky`` (fails that many times first).
    """

    def __init__(
        self,
        html_hours=(),
        failing_hours=(),
        flaky=None,
        fail_status=28,
        partial_write=False,
    ):
        self.html_hours = set(html_hours)
        self.failing_hours = set(failing_hours)
        self.flaky = dict(flaky or {})
        self.fail_status = fail_status
        self.partial_write = partial_write
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, url, dest):
        hour = forecast_hour(dest.name)
        with self._lock:
            self.calls.append((hour, url))
            if self.flaky.get(hour, 0) > 0:
                self.flaky[hour] -= 1
                return self.fail_status
        if hour in self.failing_hours:
            if self.partial_write:
                dest.write_bytes(b"GR")
            return self.fail_status
        if hour in self.html_hours:
            dest.write_bytes(HTML_BODY)
        else:
            dest.write_bytes(grib_body(hour))
        return 0

    @property
    def fetched_hours(self):
        return sorted(hour for hour, _ in self.calls)


@pytest.fixture
def fake_fetcher():
    """The :class:`FakeFetcher` class, for tests that configure their own."""
    return FakeFetcher


@pytest.fixture
def grib_bytes():
    """The fake grib body writer used by :class:`FakeFetcher`."""
    return grib_body


@pytest.fixture
def fixed_now():
    """A fixed reference time (12:00 UTC)."""
    return datetime(2024, 6, 11, 12, 0, tzinfo=UTC)


@pytest.fixture
def base_dir(tmp_path):
    """Root of a temporary download tree."""
    return tmp_path / "gribs"


@pytest.fixture
def test_model():
    """A 6-hourly model with hourly forecasts up to 5 hours."""
    return ModelSpec(
        name="testmodel",
        file_prefix="tst",
        run_cadence="6h",
        forecast_cadence="1h",
        horizon="5h",
        start_lag="1h",
        end_lag="2h",
        url_template=(
            "https://nomads.example/cgi-bin/filter.pl?file={file}{levels}{variables}"
            "&leftlon={west:.2f}&rightlon={east:.2f}&toplat={north:.2f}&bottomlat={south:.2f}"
            "&dir=%2Ftst.{year:04d}{month:02d}{day:02d}"
        ),
        filename_template="{prefix}.t{hour:02d}z.f{forecast:03d}",
    )


@pytest.fixture
def test_zone():
    """A zone for :func:`test_model`."""
    return ZoneSpec(
        name="testzone",
        description="Test zone (5 hour testmodel)",
        geo="testgeo",
        model="testmodel",
        bbox=BoundingBox(-123.0, -122.0, 38.0, 37.0),
        levels=("surface", "10_m_above_ground"),
        variables=("UGRD", "VGRD"),
    )


@pytest.fixture
def test_catalog(test_zone, test_model):
    """A catalog holding only the test zone and model."""
    return Catalog(zones={test_zone.name: test_zone}, models={test_model.name: test_model})


@pytest.fixture
def test_window():
    """A closed 06z window of :func:`test_model`."""
    run_time = datetime(2024, 6, 11, 6, 0, tzinfo=UTC)
    return RunWindow(
        run_time=run_time,
        forecast_last=run_time + timedelta(hours=2),
        in_progress=False,
        run_cadence=timedelta(hours=6),
        start_lag=timedelta(hours=1),
        end_lag=timedelta(hours=2),
    )


@pytest.fixture
def in_progress_window(test_window):
    """The same run as :func:`test_window`, still being published."""
    return RunWindow(
        run_time=test_window.run_time,
        forecast_last=test_window.forecast_last,
        in_progress=True,
        run_cadence=test_window.run_cadence,
        start_lag=test_window.start_lag,
        end_lag=test_window.end_lag,
    )


@pytest.fixture
def run_paths(base_dir, test_zone, test_window):
    """Paths of the test run."""
    return RunPaths(base_dir, run_label(test_zone, test_window.run_time))


@pytest.fixture
def make_request(test_zone, test_model, run_paths):
    """Build a FetchRequest for the test run with a given window."""

    def _make(window, horizon=None):
        return FetchRequest(
            zone=test_zone,
            model=test_model,
            window=window,
            tasks=tuple(build_forecast_tasks(test_model, horizon)),
            paths=run_paths,
        )

    return _make


@pytest.fixture
def fetch_config(base_dir):
    """A FetchConfig rooted in the temporary download tree."""
    return FetchConfig(base_dir=base_dir, workers=3)


@pytest.fixture
def fetch_config_yaml(tmp_path, base_dir):
    """Write a config with an extra zone to YAML and return the path."""
    config_path = tmp_path / "nomads.yaml"
    config_path.write_text(
        yaml.dump(
            {
                "base_dir": str(base_dir),
                "workers": 2,
                "zones": {
                    "mybay": {
                        "description": "My bay (18 hour hrrr)",
                        "geo": "mybay",
                        "model": "hrrr",
                        "bbox": [-123.0, -122.0, 38.0, 37.0],
                        "levels": ["10_m_above_ground"],
                        "variables": ["UGRD", "VGRD"],
                    }
                },
            }
        )
    )
    return config_path


class _RecordingHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def log_records():
    """Capture records of the package logger, which does not propagate."""
    handler = _RecordingHandler()
    logger.addHandler(handler)
    try:
        yield handler.records
    finally:
        logger.removeHandler(handler)

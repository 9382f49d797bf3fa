"""Fetch one model run for one zone, end to end."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Any

from nomads_fetch.assembler import assemble_composite
from nomads_fetch.config.schema import FetchConfig
from nomads_fetch.exceptions import RunAlreadyCompleteError
from nomads_fetch.fetcher import make_fetcher
from nomads_fetch.forecasts import build_forecast_tasks, effective_horizon
from nomads_fetch.pool import FetchWorkerPool
from nomads_fetch.reconcile import FetchMode, RunPaths, reconcile_run_directory
from nomads_fetch.urls import run_label
from nomads_fetch.utils.logging import FetchMonitor, logger
from nomads_fetch.utils.time import format_elapsed, local_clock, pretty_bytes
from nomads_fetch.window import resolve_run_window

if TYPE_CHECKING:
    from nomads_fetch.config.catalog import Catalog, ModelSpec, ZoneSpec
    from nomads_fetch.fetcher import Fetcher
    from nomads_fetch.forecasts import ForecastTask
    from nomads_fetch.reconcile import RunState
    from nomads_fetch.window import RunWindow

__all__ = ["FetchReport", "FetchRequest", "fetch_run", "log_next_run"]


@dataclass(frozen=True)
class FetchRequest:
    """Everything the pool and assembler need to know about one fetch."""

    zone: ZoneSpec
    model: ModelSpec
    window: RunWindow
    tasks: tuple[ForecastTask, ...]
    paths: RunPaths
    mode: FetchMode = FetchMode.NORMAL
    keep: bool = False

    @property
    def label(self) -> str:
        return self.paths.label


@dataclass
class FetchReport:
    """Result of a fetch."""

    zone: str
    label: str
    window: RunWindow
    prior_state: RunState
    mode: FetchMode
    fetched: int
    existing: int
    failed_hours: list[int]
    composite: Path | None
    size: int
    elapsed: timedelta
    run_dir_removed: bool = False
    drained: bool = False
    forecast_hours: list[int] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failed_hours)

    @property
    def good(self) -> int:
        """Forecasts present in the composite."""
        return self.fetched + self.existing

    @property
    def success(self) -> bool:
        """True when every forecast of the run is in the composite."""
        return self.composite is not None and not self.failed_hours

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "zone": self.zone,
            "label": self.label,
            "run_time": self.window.run_time.isoformat(),
            "in_progress": self.window.in_progress,
            "prior_state": str(self.prior_state),
            "mode": str(self.mode),
            "forecast_hours": self.forecast_hours,
            "fetched": self.fetched,
            "existing": self.existing,
            "failed_hours": self.failed_hours,
            "composite": str(self.composite) if self.composite else None,
            "size": self.size,
            "elapsed_seconds": self.elapsed.total_seconds(),
        }

    def save(self, path: Path | str) -> None:
        """Save report to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2))


def log_next_run(window: RunWindow, prefix: str = "The next model run") -> None:
    """Log when the run after *window* should start and finish publishing."""
    first_available, complete_at = window.next_run()
    logger.info(
        "%s first forecast should appear at %s and be complete at %s",
        prefix,
        local_clock(first_available),
        local_clock(complete_at),
    )


def fetch_run(
    zone_name: str,
    *,
    config: FetchConfig | None = None,
    now: datetime | None = None,
    previous: bool = False,
    partial: bool = False,
    mode: FetchMode | str = FetchMode.NORMAL,
    keep: bool | None = None,
    horizon: timedelta | None = None,
    workers: int | None = None,
    fetcher: Fetcher | None = None,
    catalog: Catalog | None = None,
) -> FetchReport:
    """Fetch a model run for a zone and assemble its composite grib file.

    Parameters
    ----------
    zone_name : str
        Zone identifier, see ``nomads-fetch zones``.
    config : FetchConfig, optional
        Directories, pool size and transport. Defaults to ``FetchConfig()``.
    now : datetime, optional
        Reference time for run selection, defaults to the current UTC time.
    previous : bool, optional
        Fetch the run before the latest complete one.
    partial : bool, optional
        Fetch the latest run even if it is still being published.
    mode : FetchMode or str, optional
        How an existing run directory is treated.
    keep : bool, optional
        Keep the run directory after a clean run; defaults to ``config.keep``.
    horizon : timedelta, optional
        Fetch no forecast beyond this offset.
    workers : int, optional
        Pool size; defaults to ``config.workers``.
    fetcher : Fetcher, optional
        Transport; defaults to the one named by ``config.backend``.
    catalog : Catalog, optional
        Zone and model tables; defaults to the built-in tables extended
        by ``config``.

    Returns
    -------
    FetchReport
        Counts, failed hours and the composite path.

    Raises
    ------
    UnknownZoneError, UnknownModelError
        If the zone or its model is not in the catalog.
    RunAlreadyCompleteError
        If the run's composite already exists and ``mode`` is not refetch.
    RunDirectoryConflictError
        If the run directory exists and ``mode`` is normal.
    AssemblyError
        If the composite cannot be written.
    """
    config = config or FetchConfig()
    catalog = catalog or config.build_catalog()
    mode = FetchMode(mode)
    keep = config.keep if keep is None else keep
    started = datetime.now(UTC)
    monitor = FetchMonitor()

    with monitor.stage("resolve"):
        zone, model = catalog.resolve(zone_name)
        window = resolve_run_window(
            now or datetime.now(UTC), model, previous=previous, partial=partial
        )
        label = run_label(zone, window.run_time)
        tasks = tuple(build_forecast_tasks(model, effective_horizon(model, zone.horizon, horizon)))
        paths = RunPaths(config.base_dir, label)
        fetcher = fetcher or make_fetcher(config.backend, config.timeout)
        logger.info("Run: %s", label)
        if window.pending_run is not None:
            logger.info(
                "%s %02dz run in progress - last should be complete at %s",
                zone.model,
                window.pending_run.hour,
                local_clock(window.pending_last),
            )
        elif window.in_progress:
            logger.info(
                "%s %02dz run in progress - last should be complete at %s",
                zone.model,
                window.hour,
                local_clock(window.forecast_last),
            )

    try:
        with monitor.stage("reconcile"):
            prior_state = reconcile_run_directory(paths, mode, window)
    except RunAlreadyCompleteError:
        logger.info("This complete model run exists in %s", paths.composite)
        logger.info("Use --refetch to fetch again")
        log_next_run(window)
        raise

    request = FetchRequest(
        zone=zone, model=model, window=window, tasks=tasks, paths=paths, mode=mode, keep=keep
    )
    pool = FetchWorkerPool(
        request.tasks,
        fetcher,
        request,
        workers=workers or config.workers,
        max_attempts=config.max_attempts,
    )
    with monitor.stage("fetch"):
        logger.info("Fetching %d forecasts with %d workers", len(tasks), pool.workers)
        results = pool.run()

    with monitor.stage("assemble"):
        summary = assemble_composite(results, request.paths, keep=request.keep)

    report = FetchReport(
        zone=zone.name,
        label=label,
        window=window,
        prior_state=prior_state,
        mode=request.mode,
        fetched=summary.fetched,
        existing=summary.existing,
        failed_hours=summary.failed_hours,
        composite=summary.composite,
        size=summary.size,
        elapsed=datetime.now(UTC) - started,
        run_dir_removed=summary.run_dir_removed,
        drained=pool.drained,
        forecast_hours=[t.hour for t in tasks],
    )
    _log_report(report)
    monitor.log_timing_summary()
    return report


def _log_report(report: FetchReport) -> None:
    logger.info(
        "Good GRIBs: %d (%d fetched + %d previous) Bad: %d",
        report.good,
        report.fetched,
        report.existing,
        report.failed,
    )
    if report.failed_hours:
        logger.warning("Could not fetch %s", " ".join(str(h) for h in report.failed_hours))
        logger.info("Use --merge to fetch missing forecasts")
        logger.info("Use --previous for last complete model run")
        if report.window.in_progress:
            logger.info(
                "Model run in progress. All forecasts should be available by %s",
                local_clock(report.window.forecast_last),
            )

    if report.composite is None:
        log_next_run(report.window, prefix="No GRIBs fetched. The next model run")
    else:
        logger.info("Wrote %s (%s)", report.composite, pretty_bytes(report.size).strip())
    logger.info("Elapsed time: %s", format_elapsed(report.elapsed))

"""NOMADS grib run fetcher Python API.

This package downloads the forecast files of a NOAA model run from the
NOMADS grib filter service, subset to a named zone, and concatenates them
into one composite grib file.

Example usage:
    from nomads_fetch import FetchConfig, fetch_run

    report = fetch_run("sf", config=FetchConfig(workers=8))

    if report.success:
        print(f"Wrote {report.composite} in {report.elapsed}")
"""

from __future__ import annotations

from nomads_fetch.assembler import AssemblySummary, assemble_composite
from nomads_fetch.config.catalog import (
    DEFAULT_CATALOG,
    MODELS,
    ZONES,
    BoundingBox,
    Catalog,
    ModelSpec,
    SparseTail,
    ZoneSpec,
    get_model,
    get_zone,
)
from nomads_fetch.config.schema import FetchConfig
from nomads_fetch.exceptions import (
    AssemblyError,
    NomadsFetchError,
    RunAlreadyCompleteError,
    RunDirectoryConflictError,
    UnknownModelError,
    UnknownZoneError,
)
from nomads_fetch.fetcher import CurlFetcher, Fetcher, FetchStatus, TinyRetrieverFetcher
from nomads_fetch.forecasts import (
    ForecastTask,
    build_forecast_hours,
    build_forecast_tasks,
    effective_horizon,
)
from nomads_fetch.pool import FetchOutcome, FetchWorkerPool, TaskResult
from nomads_fetch.reconcile import (
    FetchMode,
    RunPaths,
    RunState,
    inspect_run_state,
    reconcile_run_directory,
)
from nomads_fetch.runner import FetchReport, FetchRequest, fetch_run
from nomads_fetch.window import RunWindow, resolve_run_window

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CATALOG",
    "MODELS",
    "ZONES",
    "AssemblyError",
    "AssemblySummary",
    "BoundingBox",
    "Catalog",
    "CurlFetcher",
    # Config
    "FetchConfig",
    "FetchMode",
    "FetchOutcome",
    "FetchReport",
    "FetchRequest",
    "FetchStatus",
    "FetchWorkerPool",
    "Fetcher",
    "ForecastTask",
    "ModelSpec",
    # Errors
    "NomadsFetchError",
    "RunAlreadyCompleteError",
    "RunDirectoryConflictError",
    "RunPaths",
    "RunState",
    "RunWindow",
    "SparseTail",
    "TaskResult",
    "TinyRetrieverFetcher",
    "UnknownModelError",
    "UnknownZoneError",
    "ZoneSpec",
    # Pipeline
    "assemble_composite",
    "build_forecast_hours",
    "build_forecast_tasks",
    "effective_horizon",
    "fetch_run",
    "get_model",
    "get_zone",
    "inspect_run_state",
    "reconcile_run_directory",
    "resolve_run_window",
]

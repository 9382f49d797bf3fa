"""Run directory bookkeeping before a fetch starts."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from nomads_fetch.exceptions import RunAlreadyCompleteError, RunDirectoryConflictError
from nomads_fetch.utils.logging import logger

if TYPE_CHECKING:
    from pathlib import Path

    from nomads_fetch.window import RunWindow

__all__ = [
    "FetchMode",
    "RunPaths",
    "RunState",
    "inspect_run_state",
    "reconcile_run_directory",
]


class FetchMode(StrEnum):
    """How an existing run directory is treated."""

    NORMAL = "normal"
    MERGE = "merge"
    REFETCH = "refetch"


class RunState(StrEnum):
    """On-disk state of a run, derived from the composite and run directory."""

    FRESH = "fresh"
    COMPLETE = "complete"
    ARTIFACT_EXISTS = "artifact_exists"
    PARTIAL = "partial"


@dataclass(frozen=True)
class RunPaths:
    """Locations of one run under the download tree."""

    base_dir: Path
    label: str

    @property
    def grb2_dir(self) -> Path:
        return self.base_dir / "grb2"

    @property
    def run_dir(self) -> Path:
        """Directory holding the per-forecast files."""
        return self.grb2_dir / self.label

    @property
    def composite(self) -> Path:
        """Concatenated grib file of the whole run."""
        return self.grb2_dir / f"{self.label}.grb2"

    def forecast_path(self, filename: str) -> Path:
        return self.run_dir / filename


def inspect_run_state(paths: RunPaths) -> RunState:
    """Classify the run from what exists on disk."""
    has_composite = paths.composite.exists()
    has_dir = paths.run_dir.is_dir()
    if has_composite and has_dir:
        return RunState.ARTIFACT_EXISTS
    if has_composite:
        return RunState.COMPLETE
    if has_dir:
        return RunState.PARTIAL
    return RunState.FRESH


def reconcile_run_directory(paths: RunPaths, mode: FetchMode, window: RunWindow) -> RunState:
    """Prepare the run directory for fetching according to *mode*.

    Parameters
    ----------
    paths : RunPaths
        Locations of the run.
    mode : FetchMode
        ``normal`` refuses to touch an existing run directory, ``merge``
        keeps it so present forecasts are skipped, ``refetch`` empties it.
    window : RunWindow
        Targeted run, carried into :class:`RunAlreadyCompleteError`.

    Returns
    -------
    RunState
        State observed before any change was made.

    Raises
    ------
    RunAlreadyCompleteError
        The composite exists without a run directory and ``mode`` is not
        ``refetch``.
    RunDirectoryConflictError
        The run directory exists and ``mode`` is ``normal``. Nothing is
        deleted in this case.
    """
    state = inspect_run_state(paths)
    logger.debug("Run %s state: %s (mode: %s)", paths.label, state, mode)

    if state == RunState.COMPLETE and mode != FetchMode.REFETCH:
        raise RunAlreadyCompleteError(paths.composite, window)

    if paths.run_dir.is_dir() and mode == FetchMode.NORMAL:
        raise RunDirectoryConflictError(paths.run_dir)

    if paths.composite.exists():
        logger.info("Removing stale %s", paths.composite)
        paths.composite.unlink()

    if not paths.run_dir.is_dir():
        paths.run_dir.mkdir(parents=True)
    elif mode == FetchMode.REFETCH:
        logger.info("Clearing %s", paths.run_dir)
        shutil.rmtree(paths.run_dir)
        paths.run_dir.mkdir()
    else:
        logger.info("Merging into %s", paths.run_dir)

    return state

"""Concatenate the forecast files of a run into one composite grib file."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nomads_fetch.exceptions import AssemblyError
from nomads_fetch.pool import FetchOutcome
from nomads_fetch.utils.logging import logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from nomads_fetch.pool import TaskResult
    from nomads_fetch.reconcile import RunPaths

__all__ = ["AssemblySummary", "assemble_composite"]

_COPY_BUFSIZE = 1024 * 1024


@dataclass
class AssemblySummary:
    """Counts and artifacts produced by :func:`assemble_composite`."""

    fetched: int = 0
    existing: int = 0
    failed_hours: list[int] = field(default_factory=list)
    composite: Path | None = None
    size: int = 0
    run_dir_removed: bool = False

    @property
    def failed(self) -> int:
        return len(self.failed_hours)

    @property
    def appended(self) -> int:
        """Number of forecast files in the composite."""
        return self.fetched + self.existing


def assemble_composite(
    results: Sequence[TaskResult], paths: RunPaths, *, keep: bool = False
) -> AssemblySummary:
    """Append every good forecast file to the run's composite, in forecast order.

    Files are copied byte for byte; grib messages are self-delimiting so the
    concatenation is itself a valid grib file. No composite is written when
    there is nothing to append. The run directory is removed only when the
    composite was written, no forecast failed and ``keep`` is False, so a
    partial run can be completed later with a merge.

    Parameters
    ----------
    results : sequence of TaskResult
        Pool results, in any order.
    paths : RunPaths
        Locations of the run.
    keep : bool, optional
        Keep the run directory after a clean run.

    Returns
    -------
    AssemblySummary
        Counts, failed forecast hours and the composite path if written.

    Raises
    ------
    AssemblyError
        If the composite cannot be created or a forecast file cannot be read.
    """
    summary = AssemblySummary()
    good: list[Path] = []
    for result in sorted(results, key=lambda r: r.index):
        if result.outcome == FetchOutcome.BAD or result.path is None:
            summary.failed_hours.append(result.hour)
            continue
        if result.outcome == FetchOutcome.OK:
            summary.fetched += 1
        else:
            summary.existing += 1
        good.append(result.path)

    if not good:
        logger.debug("Nothing to assemble for %s", paths.label)
        return summary

    try:
        with paths.composite.open("wb") as out:
            for part in good:
                with part.open("rb") as src:
                    shutil.copyfileobj(src, out, _COPY_BUFSIZE)
    except OSError as e:
        raise AssemblyError(f"Failed to write {paths.composite}: {e}") from e

    summary.composite = paths.composite
    summary.size = paths.composite.stat().st_size
    logger.debug("Wrote %d forecasts to %s", summary.appended, paths.composite)

    if not summary.failed_hours and not keep:
        try:
            shutil.rmtree(paths.run_dir)
        except OSError as e:
            logger.warning("Could not remove %s: %s", paths.run_dir, e)
        else:
            summary.run_dir_removed = True
    return summary

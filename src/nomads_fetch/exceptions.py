"""Exceptions raised by the NOMADS fetch pipeline.

Per-forecast download and validation faults never raise: they are recorded
as ``bad`` outcomes and reported in the fetch summary. The classes below are
the structural faults that end an invocation. Each carries the process exit
code the command-line interface uses for it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from nomads_fetch.window import RunWindow


class NomadsFetchError(Exception):
    """Base exception class for all nomads_fetch errors."""

    exit_code: int = 1


class UnknownZoneError(NomadsFetchError, KeyError):
    """Raised when a region identifier is not in the zone catalog."""

    def __init__(self, zone: str, known: list[str]) -> None:
        self.zone = zone
        self.known = known
        super().__init__(f"Unknown region: {zone!r}. Run 'nomads-fetch zones' to list regions.")

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownModelError(NomadsFetchError, KeyError):
    """Raised when a zone references a model that is not in the model catalog."""

    def __init__(self, model: str, zone: str | None = None) -> None:
        self.model = model
        self.zone = zone
        if zone:
            msg = f"Zone {zone!r} has no associated model {model!r}"
        else:
            msg = f"Unknown model: {model!r}"
        super().__init__(msg)

    def __str__(self) -> str:
        return str(self.args[0])


class RunAlreadyCompleteError(NomadsFetchError):
    """Raised when the composite for the targeted run already exists.

    This is informational rather than a failure: the caller should report
    when the next run becomes available and stop.
    """

    def __init__(self, composite: Path, window: RunWindow) -> None:
        self.composite = composite
        self.window = window
        super().__init__(f"This complete model run exists in {composite}")


class RunDirectoryConflictError(NomadsFetchError):
    """Raised when a run directory exists and neither merge nor refetch was requested."""

    exit_code = 3

    def __init__(self, run_dir: Path) -> None:
        self.run_dir = run_dir
        super().__init__(
            f"Directory exists: {run_dir}\n"
            "Use --merge to fetch missing forecasts\n"
            "Use --refetch to overwrite existing forecasts"
        )


class AssemblyError(NomadsFetchError):
    """Raised when the composite file cannot be created or written."""

    exit_code = 4

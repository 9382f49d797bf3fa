"""Model run selection from the current time and a model's publication lags."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from nomads_fetch.utils.time import ensure_utc, truncate

if TYPE_CHECKING:
    from nomads_fetch.config.catalog import ModelSpec

__all__ = ["RunWindow", "resolve_run_window"]


@dataclass(frozen=True)
class RunWindow:
    """The model run targeted by one fetch.

    Attributes
    ----------
    run_time : datetime
        UTC run timestamp, aligned to the model's run cadence.
    forecast_last : datetime
        Instant the last forecast of this run is expected to be published.
    in_progress : bool
        Whether ``now`` was still before ``forecast_last`` when resolved.
    run_cadence, start_lag, end_lag : timedelta
        Publication parameters of the model, kept for next-run timing.
    pending_run : datetime, optional
        A newer run that was skipped because it was still being published.
    pending_last : datetime, optional
        Expected publication time of the last forecast of ``pending_run``.
    """

    run_time: datetime
    forecast_last: datetime
    in_progress: bool
    run_cadence: timedelta
    start_lag: timedelta
    end_lag: timedelta
    pending_run: datetime | None = None
    pending_last: datetime | None = None

    @property
    def hour(self) -> int:
        """Run hour (the ``z`` hour in NOMADS file names)."""
        return self.run_time.hour

    def next_run(self) -> tuple[datetime, datetime]:
        """Return when the run after this one starts and finishes publishing."""
        first_available = self.run_time + self.run_cadence + self.start_lag
        complete_at = self.forecast_last + self.run_cadence
        return first_available, complete_at


def resolve_run_window(
    now: datetime,
    model: ModelSpec,
    *,
    previous: bool = False,
    partial: bool = False,
) -> RunWindow:
    """Pick the model run to fetch.

    The newest run whose first forecast should be published by ``now`` is
    the candidate. Unless ``partial`` is set, runs whose last forecast is
    not yet due are skipped in favour of the run before them.

    Parameters
    ----------
    now : datetime
        Current instant. Naive values are taken as UTC.
    model : ModelSpec
        Model whose cadence and lags drive the selection.
    previous : bool, optional
        Target the run before the one that would otherwise be chosen.
    partial : bool, optional
        Allow targeting a run that is still being published.

    Returns
    -------
    RunWindow
        The selected run.

    Examples
    --------
    >>> from datetime import datetime
    >>> from nomads_fetch.config.catalog import get_model
    >>> w = resolve_run_window(datetime(2024, 6, 11, 12, 0), get_model("hrrr"))
    >>> w.run_time.hour, w.in_progress
    (10, False)
    """
    now = ensure_utc(now)
    candidate = now - model.start_lag
    if previous:
        candidate -= model.run_cadence
    run_time = truncate(candidate, model.run_cadence)
    forecast_last = run_time + model.end_lag
    in_progress = now < forecast_last

    pending_run = pending_last = None
    if in_progress and not partial:
        pending_run, pending_last = run_time, forecast_last
        while now < forecast_last:
            run_time -= model.run_cadence
            forecast_last = run_time + model.end_lag
        in_progress = False

    return RunWindow(
        run_time=run_time,
        forecast_last=forecast_last,
        in_progress=in_progress,
        run_cadence=model.run_cadence,
        start_lag=model.start_lag,
        end_lag=model.end_lag,
        pending_run=pending_run,
        pending_last=pending_last,
    )

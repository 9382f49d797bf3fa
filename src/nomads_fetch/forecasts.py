"""Forecast-hour sequences for a model run."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nomads_fetch.config.catalog import ModelSpec

__all__ = ["ForecastTask", "build_forecast_hours", "build_forecast_tasks", "effective_horizon"]

_HOUR = timedelta(hours=1)


@dataclass(frozen=True)
class ForecastTask:
    """One forecast hour to fetch; ``index`` fixes its place in the composite."""

    index: int
    hour: int


def effective_horizon(model: ModelSpec, *caps: timedelta | None) -> timedelta:
    """Return the model horizon limited by every cap that is set."""
    return min([model.horizon, *(cap for cap in caps if cap is not None)])


def build_forecast_hours(model: ModelSpec, horizon: timedelta | None = None) -> list[int]:
    """List the forecast hours published for one run.

    Parameters
    ----------
    model : ModelSpec
        Model providing the forecast cadence and the sparse-tail rule.
    horizon : timedelta, optional
        Last forecast offset to include; defaults to the model horizon.
        Larger values are clipped to the model horizon.

    Returns
    -------
    list of int
        Ascending forecast hours, starting at 0.
    """
    horizon = effective_horizon(model, horizon)
    step = model.forecast_cadence
    if step % _HOUR:
        raise ValueError(f"Model {model.name!r}: forecast cadence {step} is not whole hours")

    hours = range(0, horizon // _HOUR + 1, step // _HOUR)
    tail = model.sparse_tail
    if tail is None:
        return list(hours)
    return [h for h in hours if not tail.skips(h)]


def build_forecast_tasks(model: ModelSpec, horizon: timedelta | None = None) -> list[ForecastTask]:
    """Number the forecast hours of :func:`build_forecast_hours` in fetch order."""
    return [
        ForecastTask(index=i, hour=hour)
        for i, hour in enumerate(build_forecast_hours(model, horizon))
    ]

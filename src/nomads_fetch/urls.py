"""Grib filter request construction."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from nomads_fetch.config.catalog import ModelSpec, ZoneSpec

__all__ = [
    "build_filename",
    "build_url",
    "level_query",
    "run_label",
    "variable_query",
]


def _filter_query(items: tuple[str, ...], kind: str) -> str:
    if items == ("all",):
        return f"&all_{kind}=on"
    return "".join(f"&{kind}_{item}=on" for item in items)


def level_query(zone: ZoneSpec) -> str:
    """Encode the zone's levels as grib filter flags (``&lev_surface=on``...)."""
    return _filter_query(zone.levels, "lev")


def variable_query(zone: ZoneSpec) -> str:
    """Encode the zone's variables as grib filter flags (``&var_TMP=on``...)."""
    return _filter_query(zone.variables, "var")


def build_filename(model: ModelSpec, run_time: datetime, forecast_hour: int) -> str:
    """Name of the file published for one forecast hour of a run."""
    return model.filename_template.format(
        prefix=model.file_prefix, hour=run_time.hour, forecast=forecast_hour
    )


def build_url(zone: ZoneSpec, model: ModelSpec, run_time: datetime, forecast_hour: int) -> str:
    """Grib filter URL for one forecast hour of a run, subset to the zone.

    The run hour is only substituted for models that publish one directory
    per run; the others use one directory per day.
    """
    fields = {
        "file": build_filename(model, run_time, forecast_hour),
        "levels": level_query(zone),
        "variables": variable_query(zone),
        "west": zone.bbox.west,
        "east": zone.bbox.east,
        "north": zone.bbox.north,
        "south": zone.bbox.south,
        "year": run_time.year,
        "month": run_time.month,
        "day": run_time.day,
    }
    if model.dir_per_run:
        fields["hour"] = run_time.hour
    return model.url_template.format(**fields)


def run_label(zone: ZoneSpec, run_time: datetime) -> str:
    """Label naming a run's directory and composite, e.g. ``2024-06-11_10z_sf_hrrr``."""
    return f"{run_time:%Y-%m-%d_%H}z_{zone.geo}_{zone.model}"

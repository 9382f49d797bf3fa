"""Zone and model catalog for the NOMADS grib filter service.

A *model* describes how a NOAA model is published: how often it runs, how
far apart its forecast steps are, how long after the run time the first and
last forecasts usually appear, and the URL/filename templates of the grib
filter CGI. A *zone* selects a model, a bounding box and the variables and
levels to request.

Templates use :meth:`str.format` named fields:

* ``filename_template``: ``prefix``, ``hour`` (run hour), ``forecast``
  (forecast hour offset).
* ``url_template``: ``file``, ``levels``, ``variables`` (pre-encoded query
  fragments), ``west``, ``east``, ``north``, ``south``, ``year``,
  ``month``, ``day`` and, for models with ``dir_per_run``, ``hour``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import timedelta
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from nomads_fetch.exceptions import UnknownModelError, UnknownZoneError
from nomads_fetch.utils.time import format_duration, parse_duration

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

#: Single-item filter list that switches the query to ``all_lev`` / ``all_var``.
ALL = ("all",)

_NOMADS = "https://nomads.ncep.noaa.gov/cgi-bin"
_BBOX_QUERY = (
    "&subregion=&leftlon={west:.2f}&rightlon={east:.2f}&toplat={north:.2f}&bottomlat={south:.2f}"
)
_DURATION_FIELDS = ("run_cadence", "forecast_cadence", "horizon", "start_lag", "end_lag")


@dataclass(frozen=True)
class SparseTail:
    """Forecast hours past ``after_hour`` are only published every ``every_hours``."""

    after_hour: int
    every_hours: int

    def __post_init__(self) -> None:
        if self.after_hour < 0 or self.every_hours <= 0:
            raise ValueError(
                f"Invalid sparse tail: after_hour={self.after_hour}, every_hours={self.every_hours}"
            )

    def skips(self, forecast_hour: int) -> bool:
        """Return True if *forecast_hour* is not published under this rule."""
        return forecast_hour > self.after_hour and forecast_hour % self.every_hours != 0


@dataclass(frozen=True)
class ModelSpec:
    """Publication parameters of one NOMADS model product."""

    name: str
    file_prefix: str
    run_cadence: timedelta
    forecast_cadence: timedelta
    horizon: timedelta
    start_lag: timedelta
    end_lag: timedelta
    url_template: str
    filename_template: str
    dir_per_run: bool = False
    sparse_tail: SparseTail | None = None

    def __post_init__(self) -> None:
        for name in _DURATION_FIELDS:
            object.__setattr__(self, name, parse_duration(getattr(self, name)))
        if self.run_cadence <= timedelta(0):
            raise ValueError(f"Model {self.name!r}: run_cadence must be positive")
        if self.forecast_cadence <= timedelta(0):
            raise ValueError(f"Model {self.name!r}: forecast_cadence must be positive")
        if self.horizon < timedelta(0):
            raise ValueError(f"Model {self.name!r}: horizon must not be negative")
        if isinstance(self.sparse_tail, dict):
            object.__setattr__(self, "sparse_tail", SparseTail(**self.sparse_tail))

    @classmethod
    def from_dict(
        cls, name: str, data: Mapping[str, Any], base: ModelSpec | None = None
    ) -> ModelSpec:
        """Build a model from a YAML mapping, filling gaps from *base* when given."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Model {name!r}: unknown keys {sorted(unknown)}")
        if base is not None:
            return replace(base, name=name, **dict(data))
        return cls(name=name, **dict(data))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a YAML-friendly mapping."""
        data: dict[str, Any] = {
            "file_prefix": self.file_prefix,
            **{name: format_duration(getattr(self, name)) for name in _DURATION_FIELDS},
            "url_template": self.url_template,
            "filename_template": self.filename_template,
            "dir_per_run": self.dir_per_run,
        }
        if self.sparse_tail is not None:
            data["sparse_tail"] = {
                "after_hour": self.sparse_tail.after_hour,
                "every_hours": self.sparse_tail.every_hours,
            }
        return data


@dataclass(frozen=True)
class BoundingBox:
    """Geographic bounds in degrees (longitudes may exceed +-180 for the grib filter)."""

    west: float
    east: float
    north: float
    south: float

    def __post_init__(self) -> None:
        if self.north < self.south:
            raise ValueError(f"north ({self.north}) must not be below south ({self.south})")

    @classmethod
    def coerce(cls, value: BoundingBox | Mapping[str, float] | Iterable[float]) -> BoundingBox:
        """Accept a box, a ``{west, east, north, south}`` mapping or a 4-item sequence."""
        if isinstance(value, BoundingBox):
            return value
        if isinstance(value, dict):
            return cls(**value)
        west, east, north, south = value
        return cls(west, east, north, south)


@dataclass(frozen=True)
class ZoneSpec:
    """A named selection of model, region, levels and variables."""

    name: str
    description: str
    geo: str
    model: str
    bbox: BoundingBox
    levels: tuple[str, ...] = ALL
    variables: tuple[str, ...] = ALL
    horizon: timedelta | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "bbox", BoundingBox.coerce(self.bbox))
        object.__setattr__(self, "levels", tuple(self.levels))
        object.__setattr__(self, "variables", tuple(self.variables))
        if self.horizon is not None:
            object.__setattr__(self, "horizon", parse_duration(self.horizon))
        for label, items in (("levels", self.levels), ("variables", self.variables)):
            if not items:
                raise ValueError(f"Zone {self.name!r}: {label} must not be empty")
            if "all" in items and len(items) > 1:
                raise ValueError(f"Zone {self.name!r}: 'all' must be the only item in {label}")

    @classmethod
    def from_dict(
        cls, name: str, data: Mapping[str, Any], base: ZoneSpec | None = None
    ) -> ZoneSpec:
        """Build a zone from a YAML mapping, filling gaps from *base* when given."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Zone {name!r}: unknown keys {sorted(unknown)}")
        if base is not None:
            return replace(base, name=name, **dict(data))
        return cls(name=name, **dict(data))


@dataclass(frozen=True)
class Catalog:
    """Read-only zone and model lookup tables."""

    zones: Mapping[str, ZoneSpec] = field(default_factory=dict)
    models: Mapping[str, ModelSpec] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "zones", MappingProxyType(dict(self.zones)))
        object.__setattr__(self, "models", MappingProxyType(dict(self.models)))

    def zone(self, name: str) -> ZoneSpec:
        """Look up a zone by identifier."""
        try:
            return self.zones[name]
        except KeyError:
            raise UnknownZoneError(name, sorted(self.zones)) from None

    def model(self, name: str, zone: str | None = None) -> ModelSpec:
        """Look up a model by identifier."""
        try:
            return self.models[name]
        except KeyError:
            raise UnknownModelError(name, zone) from None

    def resolve(self, zone_name: str) -> tuple[ZoneSpec, ModelSpec]:
        """Return the zone and its model."""
        zone = self.zone(zone_name)
        return zone, self.model(zone.model, zone.name)

    def extend(
        self,
        zones: Mapping[str, Mapping[str, Any]] | None = None,
        models: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> Catalog:
        """Return a new catalog with YAML-style zone/model entries added or overridden.

        Entries whose key already exists are merged field by field over the
        existing definition, so ``{"sf": {"horizon": "12h"}}`` only changes
        the horizon of the built-in ``sf`` zone.
        """
        new_models = dict(self.models)
        for name, data in (models or {}).items():
            new_models[name] = ModelSpec.from_dict(name, data, base=new_models.get(name))
        new_zones = dict(self.zones)
        for name, data in (zones or {}).items():
            new_zones[name] = ZoneSpec.from_dict(name, data, base=new_zones.get(name))
        return Catalog(zones=new_zones, models=new_models)


def _filter_url(script: str, directory: str) -> str:
    return f"{_NOMADS}/{script}?file={{file}}{{levels}}{{variables}}{_BBOX_QUERY}&dir={directory}"


_GFS_DIR = "%2Fgfs.{year:04d}{month:02d}{day:02d}%2F{hour:02d}"
_GFS_WAVE_DIR = _GFS_DIR + "%2Fwave%2Fgridded"
_HRRR_DIR = "%2Fhrrr.{year:04d}{month:02d}{day:02d}%2Fconus"
_NAM_DIR = "%2Fnam.{year:04d}{month:02d}{day:02d}"

_MODELS = (
    ModelSpec(
        name="gfs",
        file_prefix="gfs",
        run_cadence="6h",
        forecast_cadence="6h",
        horizon="384h",
        start_lag="3.5h",
        end_lag="5h",
        url_template=_filter_url("filter_gfs_0p25.pl", _GFS_DIR + "%2Fatmos"),
        filename_template="{prefix}.t{hour:02d}z.pgrb2.0p25.f{forecast:03d}",
        dir_per_run=True,
        # every 12 hours after day 10
        sparse_tail=SparseTail(after_hour=240, every_hours=12),
    ),
    ModelSpec(
        name="gfs_hourly",
        file_prefix="gfs",
        run_cadence="6h",
        forecast_cadence="1h",
        horizon="384h",
        start_lag="3.5h",
        end_lag="5h",
        url_template=_filter_url("filter_gfs_0p25_1hr.pl", _GFS_DIR),
        filename_template="{prefix}.t{hour:02d}z.pgrb2.0p25.f{forecast:03d}",
        dir_per_run=True,
    ),
    ModelSpec(
        name="gfs-wave-global",
        file_prefix="gfswave",
        run_cadence="6h",
        forecast_cadence="3h",
        horizon="384h",
        start_lag="3.5h",
        end_lag="5.25h",
        url_template=_filter_url("filter_gfswave.pl", _GFS_WAVE_DIR),
        filename_template="{prefix}.t{hour:02d}z.global.0p16.f{forecast:03d}.grib2",
        dir_per_run=True,
    ),
    ModelSpec(
        name="gfs-wave-epacif",
        file_prefix="gfswave",
        run_cadence="6h",
        forecast_cadence="1h",
        horizon="384h",
        start_lag="3.5h",
        end_lag="5.25h",
        url_template=_filter_url("filter_gfswave.pl", _GFS_WAVE_DIR),
        filename_template="{prefix}.t{hour:02d}z.epacif.0p16.f{forecast:03d}.grib2",
        dir_per_run=True,
        # hourly for 5 days, then every 3 hours
        sparse_tail=SparseTail(after_hour=120, every_hours=3),
    ),
    ModelSpec(
        name="gfs-ensemble-25",
        file_prefix="geavg",
        run_cadence="6h",
        forecast_cadence="6h",
        horizon="384h",
        start_lag="3.75h",
        end_lag="6.5h",
        url_template=_filter_url(
            "filter_gefs_atmos_0p25s.pl", _GFS_DIR.replace("gfs.", "gefs.") + "%2Fatmos%2Fpgrb2sp25"
        ),
        filename_template="{prefix}.t{hour:02d}z.pgrb2s.0p25.f{forecast:03d}",
        dir_per_run=True,
    ),
    ModelSpec(
        name="gfs-ensemble-5",
        file_prefix="geavg",
        run_cadence="6h",
        forecast_cadence="6h",
        horizon="384h",
        start_lag="3.75h",
        end_lag="6.5h",
        url_template=_filter_url(
            "filter_gefs_atmos_0p50a.pl", _GFS_DIR.replace("gfs.", "gefs.") + "%2Fatmos%2Fpgrb2ap5"
        ),
        filename_template="{prefix}.t{hour:02d}z.pgrb2a.0p50.f{forecast:03d}",
        dir_per_run=True,
    ),
    ModelSpec(
        name="hrrr",
        file_prefix="hrrr",
        run_cadence="1h",
        forecast_cadence="1h",
        # 18 hours except the four daily extended runs, see hrrr36
        horizon="18h",
        start_lag="50m",
        end_lag="85m",
        url_template=_filter_url("filter_hrrr_2d.pl", _HRRR_DIR),
        filename_template="{prefix}.t{hour:02d}z.wrfsfcf{forecast:02d}.grib2",
    ),
    ModelSpec(
        name="hrrr36",
        file_prefix="hrrr",
        run_cadence="6h",
        forecast_cadence="1h",
        horizon="36h",
        start_lag="50m",
        end_lag="110m",
        url_template=_filter_url("filter_hrrr_2d.pl", _HRRR_DIR),
        filename_template="{prefix}.t{hour:02d}z.wrfsfcf{forecast:02d}.grib2",
    ),
    ModelSpec(
        name="hrrr_sub",
        file_prefix="hrrr",
        run_cadence="1h",
        forecast_cadence="1h",
        horizon="18h",
        start_lag="55m",
        end_lag="85m",
        url_template=_filter_url("filter_hrrr_sub.pl", _HRRR_DIR),
        filename_template="{prefix}.t{hour:02d}z.wrfsubhf{forecast:02d}.grib2",
    ),
    ModelSpec(
        name="nam",
        file_prefix="nam",
        run_cadence="6h",
        forecast_cadence="1h",
        horizon="60h",
        start_lag="1.5h",
        end_lag="3h",
        url_template=_filter_url("filter_nam.pl", _NAM_DIR),
        filename_template="{prefix}.t{hour:02d}z.awphys{forecast:02d}.tm00.grib2",
    ),
    ModelSpec(
        name="nam-nest",
        file_prefix="nam",
        run_cadence="6h",
        forecast_cadence="1h",
        horizon="60h",
        start_lag="1.5h",
        end_lag="3h",
        url_template=_filter_url("filter_nam_conusnest.pl", _NAM_DIR),
        filename_template="{prefix}.t{hour:02d}z.conusnest.hiresf{forecast:02d}.tm00.grib2",
    ),
)

# Level and variable sets shared by several zones
_LAYER = "entire_atmosphere_%5C%28considered_as_a_single_layer%5C%29"
_SFC = ("surface", "2_m_above_ground", "10_m_above_ground")
_SFC_WIND = ("PRES", "UGRD", "VGRD", "TMP", "WIND", "GUST")
_HRRR_LEVELS = ("mean_sea_level", *_SFC, "entire_atmosphere", _LAYER)
_HRRR_VARS = ("APCP", "GUST", "PRATE", "PRES", "PWAT", "TMP", "UGRD", "VGRD", "WIND")
_HRRR_RADAR = ("REFC", "REFD", "MAXREF")
_HRRR_CONVECTION = ("CAPE", "LFTX", "LTNG", "VIS")
_NAM_LEVELS = ("mean_sea_level", *_SFC)
_NAM_WIND = ("PRMSL", "UGRD", "VGRD", "TMP", "GUST")
_GFS_LEVELS = ("mean_sea_level", *_SFC, "300_mb", "500_mb", "850_mb", _LAYER, "entire_atmosphere")
_GFS_PACIFIC_VARS = (
    "PRMSL", "MSLET", "UGRD", "VGRD", "TMP", "ACPCP", "CPRAT", "APCP", "PWAT", "PRATE", "GUST",
    "HGT", "REFC", "CAPE", "CRAIN", "CSNOW", "CICEP", "CFRZR", "CPOFP", "GRLE", "ICMR", "WEASD",
)
_WAVE_LEVELS = ("surface", "1_in_sequence", "2_in_sequence", "3_in_sequence")
_WAVE_VARS = ("DIRPW", "HTSGW", "PERPW", "SWDIR", "SWELL", "SWPER", "WVDIR", "WVHGT", "WVPER")

_ZONES = (
    ZoneSpec(
        name="sf",
        description="SF Bay Wind hi-res (18 hour hrrr)",
        geo="sf",
        model="hrrr",
        bbox=BoundingBox(-122.5, -121.0, 39.0, 36.0),
        levels=(
            "mean_sea_level", "surface", "1_m_above_ground", *_SFC[1:], "entire_atmosphere", _LAYER,
        ),
        variables=(*_HRRR_VARS, *_HRRR_RADAR, *_HRRR_CONVECTION),
    ),
    ZoneSpec(
        name="socal",
        description="SoCal Bay Wind hi-res (18 hour hrrr)",
        geo="socal",
        model="hrrr",
        bbox=BoundingBox(-120.5, -116.5, 34.5, 32.0),
        levels=_HRRR_LEVELS,
        variables=(*_HRRR_VARS, *_HRRR_RADAR),
    ),
    ZoneSpec(
        name="socal+",
        description="SoCal Bay Wind hi-res with convection (18 hour hrrr)",
        geo="socal",
        model="hrrr",
        bbox=BoundingBox(-120.5, -116.5, 34.5, 32.0),
        levels=_HRRR_LEVELS,
        variables=(*_HRRR_VARS, *_HRRR_RADAR, *_HRRR_CONVECTION),
    ),
    ZoneSpec(
        name="sf36",
        description="SF Bay Wind hi-res (36 hour hrrr, runs every 6 hours)",
        geo="sf",
        model="hrrr36",
        bbox=BoundingBox(-123, -122, 38, 37),
        levels=_SFC,
        variables=_SFC_WIND,
    ),
    ZoneSpec(
        name="sf36+",
        description="SF Bay Wind hi-res with precip (36 hour hrrr, runs every 6 hours)",
        geo="sf",
        model="hrrr36",
        bbox=BoundingBox(-123, -122, 38, 37),
        levels=_HRRR_LEVELS,
        variables=(*_HRRR_VARS, *_HRRR_RADAR, *_HRRR_CONVECTION),
    ),
    ZoneSpec(
        name="sfoffshore",
        description="SF Bay & Farallones Wind hi-res (18 hour hrrr)",
        geo="sfoffshore",
        model="hrrr",
        bbox=BoundingBox(-131, -119, 41, 35),
        levels=_SFC,
        variables=_SFC_WIND,
    ),
    ZoneSpec(
        name="sfoffshore36",
        description="SF Bay & Farallones Wind hi-res (36 hour hrrr)",
        geo="sfoffshore",
        model="hrrr36",
        bbox=BoundingBox(-131, -119, 41, 35),
        levels=_SFC,
        variables=_SFC_WIND,
    ),
    ZoneSpec(
        name="sfsub",
        description="SF Bay Wind hi-res, 15m intervals (18 hour hrrr_sub)",
        geo="sf",
        model="hrrr_sub",
        bbox=BoundingBox(-123, -122, 38, 37),
        levels=(*_SFC, "1000_m_above_ground", "4000_m_above_ground", "entire_atmosphere"),
        variables=(
            "PRATE", "APCP", "PRES", "UGRD", "VGRD", "TMP", "WIND", "GUST", "DPT", "REFC", "REFD",
        ),
    ),
    ZoneSpec(
        name="sfrcsub",
        description="SF Bay Wind hi-res, 15m intervals (18 hour hrrr_sub)",
        geo="sf",
        model="hrrr_sub",
        bbox=BoundingBox(-123.0, -122.0, 38.25, 37.5),
        levels=(*_SFC, "1000_m_above_ground", "4000_m_above_ground", "entire_atmosphere"),
        variables=("UGRD", "VGRD", "TMP", "WIND", "GUST"),
    ),
    ZoneSpec(
        name="norcal",
        description="Bay Area (incl Monterey Bay) all variables (18 hour hrrr)",
        geo="norcal",
        model="hrrr",
        bbox=BoundingBox(-123, -121, 38, 36),
    ),
    ZoneSpec(
        name="sf96",
        description="SF Bay Wind (96 hour GFS)",
        geo="sf96",
        model="gfs_hourly",
        bbox=BoundingBox(-124.5, -122, 38.5, 36.5),
        levels=_HRRR_LEVELS,
        variables=("APCP", "GUST", "PRATE", "PRES", "PWAT", "TMP", "UGRD", "VGRD"),
        horizon="96h",
    ),
    ZoneSpec(
        name="sfnam",
        description="Outside SF Bay Wind (60 hour NAM)",
        geo="sfnam",
        model="nam-nest",
        bbox=BoundingBox(-124.5, -122, 38.5, 36.5),
        levels=_NAM_LEVELS,
        variables=_NAM_WIND,
    ),
    ZoneSpec(
        name="socalnam",
        description="SoCal Wind (60 hour NAM)",
        geo="socalnam",
        model="nam-nest",
        bbox=BoundingBox(-120.5, -116.5, 34.5, 32.0),
        levels=_NAM_LEVELS,
        variables=_NAM_WIND,
    ),
    ZoneSpec(
        name="bosporushrrr",
        description="Wind for Bosporus (18 hour hrrr)",
        geo="bosporushrrr",
        model="hrrr",
        bbox=BoundingBox(-121, -115, 36, 30),
        levels=(*_NAM_LEVELS, "500_mb", "300_mb"),
        variables=("PRES", "WIND", "UGRD", "VGRD", "TMP", "GUST", "APCP", "PRATE", *_HRRR_RADAR),
    ),
    ZoneSpec(
        name="bosporusnam",
        description="Wind for Bosporus (60 hour NAM)",
        geo="bosporusnam",
        model="nam-nest",
        bbox=BoundingBox(-120, -110, 36, 30),
        levels=_NAM_LEVELS,
        variables=(*_NAM_WIND, "APCP", "PRATE"),
    ),
    ZoneSpec(
        name="bosporusgfs",
        description="Pacific Wind/Precip (10 day GFS)",
        geo="bosporusgfs",
        model="gfs",
        bbox=BoundingBox(-135, -106, 35, 20),
        levels=_GFS_LEVELS,
        variables=(
            "PRMSL", "MSLET", "UGRD", "VGRD", "TMP", "APCP", "PWAT", "PRATE", "GUST", "HGT",
            "REFC", "CAPE",
        ),
    ),
    ZoneSpec(
        name="casnownam",
        description="California Coast and Mountains (60 hour NAM)",
        geo="ca",
        model="nam-nest",
        bbox=BoundingBox(-137.0, -117.0, 43.0, 32.0),
        levels=(*_NAM_LEVELS, _LAYER, "500_mb"),
        variables=(
            *_NAM_WIND, "MSLET", *_HRRR_RADAR, "PWAT", "ICEC", "PRATE", "RH", "APCP", "HGT",
            "LTNG",
        ),
    ),
    ZoneSpec(
        name="canam",
        description="California Coast (60 hour NAM)",
        geo="ca",
        model="nam-nest",
        bbox=BoundingBox(-130.0, -116.0, 42.0, 32.5),
        levels=_NAM_LEVELS,
        variables=(
            *_NAM_WIND, "LTNG", "PWAT", "CSNOW", "CICEP", "CFRZR", "CRAIN", "REFC", "PRATE",
            "NCPCP",
        ),
    ),
    ZoneSpec(
        name="cahrrr",
        description="California Coast (18 hour HRRR)",
        geo="ca",
        model="hrrr",
        bbox=BoundingBox(-130.0, -116.0, 42.0, 32.5),
        levels=("mean_sea_level", *_SFC, "entire_atmosphere"),
        variables=(*_HRRR_VARS, *_HRRR_RADAR, "LTNG"),
    ),
    ZoneSpec(
        name="cahrrr36",
        description="California Coast (36 hour HRRR)",
        geo="ca",
        model="hrrr36",
        bbox=BoundingBox(-130.0, -116.0, 42.0, 32.5),
        levels=_SFC,
        variables=_SFC_WIND,
    ),
    ZoneSpec(
        name="fire",
        description="SF North Bay fire (18 hour hrrr_sub)",
        geo="fire",
        model="hrrr_sub",
        bbox=BoundingBox(-123, -121, 39, 37),
        levels=_SFC,
        variables=_SFC_WIND,
    ),
    ZoneSpec(
        name="tahoe",
        description="Tahoe area (18 hour hrrr)",
        geo="tahoe",
        model="hrrr",
        bbox=BoundingBox(-123, -119, 41, 36),
        levels=(
            "mean_sea_level", "surface", "1_m_above_ground", "2_m_above_ground",
            "10_m_above_ground", "250_mb", "500_mb", "700_mb", "850_mb", "entire_atmosphere",
            _LAYER,
        ),
        variables=(
            "GUST", "APCP", "HGT", "RH", "PRATE", "PRES", "PWAT", "TMP", "UGRD", "VGRD", "WIND",
            *_HRRR_RADAR, "ASNOW", "CSNOW", "CRAIN", "CICEP", "CFRZR",
        ),
    ),
    ZoneSpec(
        name="tahoenam",
        description="Tahoe area (60 hour NAM)",
        geo="tahoe",
        model="nam-nest",
        bbox=BoundingBox(-123.0, -118.0, 42.0, 36.0),
        levels=(*_NAM_LEVELS, "500_mb", "850_mb", _LAYER),
        variables=(
            "PRMSL", "MSLET", "PWAT", "UGRD", "VGRD", "TMP", "GUST", "PRATE", *_HRRR_RADAR,
            "APCP", "SNOD", "WEASD", "SRWEQ", "CFRZR", "CICE", "CICEP", "CPOFP", "CRAIN", "CSNOW",
        ),
    ),
    ZoneSpec(
        name="pacific",
        description="North Pacific Wind/Precip (10 day GFS)",
        geo="pacific",
        model="gfs",
        bbox=BoundingBox(-230, -100, 70, 10),
        levels=_GFS_LEVELS,
        variables=_GFS_PACIFIC_VARS,
    ),
    ZoneSpec(
        name="epacific-wave",
        description="North Pacific Wave (16 day GFS wave)",
        geo="pacific",
        model="gfs-wave-epacif",
        bbox=BoundingBox(-230, -100, 70, 10),
    ),
    ZoneSpec(
        name="pacific-wave",
        description="Pacific Cup Wave (16 day GFS wave)",
        geo="pacific",
        model="gfs-wave-global",
        bbox=BoundingBox(-230, -100, 40, 15),
        levels=_WAVE_LEVELS,
        variables=(*_WAVE_VARS, "WIND"),
    ),
    ZoneSpec(
        name="paccup",
        description="North-East Pacific Wind (10 day GFS)",
        geo="paccup",
        model="gfs",
        bbox=BoundingBox(-160, -115, 50, 15),
        levels=_GFS_LEVELS,
        variables=_GFS_PACIFIC_VARS,
    ),
    ZoneSpec(
        name="paccup-wave",
        description="Pacific Cup Wave (16 day GFS wave)",
        geo="paccup",
        model="gfs-wave-global",
        bbox=BoundingBox(-160, -115, 40, 15),
        levels=_WAVE_LEVELS,
        variables=_WAVE_VARS,
    ),
    ZoneSpec(
        name="ca-wave",
        description="California Wave (16 day GFS wave)",
        geo="ca",
        model="gfs-wave-epacif",
        bbox=BoundingBox(-130, -115, 40, 32),
        levels=_WAVE_LEVELS,
        variables=(*_WAVE_VARS, "UGRD", "VGRD", "WDIR", "WIND"),
    ),
    ZoneSpec(
        name="jeddah",
        description="Jeddah Wind/Precip (10 day GFS)",
        geo="jeddah",
        model="gfs",
        bbox=BoundingBox(35, 43, 25, 19),
        levels=_GFS_LEVELS,
        variables=(
            "PRMSL", "MSLET", "UGRD", "VGRD", "TMP", "APCP", "PWAT", "PRATE", "GUST", "HGT",
            "REFC", "CAPE", "CRAIN", "CSNOW", "CICEP", "CFRZR",
        ),
    ),
    ZoneSpec(
        name="wc-e5",
        description="West Coast Wind/Precip (0.5 degree 16 day GFS Ensemble)",
        geo="westcoast",
        model="gfs-ensemble-5",
        bbox=BoundingBox(-230, -100, 70, 10),
    ),
    ZoneSpec(
        name="wc-e",
        description="West Coast Wind/Precip (0.25 degree 16 day GFS Ensemble)",
        geo="westcoast",
        model="gfs-ensemble-25",
        bbox=BoundingBox(-140, -110, 50, 30),
    ),
    ZoneSpec(
        name="s2h",
        description="Sydney to Hobart (10 day GFS)",
        geo="s2h",
        model="gfs",
        bbox=BoundingBox(138, 163, -30, -46),
        levels=("mean_sea_level", *_SFC, "300_mb", "500_mb", _LAYER, "entire_atmosphere"),
        variables=(
            "PRMSL", "MSLET", "UGRD", "VGRD", "TMP", "APCP", "PWAT", "PRATE", "GUST", "HGT",
            "REFC",
        ),
    ),
    ZoneSpec(
        name="la",
        description="Los Angeles Wind hi-res (18 hour hrrr)",
        geo="la",
        model="hrrr",
        bbox=BoundingBox(-122.0, -117.0, 36.0, 32.0),
        levels=_HRRR_LEVELS,
        variables=_HRRR_VARS,
    ),
    ZoneSpec(
        name="se",
        description="IOD Sweden Race Area (10 day GFS)",
        geo="stenungsund",
        model="gfs",
        bbox=BoundingBox(0, 20, 65, 50),
        levels=_NAM_LEVELS,
        variables=("PRMSL", "UGRD", "VGRD", "TMP", "CAPE"),
    ),
    ZoneSpec(
        name="volvo",
        description="Wherever the Volvo Ocean Race is (10 day GFS)",
        geo="volvo",
        model="gfs",
        bbox=BoundingBox(140, 170, 0, -40),
        levels=_NAM_LEVELS,
        variables=("PRMSL", "UGRD", "VGRD", "TMP", "CAPE"),
    ),
    ZoneSpec(
        name="utah",
        description="Big Sky to Wasatch (18 hour hrrr)",
        geo="utah",
        model="hrrr",
        bbox=BoundingBox(-118, -105, 48, 38),
        levels=_HRRR_LEVELS,
        variables=_HRRR_VARS,
    ),
    ZoneSpec(
        name="colorado",
        description="Colorado (18 hour hrrr)",
        geo="colorado",
        model="hrrr",
        bbox=BoundingBox(-109, -102, 41, 37),
        levels=_HRRR_LEVELS,
        variables=_HRRR_VARS,
    ),
    ZoneSpec(
        name="chessy",
        description="Annapolis Wind hi-res (18 hour hrrr)",
        geo="chesapeake",
        model="hrrr",
        bbox=BoundingBox(-77.0, -75.5, 39.75, 38.5),
        levels=_SFC,
        variables=_SFC_WIND,
    ),
    ZoneSpec(
        name="newport",
        description="Newport Wind hi-res (18 hour hrrr)",
        geo="newport",
        model="hrrr",
        bbox=BoundingBox(-71.5, -71.0, 41.75, 41.25),
        levels=_SFC,
        variables=_SFC_WIND,
    ),
    ZoneSpec(
        name="hamptons",
        description="Hamptons to Newport Wind hi-res (18 hour hrrr)",
        geo="hamptons",
        model="hrrr",
        bbox=BoundingBox(-72.5, -71.0, 42.00, 40.00),
        levels=_HRRR_LEVELS,
        variables=(
            "APCP", "PRATE", "PRES", "UGRD", "VGRD", "TMP", "WIND", "GUST", *_HRRR_RADAR,
        ),
    ),
    ZoneSpec(
        name="hamptonsnam",
        description="Hamptons to Newport (60 hour NAM)",
        geo="hamptons",
        model="nam-nest",
        bbox=BoundingBox(-72.5, -70.0, 42.50, 40.00),
        levels=_NAM_LEVELS,
        variables=_NAM_WIND,
    ),
    ZoneSpec(
        name="hamptonsgfs",
        description="New England GFS (10 day GFS)",
        geo="hamptons",
        model="gfs",
        bbox=BoundingBox(-90, -55, 50, 34),
        levels=("mean_sea_level", *_SFC, "300_mb", "500_mb", _LAYER, "entire_atmosphere"),
        variables=(
            "PRMSL", "MSLET", "UGRD", "VGRD", "TMP", "APCP", "PWAT", "PRATE", "GUST", "HGT",
            "REFC",
        ),
    ),
    ZoneSpec(
        name="dorian",
        description="Dorian Wind hi-res (18 hour hrrr)",
        geo="dorian",
        model="hrrr",
        bbox=BoundingBox(-81, -76, 29, 25),
        levels=_HRRR_LEVELS,
        variables=(*_HRRR_VARS, "REFC"),
    ),
    ZoneSpec(
        name="doriannam",
        description="Dorian NAM (60 hour NAM)",
        geo="dorian",
        model="nam-nest",
        bbox=BoundingBox(-81, -76, 29, 25),
        levels=(*_NAM_LEVELS, _LAYER),
        variables=("PRMSL", "MSLET", "UGRD", "VGRD", "TMP", "GUST", "APCP", "PWAT", "REFC"),
    ),
)

MODELS: Mapping[str, ModelSpec] = MappingProxyType({m.name: m for m in _MODELS})
ZONES: Mapping[str, ZoneSpec] = MappingProxyType({z.name: z for z in _ZONES})
DEFAULT_CATALOG = Catalog(zones=ZONES, models=MODELS)


def get_zone(name: str) -> ZoneSpec:
    """Look up a built-in zone by identifier."""
    return DEFAULT_CATALOG.zone(name)


def get_model(name: str) -> ModelSpec:
    """Look up a built-in model by identifier."""
    return DEFAULT_CATALOG.model(name)

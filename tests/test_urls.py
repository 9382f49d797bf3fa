"""Tests for nomads_fetch.urls module."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from nomads_fetch.config.catalog import get_model, get_zone
from nomads_fetch.urls import build_filename, build_url, level_query, run_label, variable_query

RUN_10Z = datetime(2024, 6, 11, 10, tzinfo=UTC)
RUN_06Z = datetime(2024, 6, 11, 6, tzinfo=UTC)


class TestFilterQueries:
    def test_levels(self, test_zone):
        assert level_query(test_zone) == "&lev_surface=on&lev_10_m_above_ground=on"

    def test_variables(self, test_zone):
        assert variable_query(test_zone) == "&var_UGRD=on&var_VGRD=on"

    def test_all_sentinel(self):
        zone = get_zone("norcal")
        assert level_query(zone) == "&all_lev=on"
        assert variable_query(zone) == "&all_var=on"


class TestBuildFilename:
    @pytest.mark.parametrize(
        ("model", "run_time", "hour", "expected"),
        [
            ("hrrr", RUN_10Z, 3, "hrrr.t10z.wrfsfcf03.grib2"),
            ("hrrr_sub", RUN_10Z, 18, "hrrr.t10z.wrfsubhf18.grib2"),
            ("gfs", RUN_06Z, 252, "gfs.t06z.pgrb2.0p25.f252"),
            ("nam-nest", RUN_06Z, 7, "nam.t06z.conusnest.hiresf07.tm00.grib2"),
            ("gfs-wave-epacif", RUN_06Z, 0, "gfswave.t06z.epacif.0p16.f000.grib2"),
            ("gfs-ensemble-5", RUN_06Z, 12, "geavg.t06z.pgrb2a.0p50.f012"),
        ],
    )
    def test_filenames(self, model, run_time, hour, expected):
        assert build_filename(get_model(model), run_time, hour) == expected


class TestBuildUrl:
    def test_daily_directory(self):
        url = build_url(get_zone("sf"), get_model("hrrr"), RUN_10Z, 3)
        assert url.startswith(
            "https://nomads.ncep.noaa.gov/cgi-bin/filter_hrrr_2d.pl?file=hrrr.t10z.wrfsfcf03.grib2"
        )
        assert "&lev_mean_sea_level=on" in url
        assert "&var_APCP=on" in url
        assert "&subregion=&leftlon=-122.50&rightlon=-121.00&toplat=39.00&bottomlat=36.00" in url
        assert url.endswith("&dir=%2Fhrrr.20240611%2Fconus")

    def test_levels_before_variables(self):
        url = build_url(get_zone("norcal"), get_model("hrrr"), RUN_10Z, 0)
        assert "&all_lev=on&all_var=on&subregion=" in url

    def test_per_run_directory(self):
        url = build_url(get_zone("pacific"), get_model("gfs"), RUN_06Z, 12)
        assert "filter_gfs_0p25.pl?file=gfs.t06z.pgrb2.0p25.f012" in url
        assert "&leftlon=-230.00&rightlon=-100.00&toplat=70.00&bottomlat=10.00" in url
        assert url.endswith("&dir=%2Fgfs.20240611%2F06%2Fatmos")

    def test_wave_directory(self):
        url = build_url(get_zone("ca-wave"), get_model("gfs-wave-epacif"), RUN_06Z, 0)
        assert url.endswith("&dir=%2Fgfs.20240611%2F06%2Fwave%2Fgridded")

    def test_ensemble_directory(self):
        url = build_url(get_zone("wc-e"), get_model("gfs-ensemble-25"), RUN_06Z, 6)
        assert url.endswith("&dir=%2Fgefs.20240611%2F06%2Fatmos%2Fpgrb2sp25")

    def test_exact_url(self, test_zone, test_model):
        url = build_url(test_zone, test_model, RUN_06Z, 2)
        assert url == (
            "https://nomads.example/cgi-bin/filter.pl?file=tst.t06z.f002"
            "&lev_surface=on&lev_10_m_above_ground=on&var_UGRD=on&var_VGRD=on"
            "&leftlon=-123.00&rightlon=-122.00&toplat=38.00&bottomlat=37.00"
            "&dir=%2Ftst.20240611"
        )


class TestRunLabel:
    def test_label(self):
        assert run_label(get_zone("sf"), RUN_10Z) == "2024-06-11_10z_sf_hrrr"

    def test_label_uses_geo_group(self):
        assert run_label(get_zone("sf36"), RUN_06Z) == "2024-06-11_06z_sf_hrrr36"

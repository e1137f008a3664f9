"""Sidereal time, altitude, airmass and twilight classification."""

from datetime import datetime, timedelta, timezone

import pytest

from nightskychart.astro import (
    airmass,
    altitude,
    hour_angle,
    hours_to_degrees,
    is_night,
    is_twilight,
    julian_date,
    local_sidereal_time,
    target_altitude,
    twilight_phase,
)
from nightskychart.models import TwilightPhase

J2000 = datetime(2000, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestJulianDate:
    def test_j2000_epoch(self):
        assert julian_date(J2000) == pytest.approx(2451545.0)

    def test_unix_epoch(self):
        assert julian_date(datetime(1970, 1, 1, tzinfo=timezone.utc)) == pytest.approx(
            2440587.5
        )

    def test_offset_zone_is_same_instant(self):
        tokyo = J2000.astimezone(timezone(timedelta(hours=9)))
        assert julian_date(tokyo) == pytest.approx(2451545.0)

    def test_naive_datetime_rejected(self):
        with pytest.raises(ValueError):
            julian_date(datetime(2000, 1, 1, 12, 0))


class TestLocalSiderealTime:
    def test_greenwich_at_j2000(self):
        assert local_sidereal_time(2451545.0, 0.0) == pytest.approx(280.46061837)

    def test_longitude_wraps(self):
        assert local_sidereal_time(2451545.0, 100.0) == pytest.approx(20.46061837)

    def test_west_longitude(self):
        assert local_sidereal_time(2451545.0, -74.0) == pytest.approx(206.46061837)

    def test_one_sidereal_day_later(self):
        # 360 / 360.98564736629 days is one sidereal day
        jd = 2451545.0 + 360.0 / 360.98564736629
        assert local_sidereal_time(jd, 0.0) == pytest.approx(280.46061837, abs=1e-6)

    @pytest.mark.parametrize("jd", [2440000.0, 2451545.3, 2460000.7])
    def test_range(self, jd):
        assert 0.0 <= local_sidereal_time(jd, -179.9) < 360.0


class TestHourAngle:
    @pytest.mark.parametrize(
        "lst, ra, expected",
        [
            (10.0, 350.0, 20.0),
            (350.0, 10.0, 340.0),
            (100.0, 100.0, 0.0),
            (0.0, 0.0, 0.0),
        ],
    )
    def test_values(self, lst, ra, expected):
        assert hour_angle(lst, ra) == pytest.approx(expected)


class TestAltitude:
    def test_transit_at_zenith(self):
        assert altitude(dec=35.0, latitude=35.0, ha=0.0) == pytest.approx(90.0)

    def test_equator_six_hours_from_meridian(self):
        assert altitude(dec=0.0, latitude=0.0, ha=90.0) == pytest.approx(0.0, abs=1e-9)

    def test_pole_altitude_equals_latitude(self):
        for ha in (0.0, 45.0, 180.0, 300.0):
            assert altitude(dec=90.0, latitude=52.0, ha=ha) == pytest.approx(52.0)

    def test_south_pole_below_horizon_from_north(self):
        assert altitude(dec=-90.0, latitude=40.0, ha=123.0) == pytest.approx(-40.0)

    def test_lower_culmination(self):
        assert altitude(dec=60.0, latitude=50.0, ha=180.0) == pytest.approx(20.0)

    def test_target_on_meridian_at_lst(self):
        jd = julian_date(J2000)
        ra = local_sidereal_time(jd, 0.0)
        assert target_altitude(J2000, 20.0, 0.0, ra, 20.0) == pytest.approx(90.0)


class TestAirmass:
    def test_zenith_close_to_one(self):
        assert airmass(90.0) == pytest.approx(1.0, abs=1e-3)

    def test_thirty_degrees_close_to_two(self):
        assert airmass(30.0) == pytest.approx(1.994, abs=0.01)

    def test_monotonic(self):
        values = [airmass(a) for a in (10.0, 20.0, 45.0, 70.0, 90.0)]
        assert values == sorted(values, reverse=True)

    @pytest.mark.parametrize("alt", [0.0, -0.1, -45.0])
    def test_none_at_or_below_horizon(self, alt):
        assert airmass(alt) is None

    def test_finite_near_horizon(self):
        assert 30.0 < airmass(0.1) < 40.0


class TestTwilight:
    @pytest.mark.parametrize(
        "sun, expected",
        [
            (10.0, TwilightPhase.DAY),
            (0.0, TwilightPhase.CIVIL),
            (-5.9, TwilightPhase.CIVIL),
            (-6.0, TwilightPhase.NAUTICAL),
            (-12.0, TwilightPhase.ASTRONOMICAL),
            (-18.0, TwilightPhase.ASTRONOMICAL),
            (-18.01, TwilightPhase.NIGHT),
        ],
    )
    def test_phase(self, sun, expected):
        assert twilight_phase(sun) == expected

    def test_flags_boundaries(self):
        assert is_night(-18.01)
        assert not is_night(-18.0)
        assert is_twilight(-18.0)
        assert is_twilight(-0.01)
        assert not is_twilight(0.0)
        assert not is_twilight(-20.0)

    def test_flags_are_exclusive(self):
        for sun in range(-40, 20):
            assert not (is_night(sun) and is_twilight(sun))


class TestHoursToDegrees:
    def test_scales_by_fifteen(self):
        assert hours_to_degrees(5.57) == pytest.approx(83.55)

    def test_full_circle(self):
        assert hours_to_degrees(24.0) == pytest.approx(360.0)

"""Shared fixtures: a table-driven stand-in for the skyfield ephemeris."""

from datetime import date, datetime
from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")

from nightskychart.compute import calculate_object_visibility, summarize  # noqa: E402
from nightskychart.config import Settings  # noqa: E402
from nightskychart.ephemeris import BodyState  # noqa: E402
from nightskychart.models import (  # noqa: E402
    ObserverContext,
    Target,
    TwilightPhase,
    VisibilityData,
    VisibilitySample,
)

# Local hour -> Sun altitude. Night 20:00-04:00, twilight 05-06 and 18-19, day 07-17.
SUN_BY_HOUR = {
    **{h: -30.0 for h in range(0, 5)},
    5: -10.0,
    6: -2.0,
    **{h: 20.0 for h in range(7, 18)},
    18: -5.0,
    19: -15.0,
    **{h: -25.0 for h in range(20, 24)},
}


class StubEphemeris:
    """Returns Sun/Moon state keyed on the local hour of each datetime."""

    def __init__(self) -> None:
        self.calls: list[tuple[list[datetime], float, float]] = []

    def bodies_at(self, utc_datetimes, lat, lon):
        times = list(utc_datetimes)
        self.calls.append((times, lat, lon))
        return [
            BodyState(
                sun_altitude=SUN_BY_HOUR[dt.hour],
                moon_altitude=10.0 + dt.hour,
                moon_illumination=dt.hour / 100,
            )
            for dt in times
        ]


@pytest.fixture
def stub_ephemeris() -> StubEphemeris:
    return StubEphemeris()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        resources_dir=tmp_path,
        ephemeris_file="de421.bsp",
        ra_unit="hours",
        log_level="DEBUG",
        user_agent="nightskychart-tests",
    )


@pytest.fixture
def polaris_data(stub_ephemeris: StubEphemeris) -> VisibilityData:
    """Celestial pole seen from latitude 40 in UTC: altitude is 40° all window."""
    day = date(2024, 1, 15)
    samples = calculate_object_visibility(
        day, 40.0, 0.0, 0.0, 90.0, tz_name="UTC", ephemeris=stub_ephemeris
    )
    return VisibilityData(
        context=ObserverContext(
            lat=40.0, lng=0.0, tz_name="UTC", address_display="40.0000, 0.0000"
        ),
        target=Target(ra_deg=0.0, dec_deg=90.0, name="Pole"),
        date=day,
        samples=samples,
        window="noon",
        summary=summarize(samples),
    )


def make_sample(
    time: str,
    altitude: float,
    sun_altitude: float,
    moon_illumination: float = 0.1,
) -> VisibilitySample:
    hour, minute = (int(p) for p in time.split(":"))
    return VisibilitySample(
        time=time,
        local_dt=datetime(2024, 1, 15, hour, minute),
        altitude=altitude,
        sun_altitude=sun_altitude,
        moon_altitude=0.0,
        airmass=None,
        is_night=sun_altitude < -18,
        is_twilight=-18 <= sun_altitude < 0,
        phase=TwilightPhase.NIGHT if sun_altitude < -18 else TwilightPhase.DAY,
        moon_illumination=moon_illumination,
    )

"""Sun and Moon positions from a JPL kernel via skyfield."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from pathlib import Path

from skyfield import almanac
from skyfield.api import Loader, wgs84

from nightskychart.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BodyState:
    """Solar and lunar state for one instant, seen from the site."""

    sun_altitude: float  # Degrees
    moon_altitude: float  # Degrees
    moon_illumination: float  # Illuminated fraction (0..1)


class SkyfieldEphemeris:
    """Lazily loaded skyfield ephemeris.

    The kernel is downloaded into ``resources_dir`` on first use and reused
    afterwards.
    """

    def __init__(self, resources_dir: Path, ephemeris_file: str = "de421.bsp") -> None:
        self._loader = Loader(str(resources_dir))
        self._ephemeris_file = ephemeris_file
        self._eph = None
        self._ts = None

    def _load(self):
        if self._eph is None:
            logger.info("Loading ephemeris %s", self._ephemeris_file)
            self._eph = self._loader(self._ephemeris_file)
            self._ts = self._loader.timescale()
        return self._eph, self._ts

    def bodies_at(
        self, utc_datetimes: Sequence[datetime], lat: float, lon: float
    ) -> list[BodyState]:
        """Compute Sun/Moon altitude and lunar illumination for each instant.

        Args:
            utc_datetimes: Timezone-aware datetimes.
            lat: Site latitude (decimal degrees).
            lon: Site longitude (decimal degrees, east positive).

        Returns:
            One BodyState per datetime, in the same order.
        """
        eph, ts = self._load()
        t = ts.from_datetimes(list(utc_datetimes))

        # altaz() needs a ground observer (earth + latlon), not a bare geographic position
        ground = eph["earth"] + wgs84.latlon(latitude_degrees=lat, longitude_degrees=lon)
        observer = ground.at(t)
        sun_alt, _, _ = observer.observe(eph["sun"]).apparent().altaz()
        moon_alt, _, _ = observer.observe(eph["moon"]).apparent().altaz()
        illumination = almanac.fraction_illuminated(eph, "moon", t)

        return [
            BodyState(
                sun_altitude=float(s),
                moon_altitude=float(m),
                moon_illumination=float(f),
            )
            for s, m, f in zip(sun_alt.degrees, moon_alt.degrees, illumination)
        ]


@lru_cache(maxsize=None)
def default_ephemeris(resources_dir: Path, ephemeris_file: str) -> SkyfieldEphemeris:
    """Process-wide ephemeris instance keyed on its location."""
    return SkyfieldEphemeris(resources_dir, ephemeris_file)


def ephemeris_from_settings(settings: Settings) -> SkyfieldEphemeris:
    return default_ephemeris(settings.resources_dir, settings.ephemeris_file)

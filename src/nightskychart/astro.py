"""Sidereal time and horizon-coordinate math for fixed RA/Dec targets.

All angles in degrees unless otherwise noted.
"""

import math
from datetime import datetime

from nightskychart.models import TwilightPhase

J2000_JD = 2451545.0
UNIX_EPOCH_JD = 2440587.5
SECONDS_PER_DAY = 86400.0
DEGREES_PER_HOUR = 15.0

NIGHT_LIMIT = -18.0
NAUTICAL_LIMIT = -12.0
CIVIL_LIMIT = -6.0


def julian_date(dt: datetime) -> float:
    """Julian date of an aware datetime.

    Raises:
        ValueError: If dt is naive.
    """
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError("julian_date requires a timezone-aware datetime")
    return dt.timestamp() / SECONDS_PER_DAY + UNIX_EPOCH_JD


def normalize_angle(angle: float) -> float:
    """Normalize angle to the 0-360 degree range."""
    return angle % 360.0


def local_sidereal_time(jd: float, longitude: float) -> float:
    """Approximate local mean sidereal time in degrees.

    Args:
        jd: Julian date (UT).
        longitude: Observer longitude, east positive.
    """
    gmst = 280.46061837 + 360.98564736629 * (jd - J2000_JD)
    return normalize_angle(gmst + longitude)


def hour_angle(lst: float, ra: float) -> float:
    """Hour angle of a target in degrees (0-360, westward from the meridian)."""
    return normalize_angle(lst - ra + 360.0)


def altitude(dec: float, latitude: float, ha: float) -> float:
    """Topocentric altitude of a target from its declination and hour angle."""
    dec_r = math.radians(dec)
    lat_r = math.radians(latitude)
    sin_alt = math.sin(dec_r) * math.sin(lat_r) + math.cos(dec_r) * math.cos(
        lat_r
    ) * math.cos(math.radians(ha))
    # Rounding can push |sin_alt| just past 1 for targets at the zenith or pole.
    return math.degrees(math.asin(max(-1.0, min(1.0, sin_alt))))


def target_altitude(
    dt: datetime, latitude: float, longitude: float, ra: float, dec: float
) -> float:
    """Altitude of a fixed RA/Dec target seen from (latitude, longitude) at dt."""
    lst = local_sidereal_time(julian_date(dt), longitude)
    return altitude(dec, latitude, hour_angle(lst, ra))


def airmass(alt: float) -> float | None:
    """Relative airmass using Kasten & Young (1989).

    Returns None at or below the horizon, where the formula stops being meaningful.
    """
    if alt <= 0.0:
        return None
    return 1.0 / (math.sin(math.radians(alt)) + 0.50572 * (alt + 6.07995) ** -1.6364)


def twilight_phase(sun_altitude: float) -> TwilightPhase:
    """Classify the sky by the Sun's altitude."""
    if sun_altitude > 0.0:
        return TwilightPhase.DAY
    if sun_altitude > CIVIL_LIMIT:
        return TwilightPhase.CIVIL
    if sun_altitude > NAUTICAL_LIMIT:
        return TwilightPhase.NAUTICAL
    if sun_altitude >= NIGHT_LIMIT:
        return TwilightPhase.ASTRONOMICAL
    return TwilightPhase.NIGHT


def is_night(sun_altitude: float) -> bool:
    """Astronomical night: the Sun more than 18° below the horizon."""
    return sun_altitude < NIGHT_LIMIT


def is_twilight(sun_altitude: float) -> bool:
    return NIGHT_LIMIT <= sun_altitude < 0.0


def hours_to_degrees(hours: float) -> float:
    return hours * DEGREES_PER_HOUR

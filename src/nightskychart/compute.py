"""Visibility computation layer: input parsing, site resolution and hourly sampling."""

import logging
import math
import re
import warnings
from datetime import date, datetime, time, timedelta

import astropy.units as u
import httpx
from astropy.coordinates import Angle
from astropy.utils.exceptions import AstropyWarning
from pytz import timezone, utc
from timezonefinder import TimezoneFinder

from nightskychart import astro
from nightskychart.config import Settings
from nightskychart.ephemeris import ephemeris_from_settings
from nightskychart.models import (
    ObserverContext,
    QueryInput,
    Target,
    VisibilityData,
    VisibilitySample,
    VisibilitySummary,
)

logger = logging.getLogger(__name__)

_tf = TimezoneFinder()

SAMPLES_PER_WINDOW = 24
WINDOWS = ("noon", "midnight")

_SEXAGESIMAL_HINT = re.compile(r"[:hdms°'\"]|\d\s+\d")
_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)"
_COORDINATE_PAIR = re.compile(rf"^\s*{_NUMBER}\s*,\s*{_NUMBER}\s*$")


class InputError(ValueError):
    """Malformed form input."""


class GeocodingError(Exception):
    """Geocoder call failure."""


def _parse_pair(text: str, kind: str) -> tuple[str, str]:
    """Split "a, b" into two stripped fields."""
    parts = [p.strip() for p in (text or "").split(",")]
    if len(parts) != 2 or not all(parts):
        logger.warning("Rejected %s input %r", kind, text)
        raise InputError("Invalid input format")
    return parts[0], parts[1]


def _to_float(field: str, kind: str) -> float:
    try:
        value = float(field)
    except ValueError as e:
        logger.warning("Rejected %s value %r", kind, field)
        raise InputError("Invalid input format") from e
    if not math.isfinite(value):
        logger.warning("Rejected %s value %r", kind, field)
        raise InputError("Invalid input format")
    return value


def parse_location(text: str) -> tuple[float, float]:
    """Parse a "lat, lon" string.

    Raises:
        InputError: On a malformed pair or coordinates out of range.
    """
    lat_s, lon_s = _parse_pair(text, "location")
    lat = _to_float(lat_s, "latitude")
    lon = _to_float(lon_s, "longitude")
    if not -90.0 <= lat <= 90.0:
        raise InputError(f"Latitude out of range: {lat}")
    if not -180.0 <= lon <= 180.0:
        raise InputError(f"Longitude out of range: {lon}")
    return lat, lon


def _parse_angle(field: str, unit, kind: str) -> float:
    """Decimal degrees of a sexagesimal field, read by astropy in ``unit``.

    Minutes or seconds of 60 and above are rejected, as is a sign on an
    inner field.
    """
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("error", AstropyWarning)
            return float(Angle(field, unit=unit).degree)
    except (ValueError, u.UnitsError, AstropyWarning) as e:
        logger.warning("Rejected %s value %r: %s", kind, field, e)
        raise InputError("Invalid input format") from e


def parse_target(text: str, ra_unit: str = "hours") -> tuple[float, float]:
    """Parse an "RA, Dec" string into degrees.

    Decimal RA is read in ``ra_unit`` ("hours" or "degrees"). Sexagesimal RA
    ("05:34:31.9", "5h34m31.9s") is always hours; sexagesimal Dec is degrees.

    Returns:
        (ra_deg, dec_deg)

    Raises:
        InputError: On a malformed pair or coordinates out of range.
    """
    if ra_unit not in ("hours", "degrees"):
        raise ValueError(f"Unknown RA unit: {ra_unit!r}")
    ra_s, dec_s = _parse_pair(text, "target")

    if _SEXAGESIMAL_HINT.search(ra_s):
        ra_deg = _parse_angle(ra_s, u.hourangle, "right ascension")
    else:
        ra = _to_float(ra_s, "right ascension")
        ra_deg = astro.hours_to_degrees(ra) if ra_unit == "hours" else ra
    if _SEXAGESIMAL_HINT.search(dec_s):
        dec_deg = _parse_angle(dec_s, u.deg, "declination")
    else:
        dec_deg = _to_float(dec_s, "declination")

    if not 0.0 <= ra_deg < 360.0:
        raise InputError(f"Right ascension out of range: {ra_s}")
    if not -90.0 <= dec_deg <= 90.0:
        raise InputError(f"Declination out of range: {dec_s}")
    return ra_deg, dec_deg


def parse_date(text: str) -> date:
    """Parse a "YYYY-MM-DD" date string.

    Raises:
        InputError: When empty or not a valid date.
    """
    if not text or not text.strip():
        raise InputError("Please select a date")
    try:
        return datetime.strptime(text.strip(), "%Y-%m-%d").date()
    except ValueError as e:
        raise InputError(f"Invalid date: {text}") from e


def _geocode_nominatim(
    address: str, user_agent: str, lang: str
) -> tuple[float, float, str] | None:
    """Nominatim (OpenStreetMap) geocoder. Returns (lat, lng, display_name) or None.

    Raises:
        GeocodingError: On a transport or HTTP error, or a malformed response.
    """
    params = {"q": address, "format": "json", "limit": 1, "accept-language": lang}
    headers = {"User-Agent": user_agent}
    try:
        resp = httpx.get(
            "https://nominatim.openstreetmap.org/search",
            params=params,
            headers=headers,
            timeout=10,
        )
        resp.raise_for_status()
        results = resp.json()
    except httpx.HTTPError as e:
        logger.error("Nominatim request for %r failed: %s", address, e)
        raise GeocodingError(f"Geocoder request failed: {e}") from e
    except ValueError as e:
        raise GeocodingError(f"Geocoder returned invalid JSON: {e}") from e
    if not results:
        return None
    try:
        r = results[0]
        return float(r["lat"]), float(r["lon"]), r["display_name"]
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise GeocodingError(f"Unexpected geocoder response: {e!r}") from e


def timezone_for(lat: float, lng: float) -> str:
    """IANA timezone name at a coordinate.

    Raises:
        GeocodingError: When timezonefinder has no zone for the point.
    """
    tz_str = _tf.timezone_at(lat=lat, lng=lng)
    if tz_str is None:
        raise GeocodingError(f"Timezone not found: lat={lat}, lng={lng}")
    return tz_str


def geocode_address(
    location: str, lang: str = "en", settings: Settings | None = None
) -> ObserverContext:
    """Resolve the location field to an ObserverContext.

    A "lat, lon" pair is used as-is; anything else is looked up on Nominatim.

    Args:
        location: "lat, lon" or a place name in any language.
        lang: Language code for the geocoder's display name.
        settings: Runtime settings. Read from the environment if None.

    Returns:
        ObserverContext containing lat/lng, timezone, and display name.

    Raises:
        InputError: When a coordinate pair is out of range.
        GeocodingError: When the place or its timezone cannot be found.
    """
    if _COORDINATE_PAIR.match(location or ""):
        lat, lng = parse_location(location)
        address_display = f"{lat:.4f}, {lng:.4f}"
    else:
        if not location or not location.strip():
            raise InputError("Invalid input format")
        settings = settings or Settings.from_env()
        result = _geocode_nominatim(location.strip(), settings.user_agent, lang)
        if result is None:
            raise GeocodingError(f"Address not found: {location}")
        lat, lng, address_display = result
        logger.info("Geocoded %r to %.4f, %.4f", location, lat, lng)

    return ObserverContext(
        lat=lat,
        lng=lng,
        tz_name=timezone_for(lat, lng),
        address_display=address_display,
    )


def sample_times(day: date, tz_name: str, window: str = "noon") -> list[datetime]:
    """Hourly local datetimes covering one visibility window.

    ``noon`` runs from 12:00 on the day before ``day`` to 11:00 on ``day``
    (the night that ends on that date). ``midnight`` covers ``day`` itself.
    Hours are stepped in absolute time, so a DST change never repeats or
    skips a sample.
    """
    if window not in WINDOWS:
        raise ValueError(f"Unknown window {window!r}; expected one of {WINDOWS}")
    local_tz = timezone(tz_name)
    if window == "noon":
        start_naive = datetime.combine(day - timedelta(days=1), time(12, 0))
    else:
        start_naive = datetime.combine(day, time(0, 0))
    start_utc = local_tz.localize(start_naive, is_dst=False).astimezone(utc)
    return [
        (start_utc + timedelta(hours=hour)).astimezone(local_tz)
        for hour in range(SAMPLES_PER_WINDOW)
    ]


def calculate_object_visibility(
    day: date,
    latitude: float,
    longitude: float,
    target_ra: float,
    target_dec: float,
    *,
    tz_name: str | None = None,
    window: str = "noon",
    ephemeris=None,
) -> tuple[VisibilitySample, ...]:
    """Sample a fixed target's altitude hourly, alongside the Sun and Moon.

    The target altitude comes from local sidereal time and hour angle; the
    Sun and Moon come from the ephemeris.

    Args:
        day: Observation date (site-local).
        latitude: Site latitude (decimal degrees).
        longitude: Site longitude (decimal degrees, east positive).
        target_ra: Right ascension (degrees).
        target_dec: Declination (degrees).
        tz_name: Site timezone. Looked up from the coordinates if None.
        window: "noon" (default) or "midnight". See sample_times().
        ephemeris: Object with a ``bodies_at(datetimes, lat, lon)`` method.
            The configured skyfield ephemeris is used if None.

    Returns:
        24 VisibilitySample objects in time order.
    """
    if tz_name is None:
        tz_name = timezone_for(latitude, longitude)
    if ephemeris is None:
        ephemeris = ephemeris_from_settings(Settings.from_env())

    local_times = sample_times(day, tz_name, window)
    bodies = ephemeris.bodies_at(local_times, latitude, longitude)

    samples: list[VisibilitySample] = []
    for local_dt, body in zip(local_times, bodies):
        alt = astro.target_altitude(local_dt, latitude, longitude, target_ra, target_dec)
        samples.append(
            VisibilitySample(
                time=local_dt.strftime("%H:%M"),
                local_dt=local_dt,
                altitude=alt,
                sun_altitude=body.sun_altitude,
                moon_altitude=body.moon_altitude,
                airmass=astro.airmass(alt),
                is_night=astro.is_night(body.sun_altitude),
                is_twilight=astro.is_twilight(body.sun_altitude),
                phase=astro.twilight_phase(body.sun_altitude),
                moon_illumination=body.moon_illumination,
            )
        )

    logger.debug(
        "Sampled %d hours from %s (%s) for ra=%.3f dec=%.3f",
        len(samples),
        local_times[0].isoformat(),
        tz_name,
        target_ra,
        target_dec,
    )
    return tuple(samples)


def summarize(samples: tuple[VisibilitySample, ...]) -> VisibilitySummary:
    """Peak altitude, dark-sky hours with the target up, and moonlight for a window.

    Raises:
        ValueError: If samples is empty.
    """
    if not samples:
        raise ValueError("Cannot summarize an empty sample window")
    peak = max(samples, key=lambda s: s.altitude)
    dark_up = [s for s in samples if s.is_night and s.altitude > 0.0]
    best_dark = max(dark_up, key=lambda s: s.altitude) if dark_up else None
    return VisibilitySummary(
        max_altitude=round(peak.altitude, 1),
        max_altitude_time=peak.time,
        dark_hours_above_horizon=len(dark_up),
        best_dark_time=best_dark.time if best_dark else None,
        moon_illumination=max(s.moon_illumination for s in samples),
    )


def run(
    query: QueryInput,
    lang: str = "en",
    window: str = "noon",
    settings: Settings | None = None,
    ephemeris=None,
) -> VisibilityData:
    """Top-level entry point: takes a QueryInput and returns a VisibilityData.

    Args:
        query: Form input (location, date, target, object name).
        lang: Language code passed to the geocoder.
        window: "noon" or "midnight".
        settings: Runtime settings. Read from the environment if None.
        ephemeris: Ephemeris override, mainly for tests.

    Returns:
        Fully computed VisibilityData.

    Raises:
        InputError: On malformed input.
        GeocodingError: When the location cannot be resolved.
    """
    settings = settings or Settings.from_env()
    ra_deg, dec_deg = parse_target(query.target, settings.ra_unit)
    day = parse_date(query.date)
    context = geocode_address(query.location, lang=lang, settings=settings)
    target = Target(ra_deg=ra_deg, dec_deg=dec_deg, name=query.object_name.strip())

    samples = calculate_object_visibility(
        day,
        context.lat,
        context.lng,
        target.ra_deg,
        target.dec_deg,
        tz_name=context.tz_name,
        window=window,
        ephemeris=ephemeris or ephemeris_from_settings(settings),
    )
    return VisibilityData(
        context=context,
        target=target,
        date=day,
        samples=samples,
        window=window,
        summary=summarize(samples),
    )

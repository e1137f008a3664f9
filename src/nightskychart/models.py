"""Data model definitions shared by the input, compute and render layers."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


@dataclass(frozen=True)
class QueryInput:
    """Raw form input. Not yet validated."""

    location: str  # "lat, lon" or a place name ("40.7128, -74.0060")
    date: str  # "YYYY-MM-DD" format string
    target: str  # "RA, Dec" ("5.57, 22.01" or "05:34:31.9, +22:00:52")
    object_name: str = ""  # Optional legend label ("M1")


@dataclass(frozen=True)
class ObserverContext:
    """Resolved observing site. Input to the visibility computation."""

    lat: float  # Latitude (decimal degrees)
    lng: float  # Longitude (decimal degrees, east positive)
    tz_name: str  # IANA timezone of the site ("America/New_York")
    address_display: str  # Geocoder display name, or the coordinates as typed


@dataclass(frozen=True)
class Target:
    """Fixed equatorial coordinates of the object being planned."""

    ra_deg: float  # Right ascension (degrees)
    dec_deg: float  # Declination (degrees)
    name: str = ""


class TwilightPhase(str, Enum):
    """Sky state derived from the Sun's altitude."""

    DAY = "day"
    CIVIL = "civil"
    NAUTICAL = "nautical"
    ASTRONOMICAL = "astronomical"
    NIGHT = "night"


@dataclass(frozen=True)
class VisibilitySample:
    """A single hourly sample of the visibility window."""

    time: str  # "HH:MM" label in site-local 24h time
    local_dt: datetime  # Aware datetime in the site timezone
    altitude: float  # Target altitude (degrees)
    sun_altitude: float  # Sun altitude (degrees), drives the flags
    moon_altitude: float  # Moon altitude (degrees)
    airmass: float | None  # None when the target is at or below the horizon
    is_night: bool  # Astronomical night (sun < -18°)
    is_twilight: bool  # -18° <= sun < 0°
    phase: TwilightPhase
    moon_illumination: float  # Illuminated fraction of the Moon (0..1)


@dataclass(frozen=True)
class VisibilitySummary:
    """Headline numbers for one visibility window."""

    max_altitude: float
    max_altitude_time: str
    dark_hours_above_horizon: int  # Night samples with the target above 0°
    best_dark_time: str | None  # Highest night sample, None if never up in the dark
    moon_illumination: float  # Peak illuminated fraction over the window


@dataclass(frozen=True)
class VisibilityData:
    """The sole input to renderers. Fully computed state."""

    context: ObserverContext
    target: Target
    date: date
    samples: tuple[VisibilitySample, ...]  # 24 hourly samples, in time order
    window: str  # "noon" or "midnight"
    summary: VisibilitySummary

"""Runtime settings read from the environment (populated from .env by python-dotenv)."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

_ROOT = Path(__file__).parent.parent.parent

_RA_UNITS = ("hours", "degrees")
_DEFAULT_USER_AGENT = "NightSkyChart/1.0 (you@example.com)"


@dataclass(frozen=True)
class Settings:
    """Application settings. Build with ``Settings.from_env()``."""

    resources_dir: Path  # skyfield download/cache directory
    ephemeris_file: str  # JPL kernel name ("de421.bsp")
    ra_unit: str  # Unit of decimal RA input: "hours" or "degrees"
    log_level: str
    user_agent: str  # Sent to Nominatim

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from os.environ.

        Raises:
            ValueError: If NIGHTSKY_RA_UNIT or NIGHTSKY_LOG_LEVEL is not recognised.
        """
        ra_unit = os.environ.get("NIGHTSKY_RA_UNIT", "hours").strip().lower()
        if ra_unit not in _RA_UNITS:
            raise ValueError(
                f"NIGHTSKY_RA_UNIT must be one of {_RA_UNITS}, got {ra_unit!r}"
            )
        log_level = os.environ.get("NIGHTSKY_LOG_LEVEL", "INFO").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"Unknown NIGHTSKY_LOG_LEVEL: {log_level!r}")
        return cls(
            resources_dir=Path(
                os.environ.get("NIGHTSKY_RESOURCES_DIR", str(_ROOT / "resources"))
            ),
            ephemeris_file=os.environ.get("NIGHTSKY_EPHEMERIS", "de421.bsp"),
            ra_unit=ra_unit,
            log_level=log_level,
            user_agent=os.environ.get("NIGHTSKY_USER_AGENT", _DEFAULT_USER_AGENT),
        )


def configure_logging(settings: Settings) -> None:
    """Install a stream handler on the package logger. Safe to call on every rerun."""
    logger = logging.getLogger("nightskychart")
    logger.setLevel(settings.log_level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(handler)

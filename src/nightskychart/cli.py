"""CLI entry point for static visibility chart generation.

Usage:
    uv run nightskychart --location "40.7128, -74.0060" --date 2024-01-15 \
        --target "5.57, 22.01" --name M1
"""

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

from nightskychart.compute import GeocodingError, InputError, WINDOWS, run
from nightskychart.config import Settings, configure_logging
from nightskychart.models import QueryInput
from nightskychart.renderers.static import save_static_chart

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="nightskychart",
        description="Plot a target's altitude, the Moon, and twilight over 24 hours.",
    )
    p.add_argument("--location", required=True, help='"lat, lon" or a place name')
    p.add_argument("--date", required=True, help="Observation date, YYYY-MM-DD")
    p.add_argument("--target", required=True, help='"RA, Dec" (e.g. "5.57, 22.01")')
    p.add_argument("--name", default="", help="Object name for the legend")
    p.add_argument("--window", choices=WINDOWS, default="noon")
    p.add_argument("--lang", default="en", help="Geocoder language code")
    p.add_argument(
        "--output", type=Path, default=None, help="PNG path (default: results/...)"
    )
    return p


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    configure_logging(settings)

    query = QueryInput(
        location=args.location,
        date=args.date,
        target=args.target,
        object_name=args.name,
    )
    try:
        data = run(query, lang=args.lang, window=args.window, settings=settings)
    except (InputError, GeocodingError) as e:
        logger.error("Chart generation failed: %s", e)
        raise SystemExit(f"Error generating chart: {e}") from e

    path = save_static_chart(data, args.output)
    print(f"Saved: {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Command line interface.

Usage:
    python -m holiday_atlas count FR 2025 7 --scope public
    python -m holiday_atlas details FR 2025
    python -m holiday_atlas totals 2025
    python -m holiday_atlas today
    python -m holiday_atlas top-days 2025 --limit 10
    python -m holiday_atlas build-totals 2025 --out public/data/totals-2025.json
    python -m holiday_atlas config
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
import sys
from typing import Any

from holiday_atlas.atlas import HolidayAtlas
from holiday_atlas.config import ConfigFileError, resolve_config
from holiday_atlas.core.exceptions import (
    HolidayAtlasError,
    MissingKeyError,
    ValidationError,
)

logger = logging.getLogger("holiday_atlas.cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m holiday_atlas",
        description="Fetch and aggregate public-holiday data",
    )
    parser.add_argument("--profile", help="Configuration profile to use")
    parser.add_argument("--env-file", help="Load a .env file before resolving config")
    parser.add_argument("--data-dir", type=Path, help="Override the data directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("count", help="Holiday count for a country and month")
    p.add_argument("iso2")
    p.add_argument("year")
    p.add_argument("month")
    p.add_argument("--scope", default="national", help="national | public | all")
    p.add_argument("--type", dest="type_", help="Raw Calendarific type filter")

    p = sub.add_parser("details", help="Holiday list for a country and year")
    p.add_argument("iso2")
    p.add_argument("year", nargs="?")

    p = sub.add_parser("totals", help="National holiday totals for every country")
    p.add_argument("year", nargs="?")

    p = sub.add_parser("today", help="Countries with a public holiday today")
    p.add_argument("year", nargs="?")

    p = sub.add_parser("top-days", help="Busiest holiday dates from local data")
    p.add_argument("year", nargs="?")
    p.add_argument("--limit", type=int)

    p = sub.add_parser("build-totals", help="Write totals-<year>.json from Nager.Date")
    p.add_argument("year")
    p.add_argument("--out", type=Path, help="Output path")

    sub.add_parser("config", help="Show the effective configuration and its sources")
    return parser


async def _dispatch(atlas: HolidayAtlas, args: argparse.Namespace) -> Any:
    match args.command:
        case "count":
            return await atlas.holiday_count(
                args.iso2, args.year, args.month, args.scope, args.type_
            )
        case "details":
            return await atlas.holiday_details(args.iso2, args.year)
        case "totals":
            return await atlas.holiday_totals(args.year)
        case "today":
            return await atlas.today_set(args.year)
        case "top-days":
            return atlas.top_days(args.year, args.limit)
        case "build-totals":
            return await atlas.build_totals(args.year, args.out)
    raise ValidationError(f"Unknown command: {args.command}")


async def _run(args: argparse.Namespace) -> Any:
    overrides = {"data_dir": args.data_dir} if args.data_dir else None
    config = resolve_config(
        overrides, profile=args.profile, use_env_file=args.env_file
    ).to_frozen()
    async with HolidayAtlas(config) as atlas:
        return await _dispatch(atlas, args)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        if args.command == "config":
            resolved = resolve_config(profile=args.profile, use_env_file=args.env_file)
            print(resolved.audit())  # noqa: T201
            return EXIT_OK
        payload = asyncio.run(_run(args))
    except (ValidationError, MissingKeyError) as e:
        logger.error("%s", e)
        return EXIT_USAGE
    except (HolidayAtlasError, ConfigFileError, ValueError) as e:
        logger.error("%s", e)
        return EXIT_ERROR

    json.dump(payload, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

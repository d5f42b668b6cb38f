"""
`vehicle-catalog` command line.

Usage:
    vehicle-catalog sql-chunks vehicle_catalog_master.csv --out-dir sql_chunks
    vehicle-catalog harvest --output vehicle_catalog_master.csv --curated --trims
    vehicle-catalog harvest --to-db --start-year 2015
    vehicle-catalog load-catalog vehicle_catalog_master.csv --truncate
    vehicle-catalog import-vehicles vehicles.csv

Subcommands that touch the database read DATABASE_URL.
"""

from __future__ import annotations

import argparse
import asyncio
import csv
import logging
import sys
from pathlib import Path
from typing import Awaitable, Callable, Sequence, TypeVar

import asyncpg
import httpx

from core import config, db
from core.logging_config import setup_logging

from . import harvest, service, sql_chunks, vpic

T = TypeVar("T")

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vehicle-catalog",
        description="Populate and maintain the vehicle catalog table.",
    )
    parser.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL.")
    commands = parser.add_subparsers(dest="command", required=True)

    chunks = commands.add_parser("sql-chunks", help="Convert a catalog CSV into chunked INSERT files.")
    chunks.add_argument("csv", type=Path)
    chunks.add_argument("--out-dir", type=Path, default=Path("sql_chunks"))
    chunks.add_argument("--chunk-rows", type=int, default=sql_chunks.DEFAULT_CHUNK_ROWS)

    harvest_cmd = commands.add_parser("harvest", help="Harvest year/make/model data from NHTSA vPIC.")
    target = harvest_cmd.add_mutually_exclusive_group()
    target.add_argument("--output", type=Path, default=Path("vehicle_catalog_master.csv"))
    target.add_argument("--to-db", action="store_true", help="Insert into vehicle_catalog instead of a CSV.")
    harvest_cmd.add_argument("--start-year", type=int, default=harvest.DEFAULT_START_YEAR)
    harvest_cmd.add_argument("--end-year", type=int, default=harvest.DEFAULT_END_YEAR)
    harvest_cmd.add_argument("--curated", action="store_true", help="Only the curated list of major makes.")
    harvest_cmd.add_argument("--trims", action="store_true", help="Enrich rows with CarQuery trims.")
    harvest_cmd.add_argument(
        "--delay-ms",
        type=int,
        default=None,
        help="Pause between makes (default: INGEST_DELAY_MS or 400).",
    )
    harvest_cmd.add_argument("--tries", type=int, default=vpic.DEFAULT_TRIES)

    load = commands.add_parser("load-catalog", help="COPY a catalog CSV into vehicle_catalog.")
    load.add_argument("csv", type=Path)
    load.add_argument("--truncate", action="store_true", help="Empty the table first.")

    vehicles = commands.add_parser("import-vehicles", help="Insert vehicles from a CSV.")
    vehicles.add_argument("csv", type=Path)

    return parser


def harvest_options(args: argparse.Namespace) -> harvest.HarvestOptions:
    delay_ms = args.delay_ms
    if delay_ms is None:
        delay_ms = config.env_int("INGEST_DELAY_MS", int(harvest.DEFAULT_DELAY_S * 1000))
    return harvest.HarvestOptions(
        start_year=args.start_year,
        end_year=args.end_year,
        curated_only=args.curated,
        with_trims=args.trims,
        delay_s=max(delay_ms, 0) / 1000,
        tries=max(args.tries, 1),
    )


async def _with_pool(work: Callable[[], Awaitable[T]]) -> T:
    await db.init_pool()
    try:
        return await work()
    finally:
        await db.close_pool()


def run(args: argparse.Namespace) -> int:
    if args.command == "sql-chunks":
        files = sql_chunks.csv_to_sql_chunks(args.csv, args.out_dir, chunk_rows=args.chunk_rows)
        logger.info("sql_chunks_done files=%s out_dir=%s", len(files), args.out_dir)
        return 0

    if args.command == "harvest":
        options = harvest_options(args)
        if args.to_db:
            stats = asyncio.run(_with_pool(lambda: service.harvest_to_db(options)))
        else:
            stats = asyncio.run(service.harvest_to_csv(args.output, options))
        logger.info("harvest_done rows=%s failed_requests=%s", stats.rows_written, stats.requests_failed)
        return 0

    if args.command == "load-catalog":
        asyncio.run(_with_pool(lambda: service.load_catalog_csv(args.csv, truncate=args.truncate)))
        return 0

    if args.command == "import-vehicles":
        asyncio.run(_with_pool(lambda: service.import_vehicles_csv(args.csv)))
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level or config.log_level())
    try:
        return run(args)
    except (
        OSError,
        ValueError,
        RuntimeError,
        csv.Error,
        httpx.HTTPError,
        asyncpg.PostgresError,
    ) as exc:
        # Unreadable or malformed input, bad arguments, vPIC make list or DB unavailable.
        logger.error("ingestion_failed command=%s error=%s", args.command, exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())

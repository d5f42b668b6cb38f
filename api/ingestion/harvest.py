"""
Catalog harvesting from NHTSA vPIC (+ optional CarQuery trims).

Flow:
1) Fetch the make list once (fatal if this fails)
2) Optionally keep only the curated makes (case-insensitive)
3) For each year (newest first) and make: fetch models, dedupe, optionally
   fetch trims, hand the rows to the sink
4) Sleep a fixed delay between makes to stay under the API rate limits

Per-make failures are logged and skipped; the run keeps going.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

import httpx

from . import carquery, vpic
from .csv_files import CatalogRow

DEFAULT_START_YEAR = 1980
DEFAULT_END_YEAR = 2025
DEFAULT_DELAY_S = 0.4
PROGRESS_EVERY = 50

CURATED_MAKES = frozenset(
    name.lower()
    for name in (
        "Acura", "Alfa Romeo", "AMC", "Aston Martin", "Audi", "Bentley", "BMW", "Buick",
        "Cadillac", "Chevrolet", "Chrysler", "Citroen", "Daewoo", "Daihatsu", "Datsun",
        "DeLorean", "Dodge", "Eagle", "Fiat", "Fisker", "Ford", "Freightliner", "Genesis",
        "Geo", "GMC", "Hino", "Honda", "Hummer", "Hyundai", "Infiniti", "International",
        "Isuzu", "Jaguar", "Jeep", "Karma", "Kia", "Koenigsegg", "Lamborghini",
        "Land Rover", "Lexus", "Lincoln", "Lucid", "Maserati", "Maybach", "Mazda",
        "McLaren", "Mercedes-Benz", "Mercury", "Mini", "Mitsubishi", "Morgan", "Nissan",
        "Oldsmobile", "Opel", "Pagani", "Peugeot", "Plymouth", "Polestar", "Pontiac",
        "Porsche", "RAM", "Renault", "Rivian", "Rolls-Royce", "Saab", "Saleen", "Saturn",
        "Scion", "Seat", "Shelby", "Skoda", "Smart", "Spyker", "SsangYong", "Subaru",
        "Suzuki", "Tata", "Tesla", "Toyota", "Trabant", "Triumph", "TVR", "Vauxhall",
        "Vector", "Volkswagen", "Volvo", "Wiesmann", "Workhorse", "Yugo", "Zenvo",
        "Freightliner Custom Chassis", "Kenworth", "Mack", "Peterbilt", "Western Star",
        "Navistar", "Blue Bird", "Thomas Built", "Gillig", "Proterra",
    )
)

logger = logging.getLogger(__name__)

Sink = Callable[[list[CatalogRow]], Awaitable[int]]


@dataclass(frozen=True)
class HarvestOptions:
    start_year: int = DEFAULT_START_YEAR
    end_year: int = DEFAULT_END_YEAR
    curated_only: bool = False
    with_trims: bool = False
    delay_s: float = DEFAULT_DELAY_S
    tries: int = vpic.DEFAULT_TRIES
    backoff_s: float = vpic.DEFAULT_BACKOFF_S

    def years(self) -> range:
        return range(self.end_year, self.start_year - 1, -1)


@dataclass
class HarvestStats:
    makes: int = 0
    requests_failed: int = 0
    rows_written: int = 0
    failures: list[str] = field(default_factory=list)


def select_makes(makes: list[vpic.Make], *, curated_only: bool) -> list[vpic.Make]:
    if not curated_only:
        return makes
    return [make for make in makes if make.name.lower() in CURATED_MAKES]


async def rows_for_make_year(
    client: httpx.AsyncClient,
    make: vpic.Make,
    year: int,
    options: HarvestOptions,
) -> list[CatalogRow]:
    models = await vpic.get_models(
        client,
        make,
        year,
        tries=options.tries,
        backoff_s=options.backoff_s,
    )
    rows: list[CatalogRow] = []
    for model in models:
        if not options.with_trims:
            rows.append(CatalogRow(year=year, make=make.name, model=model))
            continue
        for trim in await carquery.get_trims(client, make.name, model, year):
            rows.append(
                CatalogRow(
                    year=year,
                    make=make.name,
                    model=model,
                    trim=trim.trim,
                    engine=trim.engine,
                    transmission=trim.transmission,
                )
            )
    return rows


async def harvest_catalog(
    client: httpx.AsyncClient,
    sink: Sink,
    options: HarvestOptions | None = None,
) -> HarvestStats:
    """
    Walk years x makes and feed rows to `sink` after every make.

    Raises vpic.VpicError only when the make list itself cannot be fetched.
    """
    options = options or HarvestOptions()
    if options.start_year > options.end_year:
        raise ValueError("start_year must be <= end_year.")

    all_makes = await vpic.get_all_makes(client, tries=options.tries, backoff_s=options.backoff_s)
    makes = select_makes(all_makes, curated_only=options.curated_only)
    stats = HarvestStats(makes=len(makes))
    logger.info(
        "harvest_started makes=%s years=%s-%s trims=%s",
        len(makes),
        options.start_year,
        options.end_year,
        options.with_trims,
    )

    for year in options.years():
        year_rows = 0
        for index, make in enumerate(makes):
            try:
                rows = await rows_for_make_year(client, make, year, options)
                written = await sink(rows)
            except vpic.VpicError as exc:
                stats.requests_failed += 1
                stats.failures.append(f"{year} {make.name}")
                logger.warning("harvest_make_failed year=%s make=%s error=%s", year, make.name, exc)
            else:
                stats.rows_written += written
                year_rows += written

            if index % PROGRESS_EVERY == 0:
                logger.info(
                    "harvest_progress year=%s make=%s (%s/%s) rows=%s",
                    year,
                    make.name,
                    index + 1,
                    len(makes),
                    stats.rows_written,
                )
            if options.delay_s > 0:
                await asyncio.sleep(options.delay_s)

        logger.info("harvest_year_done year=%s rows=%s", year, year_rows)

    logger.info(
        "harvest_complete rows=%s failed_requests=%s",
        stats.rows_written,
        stats.requests_failed,
    )
    return stats

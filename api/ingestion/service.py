"""
Ingestion "service layer".

Each function here is one CLI subcommand's worth of work, independent of
argparse so it can be driven from tests or a notebook:
- harvest vPIC into a CSV file or straight into the catalog table
- bulk-load a catalog CSV into the table
- import user vehicles from a CSV through the API's validation rules
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import asyncpg
import httpx
from fastapi import HTTPException

from vehicles import service as vehicle_service

from . import harvest, repository, vpic
from .csv_files import CatalogCsvWriter, CatalogRow, read_catalog_rows, read_dict_rows

HTTP_TIMEOUT_S = 30.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportStats:
    imported: int
    skipped: int


def http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=vpic.base_url(), timeout=HTTP_TIMEOUT_S)


async def harvest_to_csv(
    output: Path,
    options: harvest.HarvestOptions,
    *,
    client: httpx.AsyncClient | None = None,
) -> harvest.HarvestStats:
    writer = CatalogCsvWriter(output)
    writer.start()

    async def sink(rows: list[CatalogRow]) -> int:
        return writer.append(rows)

    if client is not None:
        return await harvest.harvest_catalog(client, sink, options)
    async with http_client() as owned:
        return await harvest.harvest_catalog(owned, sink, options)


async def _db_sink(rows: list[CatalogRow]) -> int:
    try:
        return await repository.insert_catalog_rows(rows)
    except asyncpg.PostgresError:
        # One bad batch should not end a multi-hour harvest.
        logger.exception("catalog_insert_failed rows=%s", len(rows))
        return 0


async def harvest_to_db(
    options: harvest.HarvestOptions,
    *,
    client: httpx.AsyncClient | None = None,
) -> harvest.HarvestStats:
    if client is not None:
        return await harvest.harvest_catalog(client, _db_sink, options)
    async with http_client() as owned:
        return await harvest.harvest_catalog(owned, _db_sink, options)


async def load_catalog_csv(csv_path: Path, *, truncate: bool = False) -> str:
    """
    COPY a catalog CSV into `vehicle_catalog`. Rows without make or model are
    dropped.
    """
    if not csv_path.is_file():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")
    if truncate:
        await repository.truncate_catalog()
        logger.warning("catalog_truncated")

    rows = (row for row in read_catalog_rows(csv_path) if row.make and row.model)
    status = await repository.copy_catalog_rows(rows)
    logger.info("catalog_loaded file=%s status=%s", csv_path, status)
    return status


async def import_vehicles_csv(csv_path: Path) -> ImportStats:
    """
    Insert vehicles from a `year,make,model,mileage[,vin]` CSV.

    Rows failing validation, colliding on VIN or rejected by Postgres are
    logged and skipped.
    """
    if not csv_path.is_file():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    imported = 0
    skipped = 0
    for line_no, raw in enumerate(read_dict_rows(csv_path), start=2):
        try:
            vehicle = vehicle_service.parse_new_vehicle(
                year=raw.get("year"),
                make=raw.get("make"),
                model=raw.get("model"),
                mileage=raw.get("mileage"),
                vin=raw.get("vin"),
            )
            await vehicle_service.save_vehicle(vehicle)
        except HTTPException as exc:
            skipped += 1
            logger.warning("vehicle_import_skipped line=%s reason=%s", line_no, exc.detail)
        except asyncpg.PostgresError as exc:
            skipped += 1
            logger.warning("vehicle_import_skipped line=%s reason=%s", line_no, type(exc).__name__)
        else:
            imported += 1

    logger.info("vehicle_import_complete imported=%s skipped=%s", imported, skipped)
    return ImportStats(imported=imported, skipped=skipped)

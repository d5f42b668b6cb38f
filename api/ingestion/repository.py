"""
Ingestion persistence.
This module is where catalog write SQL lives; the API only reads the table.
"""

from __future__ import annotations

from typing import Iterable

from catalog.repository import CATALOG_COLUMNS, CATALOG_TABLE
from core import db

from .csv_files import CatalogRow


async def insert_catalog_rows(rows: list[CatalogRow]) -> int:
    """
    Insert a batch of catalog rows in one transaction. Returns the row count.
    """
    if not rows:
        return 0
    await db.execute_many(
        """
        INSERT INTO vehicle_catalog (year, make, model, trim, engine, transmission)
        VALUES ($1, $2, $3, $4, $5, $6)
        """,
        [row.as_record() for row in rows],
    )
    return len(rows)


async def copy_catalog_rows(rows: Iterable[CatalogRow]) -> str:
    """
    COPY rows into the catalog. Returns the command status ("COPY 1234").
    """
    return await db.copy_records(
        CATALOG_TABLE,
        columns=CATALOG_COLUMNS,
        records=(row.as_record() for row in rows),
    )


async def truncate_catalog() -> None:
    await db.execute("TRUNCATE TABLE vehicle_catalog")

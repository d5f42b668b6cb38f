"""
Catalog queries (raw SQL).

Every filter is a bound parameter guarded by `IS NULL`, so one fixed
statement covers all filter combinations.
"""

from __future__ import annotations

from typing import Any

from core import db

CATALOG_TABLE = "vehicle_catalog"
CATALOG_COLUMNS = ("year", "make", "model", "trim", "engine", "transmission")
MAX_ROWS = 50_000


async def query_catalog(
    *,
    year: int | None = None,
    make_pattern: str | None = None,
    model_pattern: str | None = None,
    limit: int = MAX_ROWS,
) -> list[dict[str, Any]]:
    """
    `make_pattern` / `model_pattern` are ILIKE patterns (already escaped).
    """
    return await db.fetch_all(
        """
        SELECT year, make, model, trim, engine, transmission
        FROM vehicle_catalog
        WHERE ($1::int IS NULL OR year = $1)
          AND ($2::text IS NULL OR make ILIKE $2)
          AND ($3::text IS NULL OR model ILIKE $3)
        ORDER BY year DESC, make ASC, model ASC
        LIMIT $4
        """,
        year,
        make_pattern,
        model_pattern,
        min(limit, MAX_ROWS),
    )


async def list_years() -> list[int]:
    return await db.fetch_column(
        """
        SELECT DISTINCT year
        FROM vehicle_catalog
        WHERE year IS NOT NULL
        ORDER BY year DESC
        """
    )


async def list_makes(*, year: int | None = None) -> list[str]:
    return await db.fetch_column(
        """
        SELECT DISTINCT make
        FROM vehicle_catalog
        WHERE make IS NOT NULL
          AND make <> ''
          AND ($1::int IS NULL OR year = $1)
        ORDER BY make ASC
        """,
        year,
    )


async def list_models(*, make: str, year: int | None = None) -> list[str]:
    return await db.fetch_column(
        """
        SELECT DISTINCT model
        FROM vehicle_catalog
        WHERE lower(make) = lower($1)
          AND model IS NOT NULL
          AND model <> ''
          AND ($2::int IS NULL OR year = $2)
        ORDER BY model ASC
        """,
        make,
        year,
    )

"""
Catalog CSV -> chunked INSERT files.

Output files are meant to be pasted into a SQL console or fed to `psql -f`,
so each one is self-contained: a single multi-row INSERT ending in ";". The
first file also creates the table if needed.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

from catalog.repository import CATALOG_COLUMNS, CATALOG_TABLE

from .csv_files import CatalogRow, read_catalog_rows

DEFAULT_CHUNK_ROWS = 2000

CREATE_TABLE_SQL = f"""CREATE TABLE IF NOT EXISTS {CATALOG_TABLE} (
  year INT,
  make TEXT,
  model TEXT,
  trim TEXT,
  engine TEXT,
  transmission TEXT
);
"""

logger = logging.getLogger(__name__)


def sql_string(value: str | None) -> str:
    return "'" + (value or "").replace("'", "''") + "'"


def sql_int(value: int | None) -> str:
    return "NULL" if value is None else str(int(value))


def values_tuple(row: CatalogRow) -> str:
    parts = [
        sql_int(row.year),
        sql_string(row.make),
        sql_string(row.model),
        sql_string(row.trim),
        sql_string(row.engine),
        sql_string(row.transmission),
    ]
    return "(" + ", ".join(parts) + ")"


def chunk_sql(rows: list[CatalogRow], *, include_create: bool) -> str:
    if not rows:
        raise ValueError("chunk_sql called with no rows.")
    parts: list[str] = []
    if include_create:
        parts.append(CREATE_TABLE_SQL + "\n")
    parts.append(f"INSERT INTO {CATALOG_TABLE} ({', '.join(CATALOG_COLUMNS)}) VALUES\n")
    parts.append(",\n".join(values_tuple(row) for row in rows))
    parts.append(";\n")
    return "".join(parts)


def chunk_file_name(out_dir: Path, index: int) -> Path:
    return out_dir / f"{CATALOG_TABLE}_part_{index:03d}.sql"


def _batches(rows: Iterable[CatalogRow], size: int) -> Iterator[list[CatalogRow]]:
    batch: list[CatalogRow] = []
    for row in rows:
        batch.append(row)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch


def write_sql_chunks(
    rows: Iterable[CatalogRow],
    out_dir: Path,
    *,
    chunk_rows: int = DEFAULT_CHUNK_ROWS,
) -> list[Path]:
    """
    Write rows into numbered chunk files. Returns the files in order.
    """
    if chunk_rows <= 0:
        raise ValueError("chunk_rows must be > 0.")

    out_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for index, batch in enumerate(_batches(rows, chunk_rows), start=1):
        path = chunk_file_name(out_dir, index)
        path.write_text(chunk_sql(batch, include_create=index == 1), encoding="utf-8")
        logger.info("sql_chunk_written file=%s rows=%s", path, len(batch))
        written.append(path)
    return written


def csv_to_sql_chunks(
    csv_path: Path,
    out_dir: Path,
    *,
    chunk_rows: int = DEFAULT_CHUNK_ROWS,
) -> list[Path]:
    return write_sql_chunks(read_catalog_rows(csv_path), out_dir, chunk_rows=chunk_rows)

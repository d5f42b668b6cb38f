"""
Catalog CSV reading and incremental writing.

CSV layout: year,make,model,trim,engine,transmission (header required).
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from catalog.repository import CATALOG_COLUMNS
from core import values


@dataclass(frozen=True)
class CatalogRow:
    year: int | None
    make: str
    model: str
    trim: str = ""
    engine: str = ""
    transmission: str = ""

    def as_csv(self) -> list[str]:
        return [
            "" if self.year is None else str(self.year),
            self.make,
            self.model,
            self.trim,
            self.engine,
            self.transmission,
        ]

    def as_record(self) -> tuple[int | None, str, str, str, str, str]:
        return (self.year, self.make, self.model, self.trim, self.engine, self.transmission)


def normalize(value: object) -> str:
    """
    Trim and collapse inner whitespace; None becomes "".
    """
    return values.clean_text(value) or ""


def year_or_none(value: object) -> int | None:
    try:
        return values.parse_int(value)
    except ValueError:
        return None


def row_from_mapping(raw: dict[str, str | None]) -> CatalogRow:
    return CatalogRow(
        year=year_or_none(raw.get("year")),
        make=normalize(raw.get("make")),
        model=normalize(raw.get("model")),
        trim=normalize(raw.get("trim")),
        engine=normalize(raw.get("engine")),
        transmission=normalize(raw.get("transmission")),
    )


def read_dict_rows(path: Path) -> Iterator[dict[str, str | None]]:
    """
    Stream rows of any headed CSV as dicts. Raises OSError if unreadable.
    """
    with path.open("r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        if reader.fieldnames is None:
            return
        for raw in reader:
            yield raw


def read_catalog_rows(path: Path) -> Iterator[CatalogRow]:
    for raw in read_dict_rows(path):
        yield row_from_mapping(raw)


class CatalogCsvWriter:
    """
    Append-only writer: header on creation, rows flushed per call so a long
    harvest keeps everything fetched so far.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.rows_written = 0

    def start(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8", newline="") as handle:
            csv.writer(handle, lineterminator="\n").writerow(CATALOG_COLUMNS)

    def append(self, rows: Iterable[CatalogRow]) -> int:
        batch = [row.as_csv() for row in rows]
        if not batch:
            return 0
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            csv.writer(handle, lineterminator="\n").writerows(batch)
        self.rows_written += len(batch)
        return len(batch)

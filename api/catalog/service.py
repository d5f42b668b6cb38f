"""
Catalog lookups.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from core import values

from . import repository


def _parse_year(raw: Any) -> int | None:
    try:
        return values.in_range(values.parse_int(raw))
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="year must be a whole number",
        ) from exc


def _pattern(raw: str | None) -> str | None:
    text = values.clean_text(raw)
    return values.like_pattern(text) if text else None


async def search_catalog(
    *,
    year: str | None = None,
    make: str | None = None,
    model: str | None = None,
) -> list[dict]:
    """
    Equality on year, case-insensitive "contains" on make and model.
    """
    return await repository.query_catalog(
        year=_parse_year(year),
        make_pattern=_pattern(make),
        model_pattern=_pattern(model),
    )


async def years() -> list[int]:
    return await repository.list_years()


async def makes(*, year: str | None = None) -> list[str]:
    return await repository.list_makes(year=_parse_year(year))


async def models(*, make: str | None, year: str | None = None) -> list[str]:
    clean_make = values.clean_text(make)
    if clean_make is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="make is required")
    return await repository.list_models(make=clean_make, year=_parse_year(year))

"""
Catalog API endpoints (read-only).
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from . import service

router = APIRouter()


@router.get("/api/catalog")
async def search_catalog(
    year: str | None = Query(default=None),
    make: str | None = Query(default=None, max_length=100),
    model: str | None = Query(default=None, max_length=100),
) -> list[dict]:
    return await service.search_catalog(year=year, make=make, model=model)


@router.get("/api/catalog/years")
async def list_years() -> dict:
    return {"years": await service.years()}


@router.get("/api/catalog/makes")
async def list_makes(year: str | None = Query(default=None)) -> dict:
    return {"makes": await service.makes(year=year)}


@router.get("/api/catalog/models")
async def list_models(
    make: str | None = Query(default=None, max_length=100),
    year: str | None = Query(default=None),
) -> dict:
    return {"models": await service.models(make=make, year=year)}

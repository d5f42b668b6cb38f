"""
Service type API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Path, status

from core import values

from . import schemas, service

router = APIRouter()


@router.post("/api/service-types", status_code=status.HTTP_201_CREATED)
async def create_service_type(request: schemas.ServiceTypeCreateRequest) -> dict:
    return await service.create_service_type(request)


@router.get("/api/service-types")
async def list_service_types() -> list[dict]:
    return await service.list_service_types()


@router.delete("/api/service-types/{service_id}")
async def delete_service_type(service_id: int = Path(ge=1, le=values.BIGINT_MAX)) -> dict:
    return await service.delete_service_type(service_id)

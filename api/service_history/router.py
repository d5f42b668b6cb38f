"""
Service history API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Path, Query, status

from core import values

from . import schemas, service

router = APIRouter()


@router.post("/api/services", status_code=status.HTTP_201_CREATED)
async def create_service_record(request: schemas.ServiceRecordCreateRequest) -> dict:
    return await service.create_service_record(request)


@router.get("/api/services")
async def list_service_records(vehicle_id: str | None = Query(default=None)) -> list[dict]:
    """
    Service records, newest service date first, optionally for one vehicle.
    """
    return await service.list_service_records(vehicle_id)


@router.delete("/api/services/all")
async def delete_all_service_records() -> dict:
    return await service.delete_all_service_records()


@router.delete("/api/services/{record_id}")
async def delete_service_record(record_id: int = Path(ge=1, le=values.BIGINT_MAX)) -> dict:
    return await service.delete_service_record(record_id)

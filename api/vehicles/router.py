"""
Vehicle API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Path, status

from core import values

from . import schemas, service

router = APIRouter()


@router.post("/api/vehicles", status_code=status.HTTP_201_CREATED)
async def create_vehicle(request: schemas.VehicleCreateRequest) -> dict:
    return await service.create_vehicle(request)


@router.get("/api/vehicles")
async def list_vehicles() -> list[dict]:
    """
    All vehicles, most recently added first.
    """
    return await service.list_vehicles()


# Declared before the `{vehicle_id}` routes so "all" never reaches them.
@router.delete("/api/vehicles/all")
async def delete_all_vehicles() -> dict:
    return await service.delete_all_vehicles()


@router.get("/api/vehicles/{vehicle_id}")
async def get_vehicle(vehicle_id: int = Path(ge=1, le=values.BIGINT_MAX)) -> dict:
    return await service.get_vehicle(vehicle_id)


@router.patch("/api/vehicles/{vehicle_id}")
async def update_vehicle_mileage(
    request: schemas.MileageUpdateRequest,
    vehicle_id: int = Path(ge=1, le=values.BIGINT_MAX),
) -> dict:
    return await service.update_mileage(vehicle_id, request)


@router.delete("/api/vehicles/{vehicle_id}")
async def delete_vehicle(vehicle_id: int = Path(ge=1, le=values.BIGINT_MAX)) -> dict:
    return await service.delete_vehicle(vehicle_id)

"""
Vehicle business logic.

Validation and sanitization live here so the router stays thin and the
ingestion CLI can reuse the same rules for CSV imports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from asyncpg.exceptions import ForeignKeyViolationError, UniqueViolationError
from fastapi import HTTPException, status

from core import values

from . import repository, schemas

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewVehicle:
    year: int
    make: str
    model: str
    mileage: int
    vin: str | None


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")


def parse_new_vehicle(
    *,
    year: Any,
    make: Any,
    model: Any,
    mileage: Any = None,
    vin: Any = None,
) -> NewVehicle:
    """
    Validate a vehicle payload.

    - year, make and model are required
    - mileage keeps digits only and defaults to 0
    - a blank VIN is stored as NULL; VINs are compared uppercased
    """
    clean_make = values.clean_text(make)
    clean_model = values.clean_text(model)
    try:
        clean_year = values.in_range(values.parse_int(year))
    except ValueError as exc:
        raise _bad_request("year must be a whole number") from exc

    if clean_year is None or clean_make is None or clean_model is None:
        raise _bad_request("year, make, and model are required")

    try:
        clean_mileage = values.in_range(values.digits_only(mileage)) or 0
    except ValueError as exc:
        raise _bad_request("mileage is out of range") from exc

    clean_vin = values.clean_text(vin)
    return NewVehicle(
        year=clean_year,
        make=clean_make,
        model=clean_model,
        mileage=clean_mileage,
        vin=clean_vin.upper() if clean_vin else None,
    )


async def save_vehicle(vehicle: NewVehicle) -> dict:
    try:
        row = await repository.create_vehicle(
            year=vehicle.year,
            make=vehicle.make,
            model=vehicle.model,
            mileage=vehicle.mileage,
            vin=vehicle.vin,
        )
    except UniqueViolationError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A vehicle with this VIN already exists",
        ) from exc

    logger.info("vehicle_created id=%s year=%s make=%s", row["id"], row["year"], row["make"])
    return row


async def create_vehicle(payload: schemas.VehicleCreateRequest) -> dict:
    vehicle = parse_new_vehicle(
        year=payload.year,
        make=payload.make,
        model=payload.model,
        mileage=payload.mileage,
        vin=payload.vin,
    )
    return await save_vehicle(vehicle)


async def list_vehicles() -> list[dict]:
    return await repository.list_vehicles()


async def get_vehicle(vehicle_id: int) -> dict:
    row = await repository.get_vehicle(vehicle_id)
    if row is None:
        raise _not_found()
    return row


async def update_mileage(vehicle_id: int, payload: schemas.MileageUpdateRequest) -> dict:
    mileage = values.digits_only(payload.mileage)
    if mileage is None:
        raise _bad_request("Mileage must be a number")
    if mileage > values.INT_MAX:
        raise _bad_request("mileage is out of range")

    row = await repository.update_vehicle_mileage(vehicle_id, mileage=mileage)
    if row is None:
        raise _not_found()
    logger.info("vehicle_mileage_updated id=%s mileage=%s", vehicle_id, mileage)
    return row


async def delete_vehicle(vehicle_id: int) -> dict:
    try:
        row = await repository.delete_vehicle(vehicle_id)
    except ForeignKeyViolationError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Vehicle has service history; delete those records first",
        ) from exc

    if row is None:
        raise _not_found()
    logger.info("vehicle_deleted id=%s", vehicle_id)
    return {"success": True, "deletedId": int(row["id"])}


async def delete_all_vehicles() -> dict:
    await repository.delete_all_vehicles()
    logger.warning("vehicles_truncated")
    return {"success": True, "message": "All vehicles deleted."}

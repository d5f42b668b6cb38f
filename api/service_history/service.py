"""
Service history business logic.
"""

from __future__ import annotations

import logging
from typing import Any

from asyncpg.exceptions import ForeignKeyViolationError
from fastapi import HTTPException, status

from core import values

from . import repository, schemas

logger = logging.getLogger(__name__)


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def parse_vehicle_id(raw: Any) -> int | None:
    try:
        vehicle_id = values.parse_int(raw)
    except ValueError as exc:
        raise _bad_request("vehicle_id must be a whole number") from exc
    try:
        return values.in_range(vehicle_id, low=1, high=values.BIGINT_MAX)
    except ValueError as exc:
        raise _bad_request("vehicle_id must be a positive number") from exc


async def create_service_record(payload: schemas.ServiceRecordCreateRequest) -> dict:
    vehicle_id = parse_vehicle_id(payload.vehicle_id)
    service_name = values.clean_text(payload.service_name)
    if vehicle_id is None or service_name is None:
        raise _bad_request("vehicle_id and service_name are required")

    try:
        service_date = values.parse_timestamp(payload.service_date)
    except ValueError as exc:
        raise _bad_request("service_date must be an ISO date, e.g. 2024-05-01") from exc

    try:
        cost = values.parse_decimal(payload.cost)
    except ValueError as exc:
        raise _bad_request("cost must be a number") from exc

    try:
        mileage = values.in_range(values.digits_only(payload.mileage))
        interval_miles = values.in_range(values.digits_only(payload.interval))
    except ValueError as exc:
        raise _bad_request("mileage and interval must fit a whole number of miles") from exc

    try:
        row = await repository.create_service_record(
            vehicle_id=vehicle_id,
            service_name=service_name,
            mileage=mileage,
            interval_miles=interval_miles,
            service_date=service_date,
            cost=cost,
            notes=values.clean_text(payload.notes),
        )
    except ForeignKeyViolationError as exc:
        raise _bad_request("vehicle_id does not match an existing vehicle") from exc

    logger.info(
        "service_record_created id=%s vehicle_id=%s service_id=%s",
        row["id"],
        row["vehicle_id"],
        row["service_id"],
    )
    return row


async def list_service_records(vehicle_id: str | None = None) -> list[dict]:
    return await repository.list_service_records(vehicle_id=parse_vehicle_id(vehicle_id))


async def delete_service_record(record_id: int) -> dict:
    row = await repository.delete_service_record(record_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service record not found")
    logger.info("service_record_deleted id=%s", record_id)
    return {"success": True, "deletedId": int(row["id"])}


async def delete_all_service_records() -> dict:
    await repository.delete_all_service_records()
    logger.warning("service_history_truncated")
    return {"success": True, "message": "All service records deleted."}

"""
Service type business logic.
"""

from __future__ import annotations

import logging

from asyncpg.exceptions import ForeignKeyViolationError, UniqueViolationError
from fastapi import HTTPException, status

from core import values

from . import repository, schemas

logger = logging.getLogger(__name__)


async def create_service_type(payload: schemas.ServiceTypeCreateRequest) -> dict:
    name = values.clean_text(payload.name)
    if name is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="name is required")

    try:
        interval_miles = values.in_range(values.digits_only(payload.interval_miles))
        interval_months = values.in_range(values.digits_only(payload.interval_months))
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="intervals must fit a whole number",
        ) from exc

    try:
        row = await repository.create_service_type(
            name=name,
            description=values.clean_text(payload.description),
            interval_miles=interval_miles,
            interval_months=interval_months,
        )
    except UniqueViolationError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A service type with this name already exists",
        ) from exc

    logger.info("service_type_created id=%s name=%s", row["id"], row["name"])
    return row


async def list_service_types() -> list[dict]:
    return await repository.list_service_types()


async def delete_service_type(service_id: int) -> dict:
    try:
        row = await repository.delete_service_type(service_id)
    except ForeignKeyViolationError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Service type is used by service history",
        ) from exc

    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service type not found")
    logger.info("service_type_deleted id=%s", service_id)
    return {"success": True, "deletedId": int(row["id"])}

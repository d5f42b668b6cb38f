"""
Service history persistence (raw SQL).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from core import db

RECORD_COLUMNS = """
    id, vehicle_id, service_id, service_name, mileage,
    interval_miles AS "interval", service_date, cost, notes, created_at
"""


async def create_service_record(
    *,
    vehicle_id: int,
    service_name: str,
    mileage: int | None = None,
    interval_miles: int | None = None,
    service_date: datetime | None = None,
    cost: Decimal | None = None,
    notes: str | None = None,
) -> dict[str, Any]:
    """
    Insert a record, resolving `service_name` to a service type.

    The service type is created on first use. Names match case-insensitively
    and keep the spelling they were first created with.
    Raises ForeignKeyViolationError when the vehicle does not exist.
    """
    row = await db.fetch_one(
        f"""
        WITH service AS (
            INSERT INTO services (name)
            VALUES ($2)
            ON CONFLICT ((lower(name))) DO UPDATE
            SET name = services.name
            RETURNING id
        )
        INSERT INTO service_history (
            vehicle_id, service_id, service_name, mileage,
            interval_miles, service_date, cost, notes
        )
        SELECT $1, service.id, $2, $3, $4, COALESCE($5::timestamptz, now()), $6, $7
        FROM service
        RETURNING {RECORD_COLUMNS}
        """,
        vehicle_id,
        service_name,
        mileage,
        interval_miles,
        service_date,
        cost,
        notes,
    )
    if row is None:
        raise RuntimeError("Failed to insert service record.")
    return row


async def list_service_records(*, vehicle_id: int | None = None) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {RECORD_COLUMNS}
        FROM service_history
        WHERE ($1::bigint IS NULL OR vehicle_id = $1)
        ORDER BY service_date DESC, id DESC
        """,
        vehicle_id,
    )


async def delete_service_record(record_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        DELETE FROM service_history
        WHERE id = $1
        RETURNING id
        """,
        record_id,
    )


async def delete_all_service_records() -> None:
    await db.execute("TRUNCATE TABLE service_history RESTART IDENTITY")

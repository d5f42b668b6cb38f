"""
Vehicle persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db

VEHICLE_COLUMNS = "id, year, make, model, vin, mileage, created_at, updated_at"


async def create_vehicle(
    *,
    year: int,
    make: str,
    model: str,
    mileage: int,
    vin: str | None = None,
) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO vehicles (year, make, model, mileage, vin)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING {VEHICLE_COLUMNS}
        """,
        year,
        make,
        model,
        mileage,
        vin,
    )
    if row is None:
        raise RuntimeError("Failed to insert vehicle.")
    return row


async def list_vehicles() -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {VEHICLE_COLUMNS}
        FROM vehicles
        ORDER BY created_at DESC, id DESC
        """
    )


async def get_vehicle(vehicle_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {VEHICLE_COLUMNS}
        FROM vehicles
        WHERE id = $1
        """,
        vehicle_id,
    )


async def update_vehicle_mileage(vehicle_id: int, *, mileage: int) -> dict[str, Any] | None:
    """
    Returns the updated row, or None when no vehicle has this id.
    """
    return await db.fetch_one(
        f"""
        UPDATE vehicles
        SET mileage = $2,
            updated_at = now()
        WHERE id = $1
        RETURNING {VEHICLE_COLUMNS}
        """,
        vehicle_id,
        mileage,
    )


async def delete_vehicle(vehicle_id: int) -> dict[str, Any] | None:
    """
    Returns the deleted row id, or None when not found.
    Raises ForeignKeyViolationError while service history references it.
    """
    return await db.fetch_one(
        """
        DELETE FROM vehicles
        WHERE id = $1
        RETURNING id
        """,
        vehicle_id,
    )


async def delete_all_vehicles() -> None:
    # service_history rows cannot outlive their vehicles, so both go together.
    await db.execute("TRUNCATE TABLE service_history, vehicles RESTART IDENTITY")

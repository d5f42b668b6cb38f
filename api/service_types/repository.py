"""
Service type persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db

SERVICE_COLUMNS = "id, name, description, interval_miles, interval_months, created_at, updated_at"


async def create_service_type(
    *,
    name: str,
    description: str | None = None,
    interval_miles: int | None = None,
    interval_months: int | None = None,
) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO services (name, description, interval_miles, interval_months)
        VALUES ($1, $2, $3, $4)
        RETURNING {SERVICE_COLUMNS}
        """,
        name,
        description,
        interval_miles,
        interval_months,
    )
    if row is None:
        raise RuntimeError("Failed to insert service type.")
    return row


async def list_service_types() -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {SERVICE_COLUMNS}
        FROM services
        ORDER BY lower(name) ASC, id ASC
        """
    )


async def delete_service_type(service_id: int) -> dict[str, Any] | None:
    """
    Raises ForeignKeyViolationError while service records reference it.
    """
    return await db.fetch_one(
        """
        DELETE FROM services
        WHERE id = $1
        RETURNING id
        """,
        service_id,
    )

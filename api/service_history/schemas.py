"""
Service history API schemas (request models).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ServiceRecordCreateRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    vehicle_id: int | str | None = None
    service_name: str | None = None
    mileage: int | float | str | None = None
    interval: int | float | str | None = None
    service_date: str | None = None
    cost: int | float | str | None = None
    notes: str | None = None

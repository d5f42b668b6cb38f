"""
Vehicle API schemas (request models).

Fields are intentionally loose (numbers may arrive as text); the service
layer validates and answers 400 with a readable message.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class VehicleCreateRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    year: int | float | str | None = None
    make: str | None = None
    model: str | None = None
    mileage: int | float | str | None = None
    vin: str | None = None


class MileageUpdateRequest(BaseModel):
    mileage: int | float | str | None = None

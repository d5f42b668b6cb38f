"""
Service type API schemas (request models).
"""

from __future__ import annotations

from pydantic import BaseModel


class ServiceTypeCreateRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    interval_miles: int | float | str | None = None
    interval_months: int | float | str | None = None

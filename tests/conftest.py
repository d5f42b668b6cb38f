"""Shared fixtures: an in-memory stand-in for the Postgres repositories."""

import re
from datetime import datetime, timedelta, timezone

import pytest
from asyncpg.exceptions import ForeignKeyViolationError, UniqueViolationError
from fastapi.testclient import TestClient

import catalog.repository
import service_history.repository
import service_types.repository
import vehicles.repository
from main import app


def ilike(value, pattern):
    """Match `value` against a LIKE pattern (backslash escapes), ignoring case."""
    regex = []
    chars = iter(pattern)
    for char in chars:
        if char == "\\":
            regex.append(re.escape(next(chars, "")))
        elif char == "%":
            regex.append(".*")
        elif char == "_":
            regex.append(".")
        else:
            regex.append(re.escape(char))
    return re.fullmatch("".join(regex), value or "", re.IGNORECASE | re.DOTALL) is not None


class FakeStore:
    """Mirrors the repository functions with the same constraints as the schema."""

    def __init__(self):
        self.vehicles = {}
        self.services = {}
        self.records = {}
        self.catalog = []
        self.next_ids = {"vehicles": 1, "services": 1, "records": 1}
        self.clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def _next_id(self, table):
        value = self.next_ids[table]
        self.next_ids[table] += 1
        return value

    def _now(self):
        self.clock += timedelta(seconds=1)
        return self.clock

    # vehicles

    async def create_vehicle(self, *, year, make, model, mileage, vin=None):
        if vin is not None and any(v["vin"] == vin for v in self.vehicles.values()):
            raise UniqueViolationError('duplicate key value violates unique constraint "vehicles_vin_key"')
        now = self._now()
        row = {
            "id": self._next_id("vehicles"),
            "year": year,
            "make": make,
            "model": model,
            "vin": vin,
            "mileage": mileage,
            "created_at": now,
            "updated_at": now,
        }
        self.vehicles[row["id"]] = row
        return dict(row)

    async def list_vehicles(self):
        rows = sorted(self.vehicles.values(), key=lambda r: (r["created_at"], r["id"]), reverse=True)
        return [dict(r) for r in rows]

    async def get_vehicle(self, vehicle_id):
        row = self.vehicles.get(vehicle_id)
        return dict(row) if row else None

    async def update_vehicle_mileage(self, vehicle_id, *, mileage):
        row = self.vehicles.get(vehicle_id)
        if row is None:
            return None
        row["mileage"] = mileage
        row["updated_at"] = self._now()
        return dict(row)

    async def delete_vehicle(self, vehicle_id):
        if vehicle_id not in self.vehicles:
            return None
        if any(r["vehicle_id"] == vehicle_id for r in self.records.values()):
            raise ForeignKeyViolationError("update or delete on table \"vehicles\" violates foreign key")
        del self.vehicles[vehicle_id]
        return {"id": vehicle_id}

    async def delete_all_vehicles(self):
        self.records.clear()
        self.vehicles.clear()
        self.next_ids["records"] = 1
        self.next_ids["vehicles"] = 1

    # service types

    async def create_service_type(self, *, name, description=None, interval_miles=None, interval_months=None):
        if any(s["name"].lower() == name.lower() for s in self.services.values()):
            raise UniqueViolationError('duplicate key value violates unique constraint "services_name_key"')
        now = self._now()
        row = {
            "id": self._next_id("services"),
            "name": name,
            "description": description,
            "interval_miles": interval_miles,
            "interval_months": interval_months,
            "created_at": now,
            "updated_at": now,
        }
        self.services[row["id"]] = row
        return dict(row)

    async def list_service_types(self):
        rows = sorted(self.services.values(), key=lambda r: (r["name"].lower(), r["id"]))
        return [dict(r) for r in rows]

    async def delete_service_type(self, service_id):
        if service_id not in self.services:
            return None
        if any(r["service_id"] == service_id for r in self.records.values()):
            raise ForeignKeyViolationError("update or delete on table \"services\" violates foreign key")
        del self.services[service_id]
        return {"id": service_id}

    # service history

    async def create_service_record(
        self,
        *,
        vehicle_id,
        service_name,
        mileage=None,
        interval_miles=None,
        service_date=None,
        cost=None,
        notes=None,
    ):
        if vehicle_id not in self.vehicles:
            raise ForeignKeyViolationError("insert on table \"service_history\" violates foreign key")
        service = next((s for s in self.services.values() if s["name"].lower() == service_name.lower()), None)
        if service is None:
            service = await self.create_service_type(name=service_name)
        now = self._now()
        row = {
            "id": self._next_id("records"),
            "vehicle_id": vehicle_id,
            "service_id": service["id"],
            "service_name": service_name,
            "mileage": mileage,
            "interval": interval_miles,
            "service_date": service_date or now,
            "cost": cost,
            "notes": notes,
            "created_at": now,
        }
        self.records[row["id"]] = row
        return dict(row)

    async def list_service_records(self, *, vehicle_id=None):
        rows = [r for r in self.records.values() if vehicle_id is None or r["vehicle_id"] == vehicle_id]
        rows.sort(key=lambda r: (r["service_date"], r["id"]), reverse=True)
        return [dict(r) for r in rows]

    async def delete_service_record(self, record_id):
        if self.records.pop(record_id, None) is None:
            return None
        return {"id": record_id}

    async def delete_all_service_records(self):
        self.records.clear()
        self.next_ids["records"] = 1

    # catalog

    async def query_catalog(self, *, year=None, make_pattern=None, model_pattern=None, limit=50_000):
        self.last_catalog_query = {
            "year": year,
            "make_pattern": make_pattern,
            "model_pattern": model_pattern,
        }
        rows = [
            r
            for r in self.catalog
            if (year is None or r["year"] == year)
            and (make_pattern is None or ilike(r["make"], make_pattern))
            and (model_pattern is None or ilike(r["model"], model_pattern))
        ]
        rows.sort(key=lambda r: r["model"])
        rows.sort(key=lambda r: r["make"])
        rows.sort(key=lambda r: r["year"], reverse=True)
        return [dict(r) for r in rows[:limit]]

    async def list_years(self):
        return sorted({r["year"] for r in self.catalog}, reverse=True)

    async def list_makes(self, *, year=None):
        return sorted({r["make"] for r in self.catalog if year is None or r["year"] == year})

    async def list_models(self, *, make, year=None):
        return sorted(
            {
                r["model"]
                for r in self.catalog
                if r["make"].lower() == make.lower() and (year is None or r["year"] == year)
            }
        )

    def add_catalog(self, year, make, model, trim="", engine="", transmission=""):
        self.catalog.append(
            {
                "year": year,
                "make": make,
                "model": model,
                "trim": trim,
                "engine": engine,
                "transmission": transmission,
            }
        )


REPOSITORY_FUNCTIONS = {
    vehicles.repository: (
        "create_vehicle",
        "list_vehicles",
        "get_vehicle",
        "update_vehicle_mileage",
        "delete_vehicle",
        "delete_all_vehicles",
    ),
    service_types.repository: (
        "create_service_type",
        "list_service_types",
        "delete_service_type",
    ),
    service_history.repository: (
        "create_service_record",
        "list_service_records",
        "delete_service_record",
        "delete_all_service_records",
    ),
    catalog.repository: (
        "query_catalog",
        "list_years",
        "list_makes",
        "list_models",
    ),
}


@pytest.fixture
def store(monkeypatch):
    fake = FakeStore()
    for module, names in REPOSITORY_FUNCTIONS.items():
        for name in names:
            monkeypatch.setattr(module, name, getattr(fake, name))
    return fake


@pytest.fixture
def client(store):
    # No `with` block: the lifespan (and its real pool) never starts.
    return TestClient(app)


@pytest.fixture
def vehicle(client):
    resp = client.post("/api/vehicles", json={"year": 2020, "make": "Honda", "model": "Civic"})
    assert resp.status_code == 201
    return resp.json()

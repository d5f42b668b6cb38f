"""
NHTSA vPIC HTTP client helpers.

Used endpoints:
- GET /GetAllMakes?format=json
    -> {"Results": [{"Make_ID": 440, "Make_Name": "ASTON MARTIN"}, ...]}
- GET /GetModelsForMakeIdYear/makeId/{id}/modelyear/{year}?format=json
- GET /GetModelsForMakeYear/make/{make}/modelyear/{year}?format=json
    -> {"Results": [{"Model_Name": "Civic", ...}, ...]}

Models are looked up by make id when vPIC gave one; the id endpoint returns
the complete list. The by-name endpoint is the fallback.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from core import config

DEFAULT_BASE_URL = "https://vpic.nhtsa.dot.gov/api/vehicles"
DEFAULT_TRIES = 3
DEFAULT_BACKOFF_S = 0.3

logger = logging.getLogger(__name__)


# vPIC failures are explicit and separable from other runtime errors.
class VpicError(RuntimeError):
    pass


@dataclass(frozen=True)
class Make:
    id: int | None
    name: str


def base_url() -> str:
    return config.env_str("VPIC_BASE_URL", DEFAULT_BASE_URL).rstrip("/")


def _is_transient(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


async def get_json(
    client: httpx.AsyncClient,
    path: str,
    *,
    tries: int = DEFAULT_TRIES,
    backoff_s: float = DEFAULT_BACKOFF_S,
) -> dict[str, Any]:
    """
    GET `path` and decode JSON, retrying network errors, 429 and 5xx.

    Attempt n (0-based) waits backoff_s * (n + 1) before the next try.
    """
    last_error: Exception | None = None
    for attempt in range(max(tries, 1)):
        try:
            resp = await client.get(path, headers={"Accept": "application/json"})
        except httpx.TransportError as exc:
            last_error = exc
        else:
            if resp.status_code == 200:
                try:
                    data = resp.json()
                except ValueError as exc:
                    raise VpicError(f"vPIC returned invalid JSON for {path}") from exc
                if not isinstance(data, dict):
                    raise VpicError(f"vPIC returned an unexpected payload for {path}")
                return data
            if not _is_transient(resp.status_code):
                raise VpicError(f"vPIC request failed: {resp.status_code} {path}")
            last_error = VpicError(f"vPIC request failed: {resp.status_code} {path}")

        if attempt < tries - 1:
            delay = backoff_s * (attempt + 1)
            logger.debug("vpic_retry path=%s attempt=%s delay_s=%s", path, attempt + 1, delay)
            await asyncio.sleep(delay)

    raise VpicError(f"vPIC request failed after {tries} attempts: {path}") from last_error


def _results(data: dict[str, Any]) -> list[dict[str, Any]]:
    results = data.get("Results")
    if not isinstance(results, list):
        return []
    return [item for item in results if isinstance(item, dict)]


def _normalize(value: Any) -> str:
    return " ".join(str(value or "").split())


def dedupe_case_insensitive(names: list[str]) -> list[str]:
    """
    Keep the first spelling of every name, ignoring case and blank entries.
    """
    seen: set[str] = set()
    unique: list[str] = []
    for name in names:
        clean = _normalize(name)
        if not clean:
            continue
        key = clean.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(clean)
    return unique


async def get_all_makes(client: httpx.AsyncClient, **retry: Any) -> list[Make]:
    data = await get_json(client, "/GetAllMakes?format=json", **retry)
    makes: list[Make] = []
    seen: set[str] = set()
    for item in _results(data):
        name = _normalize(item.get("Make_Name"))
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        make_id = item.get("Make_ID")
        makes.append(Make(id=int(make_id) if isinstance(make_id, int) else None, name=name))
    return makes


async def get_models_for_make_year(
    client: httpx.AsyncClient,
    make: str,
    year: int,
    **retry: Any,
) -> list[str]:
    path = f"/GetModelsForMakeYear/make/{quote(make, safe='')}/modelyear/{int(year)}?format=json"
    data = await get_json(client, path, **retry)
    return dedupe_case_insensitive([str(item.get("Model_Name") or "") for item in _results(data)])


async def get_models_for_make_id_year(
    client: httpx.AsyncClient,
    make_id: int,
    year: int,
    **retry: Any,
) -> list[str]:
    path = f"/GetModelsForMakeIdYear/makeId/{int(make_id)}/modelyear/{int(year)}?format=json"
    data = await get_json(client, path, **retry)
    return dedupe_case_insensitive([str(item.get("Model_Name") or "") for item in _results(data)])


async def get_models(client: httpx.AsyncClient, make: Make, year: int, **retry: Any) -> list[str]:
    if make.id is not None:
        return await get_models_for_make_id_year(client, make.id, year, **retry)
    return await get_models_for_make_year(client, make.name, year, **retry)

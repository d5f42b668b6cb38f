"""
CarQuery trim lookups (optional catalog enrichment).

vPIC has no trim/engine/transmission data; CarQuery does for many models.
The endpoint answers JSONP even without a callback:

    ?({"Trims": [{"model_trim": "EX", "model_engine_fuel": "Gasoline", ...}]});
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

import httpx

from core import config

DEFAULT_BASE_URL = "https://www.carqueryapi.com/api/0.3/"

_JSONP_PREFIX = re.compile(r"^[^(]*\(")
_JSONP_SUFFIX = re.compile(r"\);?\s*$")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Trim:
    trim: str = ""
    engine: str = ""
    transmission: str = ""


BLANK_TRIM = Trim()


def base_url() -> str:
    return config.env_str("CARQUERY_BASE_URL", DEFAULT_BASE_URL)


def parse_jsonp(text: str) -> Any:
    stripped = _JSONP_SUFFIX.sub("", _JSONP_PREFIX.sub("", text.strip(), count=1))
    return json.loads(stripped)


def _normalize(value: Any) -> str:
    return " ".join(str(value or "").split())


def trims_from_payload(payload: Any) -> list[Trim]:
    items = payload.get("Trims") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        return []

    trims: list[Trim] = []
    seen: set[tuple[str, str, str]] = set()
    for item in items:
        if not isinstance(item, dict):
            continue
        trim = Trim(
            trim=_normalize(item.get("model_trim")),
            engine=_normalize(item.get("model_engine_fuel") or item.get("model_engine_cc")),
            transmission=_normalize(item.get("model_transmission_type")),
        )
        key = (trim.trim.lower(), trim.engine.lower(), trim.transmission.lower())
        if key in seen:
            continue
        seen.add(key)
        trims.append(trim)
    return trims


async def get_trims(client: httpx.AsyncClient, make: str, model: str, year: int) -> list[Trim]:
    """
    Trims for one make/model/year. Never raises: lookups are best-effort and
    any failure yields a single blank trim so the model still gets a row.
    """
    params = {"cmd": "getTrims", "make": make, "model": model, "year": str(int(year))}
    try:
        resp = await client.get(base_url(), params=params)
        if resp.status_code != 200:
            raise ValueError(f"status {resp.status_code}")
        trims = trims_from_payload(parse_jsonp(resp.text))
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("carquery_failed year=%s make=%s model=%s error=%s", year, make, model, exc)
        return [BLANK_TRIM]
    return trims or [BLANK_TRIM]

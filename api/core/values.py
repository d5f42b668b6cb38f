"""
Lenient parsing of client-supplied values.

Clients send numbers as JSON numbers or as free text ("12,345 mi"), so these
helpers normalize both. They return None for "nothing usable" and leave the
decision (default vs. 400) to the caller.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

_NON_DIGITS = re.compile(r"[^\d]")
_WHITESPACE = re.compile(r"\s+")

# Postgres integer and bigint ranges.
INT_MAX = 2_147_483_647
BIGINT_MAX = 2**63 - 1


def clean_text(value: Any) -> str | None:
    """
    Trim and collapse inner whitespace; blank becomes None.
    """
    if value is None:
        return None
    text = _WHITESPACE.sub(" ", str(value)).strip()
    return text or None


def digits_only(value: Any) -> int | None:
    """
    Keep only the digits of `value` ("12,345 mi" -> 12345).

    Returns None when no digit remains.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        value = int(value)
    digits = _NON_DIGITS.sub("", str(value))
    if not digits:
        return None
    return int(digits)


def parse_int(value: Any) -> int | None:
    """
    Strict integer parse ("2020" ok, "20x" not). Blank becomes None.

    Raises ValueError for present-but-malformed values.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("Booleans are not integers.")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Not an integer: {value!r}")
        return int(value)
    text = str(value).strip()
    if not text:
        return None
    return int(text)


def in_range(value: int | None, *, low: int = 0, high: int = INT_MAX) -> int | None:
    """
    Pass `value` through when it fits the column; None stays None.

    Raises ValueError when it does not.
    """
    if value is not None and not low <= value <= high:
        raise ValueError(f"Out of range: {value!r}")
    return value


def parse_decimal(value: Any) -> Decimal | None:
    """
    Parse a money-like value ("$1,234.50" -> Decimal("1234.50")).

    Raises ValueError for present-but-malformed values.
    """
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip().replace(",", "").lstrip("$").strip()
    if not text:
        return None
    try:
        parsed = Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(f"Not a number: {value!r}") from exc
    if not parsed.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return parsed.quantize(Decimal("0.01"))


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse an ISO date or datetime. Naive values are taken as UTC.

    Raises ValueError for present-but-malformed values.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def like_pattern(value: str) -> str:
    """
    Escape LIKE wildcards so user input only ever matches literally.
    """
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"

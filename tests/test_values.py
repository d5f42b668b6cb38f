"""Tests for client value parsing."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core import values


class TestDigitsOnly:
    """digits_only()."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (12345, 12345),
            ("12,345", 12345),
            ("45 210 mi", 45210),
            (1500.0, 1500),
            ("", None),
            ("abc", None),
            (None, None),
            (True, None),
        ],
    )
    def test_digits_only(self, raw, expected):
        """Keeps digits and reports None when there are none."""
        assert values.digits_only(raw) == expected


class TestParseInt:
    """parse_int()."""

    def test_accepts_text(self):
        """Numeric text parses."""
        assert values.parse_int(" 2020 ") == 2020

    def test_blank_is_none(self):
        """Blank text is treated as absent."""
        assert values.parse_int("  ") is None

    def test_rejects_fraction(self):
        """Fractional numbers are not whole numbers."""
        with pytest.raises(ValueError):
            values.parse_int(2020.5)

    def test_rejects_text(self):
        """Words are rejected."""
        with pytest.raises(ValueError):
            values.parse_int("2020a")


class TestInRange:
    """in_range()."""

    def test_passes_values_in_range(self):
        """Values inside the column range and None pass through."""
        assert values.in_range(0) == 0
        assert values.in_range(values.INT_MAX) == values.INT_MAX
        assert values.in_range(None) is None
        assert values.in_range(values.BIGINT_MAX, low=1, high=values.BIGINT_MAX) == values.BIGINT_MAX

    @pytest.mark.parametrize("raw", [-1, values.INT_MAX + 1, 99999999999])
    def test_rejects_values_outside_integer(self, raw):
        """Anything outside 0..INT_MAX is rejected by default."""
        with pytest.raises(ValueError):
            values.in_range(raw)

    def test_rejects_zero_id(self):
        """Ids start at 1."""
        with pytest.raises(ValueError):
            values.in_range(0, low=1, high=values.BIGINT_MAX)


class TestParseDecimal:
    """parse_decimal()."""

    def test_money_text(self):
        """Currency symbols and separators are ignored."""
        assert values.parse_decimal("$1,234.5") == Decimal("1234.50")

    def test_rejects_words(self):
        """Words are rejected."""
        with pytest.raises(ValueError):
            values.parse_decimal("free")

    def test_rejects_nan(self):
        """NaN is not a cost."""
        with pytest.raises(ValueError):
            values.parse_decimal("NaN")


class TestParseTimestamp:
    """parse_timestamp()."""

    def test_date_only(self):
        """Plain dates become UTC midnight."""
        assert values.parse_timestamp("2024-05-01") == datetime(2024, 5, 1, tzinfo=timezone.utc)

    def test_zulu_suffix(self):
        """A trailing Z means UTC."""
        parsed = values.parse_timestamp("2024-05-01T10:30:00Z")
        assert parsed == datetime(2024, 5, 1, 10, 30, tzinfo=timezone.utc)

    def test_blank(self):
        """Blank means absent."""
        assert values.parse_timestamp("") is None


class TestLikePattern:
    """like_pattern()."""

    def test_escapes_wildcards(self):
        """%, _ and backslash are escaped, then wrapped for contains."""
        assert values.like_pattern("50%_a\\b") == "%50\\%\\_a\\\\b%"


class TestCleanText:
    """clean_text()."""

    def test_collapses_whitespace(self):
        """Inner runs of whitespace collapse to one space."""
        assert values.clean_text("  Land   Rover ") == "Land Rover"

    def test_blank_is_none(self):
        """Whitespace-only becomes None."""
        assert values.clean_text(" \t ") is None

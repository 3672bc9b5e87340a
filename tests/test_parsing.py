"""
==============================================================================
Measure Parsing Tests
==============================================================================

Tests for weight and price display string parsing.

==============================================================================
"""

import pytest

from app.utils.parsing import parse_measure, parse_measure_or_zero


class TestParseMeasure:
    """Tests for parse_measure."""

    @pytest.mark.parametrize("raw, expected", [
        ("10g", 10.0),
        ("12.5 grams", 12.5),
        ("  8 g ", 8.0),
        ("g10", 10.0),
        ("-5g", -5.0),
        (".5g", 0.5),
        ("1.2.3", 1.2),
        ("5-6g", 5.0),
    ])
    def test_leading_number_after_cleanup(self, raw: str, expected: float):
        """Non-numeric characters are dropped before reading the leading number."""
        assert parse_measure(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["abc", "", "grams", "-", ".", None, True])
    def test_unparseable(self, raw):
        """Strings with no readable number parse to None."""
        assert parse_measure(raw) is None

    def test_numbers_pass_through(self):
        """Numeric values are returned as floats."""
        assert parse_measure(7) == 7.0
        assert parse_measure(2.25) == 2.25
        assert parse_measure(float("nan")) is None


class TestParseMeasureOrZero:
    """Tests for parse_measure_or_zero."""

    def test_failure_is_zero(self):
        """Unparseable values become 0."""
        assert parse_measure_or_zero("abc") == 0.0
        assert parse_measure_or_zero(None) == 0.0

    def test_success_is_value(self):
        """Parseable values are returned unchanged."""
        assert parse_measure_or_zero("25.5 g") == 25.5

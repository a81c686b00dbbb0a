"""Tests for the primitive codecs (boolean, numbers, temporal, text)."""

from datetime import date, datetime, timedelta, timezone

import pytest

from fhir_shorthand import (
    ParseError,
    to_boolean,
    to_date,
    to_date_time,
    to_decimal,
    to_integer,
    to_iso_timestamp,
    to_string,
    to_time,
)


# ═══════════════════════════════════════════════════════════════════
# Boolean
# ═══════════════════════════════════════════════════════════════════


class TestToBoolean:

    def test_boolean_passthrough(self):
        assert to_boolean(True) is True
        assert to_boolean(False) is False

    @pytest.mark.parametrize("text", ["true", "TRUE", "True", "tRuE"])
    def test_true_literal_is_case_insensitive(self, text):
        assert to_boolean(text) is True

    @pytest.mark.parametrize("text", ["false", "yes", "1", "", "truthy"])
    def test_anything_else_is_false(self, text):
        assert to_boolean(text) is False


# ═══════════════════════════════════════════════════════════════════
# Numbers
# ═══════════════════════════════════════════════════════════════════


class TestToInteger:

    def test_numeric_passthrough(self):
        assert to_integer(42) == 42
        assert to_integer(3.7) == 3.7

    def test_parses_leading_digits(self):
        assert to_integer("42") == 42
        assert to_integer("42abc") == 42
        assert to_integer("  -7 ") == -7

    def test_no_digits_raises_parse_error(self):
        with pytest.raises(ParseError, match="integer"):
            to_integer("abc")

    def test_boolean_is_not_numeric(self):
        with pytest.raises(ParseError):
            to_integer(True)


class TestToDecimal:

    def test_numeric_passthrough(self):
        assert to_decimal(98.6) == 98.6
        assert to_decimal(5) == 5

    def test_parses_floating_point_prefix(self):
        assert to_decimal("3.14 mg") == pytest.approx(3.14)
        assert to_decimal(".5") == pytest.approx(0.5)
        assert to_decimal("1e3") == pytest.approx(1000.0)
        assert to_decimal("-2.5") == pytest.approx(-2.5)

    def test_no_number_raises_parse_error(self):
        with pytest.raises(ParseError, match="decimal"):
            to_decimal("n/a")


# ═══════════════════════════════════════════════════════════════════
# Temporal
# ═══════════════════════════════════════════════════════════════════


class TestIsoTimestamp:

    def test_aware_datetime_with_milliseconds(self):
        dt = datetime(2020, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
        assert to_iso_timestamp(dt) == "2020-01-02T03:04:05.678Z"

    def test_naive_datetime_is_taken_as_utc(self):
        assert to_iso_timestamp(datetime(2020, 1, 2, 3, 4, 5)) == "2020-01-02T03:04:05.000Z"

    def test_offset_datetime_is_converted_to_utc(self):
        dt = datetime(2020, 1, 2, 1, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_iso_timestamp(dt) == "2020-01-01T23:00:00.000Z"

    def test_date_is_midnight_utc(self):
        assert to_iso_timestamp(date(2020, 1, 2)) == "2020-01-02T00:00:00.000Z"

    def test_non_temporal_raises_parse_error(self):
        with pytest.raises(ParseError):
            to_iso_timestamp(12)


class TestTemporalCodecs:

    def test_text_passes_through_unchanged(self):
        # No format checking is applied to authored text.
        assert to_date_time("2020") == "2020"
        assert to_date("1980-05") == "1980-05"
        assert to_time("08:30") == "08:30"

    def test_date_time_renders_full_timestamp(self):
        assert to_date_time(date(2019, 12, 31)) == "2019-12-31T00:00:00.000Z"

    def test_date_keeps_date_portion(self):
        assert to_date(datetime(2020, 1, 2, 3, 4, 5)) == "2020-01-02"
        assert to_date(date(1980, 5, 17)) == "1980-05-17"

    def test_time_keeps_time_and_offset(self):
        assert to_time(datetime(2020, 1, 2, 3, 4, 5)) == "03:04:05.000Z"

    def test_date_time_rejects_numbers(self):
        with pytest.raises(ParseError):
            to_date_time(20200101)


# ═══════════════════════════════════════════════════════════════════
# Text
# ═══════════════════════════════════════════════════════════════════


class TestToString:

    def test_text_passthrough(self):
        assert to_string("final") == "final"

    def test_numbers_are_rendered(self):
        assert to_string(12) == "12"
        assert to_string(1.5) == "1.5"

    def test_booleans_render_lowercase(self):
        assert to_string(True) == "true"
        assert to_string(False) == "false"

    def test_none_uses_default(self):
        assert to_string(None) is None
        assert to_string(None, "") == ""

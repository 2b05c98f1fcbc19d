"""Tests for partial date helpers."""

import pytest

from dates import (
    extract_year,
    format_date,
    format_date_range,
    is_partial_date,
    parse_gedcom_date,
    to_gedcom_date,
)


class TestParseGedcomDate:
    """GEDCOM date value -> canonical partial date."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("15 JAN 1980", "1980-01-15"),
            ("5 jun 1901", "1901-06-05"),
            ("MAR 1982", "1982-03"),
            ("1980", "1980"),
            ("ABT 1850", "1850"),
            ("BEF 3 DEC 1799", "1799-12-03"),
            ("est OCT 1700", "1700-10"),
            ("BET 1900 AND 1910", "1900"),
            ("BET 1 JAN 1900 AND 31 DEC 1910", "1900-01-01"),
            ("BEF. 1850", "1850"),
            ("abt. 3 MAY 1850", "1850-05-03"),
        ],
    )
    def test_recognized_formats(self, value, expected):
        assert parse_gedcom_date(value) == expected

    def test_unknown_month_defaults_to_january(self):
        assert parse_gedcom_date("15 XYZ 1980") == "1980-01-15"

    @pytest.mark.parametrize("value", ["", None, "unknown", "sometime"])
    def test_unparseable_returns_none(self, value):
        assert parse_gedcom_date(value) is None


class TestToGedcomDate:
    def test_full_date_drops_leading_zero(self):
        assert to_gedcom_date("1980-01-05") == "5 JAN 1980"

    def test_year_month(self):
        assert to_gedcom_date("1982-03") == "MAR 1982"

    def test_year_only(self):
        assert to_gedcom_date("1980") == "1980"

    def test_empty(self):
        assert to_gedcom_date(None) == ""
        assert to_gedcom_date("") == ""

    @pytest.mark.parametrize("value", ["1980-13", "1980-00", "1980-02-40", "circa 1900"])
    def test_malformed_value_passes_through(self, value):
        assert to_gedcom_date(value) == value

    @pytest.mark.parametrize("partial", ["1980", "1982-03", "1980-01-15", "2001-12-31"])
    def test_precision_survives_gedcom(self, partial):
        assert parse_gedcom_date(to_gedcom_date(partial)) == partial


class TestPartialDates:
    @pytest.mark.parametrize("value", ["1980", "1980-01", "1980-12-31"])
    def test_valid(self, value):
        assert is_partial_date(value)

    @pytest.mark.parametrize("value", ["", None, "80", "1980-13", "1980-1-1", "15 JAN 1980"])
    def test_invalid(self, value):
        assert not is_partial_date(value)

    def test_extract_year(self):
        assert extract_year("1980-01-15") == "1980"


class TestFormatDate:
    def test_full_date_italian(self):
        assert format_date("1980-01-15", "it") == "15 gen 1980"

    def test_full_date_english(self):
        assert format_date("1980-01-15", "en") == "15 Jan 1980"

    def test_year_month(self):
        assert format_date("1980-03", "it") == "mar 1980"

    def test_year_only(self):
        assert format_date("1980") == "1980"

    def test_defaults_to_italian(self):
        assert format_date("2000-06-10") == "10 giu 2000"
        assert format_date("2000-06-10", "fr") == "10 giu 2000"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value):
        assert format_date(value) == ""

    def test_out_of_range_month_is_not_formatted(self):
        assert format_date("1980-13", "en") == "1980-13"


class TestFormatDateRange:
    def test_birth_and_death(self):
        assert format_date_range("1920-05-10", "2000-12-31") == "1920 - 2000"

    def test_birth_only(self):
        assert format_date_range("1980-01-15", None) == "1980"

    def test_death_only(self):
        assert format_date_range(None, "2020-06-01") == "? - 2020"

    def test_neither(self):
        assert format_date_range(None, None) == ""

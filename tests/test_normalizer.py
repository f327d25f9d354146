"""Tests for value normalization and canonical date forms."""

import pytest

from recordlink.resolution.normalizer import date_candidates, normalize, parse_date


class TestNormalize:

    def test_lowercases_and_trims(self):
        assert normalize("  Checking (Bank of X) ") == "checking (bank of x)"

    def test_none_is_empty(self):
        assert normalize(None) == ""

    def test_non_strings_are_stringified(self):
        assert normalize(42) == "42"


class TestDateCandidates:
    """Tests for canonical date forms."""

    def test_iso_input(self):
        assert date_candidates("2024-01-05") == ["2024-01-05", "1/5/2024", "1-5-2024"]

    def test_us_slash_input_is_month_first(self):
        assert date_candidates("1/5/2024") == ["2024-01-05", "1/5/2024", "1-5-2024"]

    def test_dash_input(self):
        assert date_candidates("1-5-2024")[0] == "2024-01-05"

    def test_written_out_date_keeps_raw_form_last(self):
        """Test the normalized raw value is the last canonical form."""
        assert date_candidates("Jan 5, 2024") == [
            "2024-01-05",
            "1/5/2024",
            "1-5-2024",
            "jan 5, 2024",
        ]

    def test_timezone_does_not_shift_the_day(self):
        """Test the calendar date is taken as written."""
        assert date_candidates("2024-01-05T23:30:00-08:00")[0] == "2024-01-05"

    @pytest.mark.parametrize("value", ["Checking", "Savings (Bank)", "", "   ", None])
    def test_non_dates_give_no_candidates(self, value):
        assert date_candidates(value) == []

    def test_out_of_range_does_not_raise(self):
        assert date_candidates("99999999999999999999") == []

    def test_parse_date_is_deterministic_for_partial_dates(self):
        """Test missing parts come from a fixed default, not today."""
        first = parse_date("March 3")
        assert first is not None
        assert first.year == 1900
        assert (first.month, first.day) == (3, 3)

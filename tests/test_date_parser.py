"""Unit tests for DateRangeParser."""
from datetime import date

import pytest

from processor.date_parser import DateRangeParser, parse_date_range


FIXED_TODAY = date(2026, 3, 4)


@pytest.fixture
def parser():
    """Parser with a fixed current date."""
    return DateRangeParser(today=lambda: FIXED_TODAY)


class TestDateRangeParser:
    """Test cases for DateRangeParser class."""

    def test_single_date_with_year(self, parser):
        """Test a single date with an explicit year."""
        assert parser.parse("May 16, 2026") == (date(2026, 5, 16), None)

    def test_single_date_without_year_uses_current_year(self, parser):
        """Test that a missing year defaults to the current year."""
        assert parser.parse("May 16") == (date(2026, 5, 16), None)

    def test_range_without_years(self, parser):
        """Test a range where neither side has a year."""
        start, end = parser.parse("May 16 - May 18")

        assert start == date(2026, 5, 16)
        assert end == date(2026, 5, 18)
        assert end >= start

    def test_range_start_inherits_end_year(self, parser):
        """Test that the start takes the end's year when it has none."""
        start, end = parser.parse("December 30 - January 2, 2027")

        assert start == date(2027, 12, 30)
        assert end == date(2027, 1, 2)

    def test_range_end_inherits_start_year(self, parser):
        """Test that the end takes the start's year when it has none."""
        start, end = parser.parse("Jun 1, 2025 - Jun 3")

        assert start == date(2025, 6, 1)
        assert end == date(2025, 6, 3)

    def test_range_with_both_years(self, parser):
        """Test a range spanning two explicit years."""
        start, end = parser.parse("Dec 30, 2026 - Jan 2, 2027")

        assert start == date(2026, 12, 30)
        assert end == date(2027, 1, 2)

    @pytest.mark.parametrize("text,month", [
        ("jan 5", 1),
        ("JANUARY 5", 1),
        ("Sept 5", 9),
        ("sep 5", 9),
        ("September 5", 9),
        ("Dec 5", 12),
    ])
    def test_month_names_and_abbreviations(self, parser, text, month):
        """Test case-insensitive full and abbreviated month names."""
        start, _ = parser.parse(text)
        assert start == date(2026, month, 5)

    def test_trailing_comma(self, parser):
        """Test a date followed by a stray comma."""
        assert parser.parse("May 16,") == (date(2026, 5, 16), None)

    def test_garbage_falls_back_to_today(self, parser):
        """Test that unparseable text resolves to today without raising."""
        assert parser.parse("garbage text") == (FIXED_TODAY, None)

    @pytest.mark.parametrize("text", [
        "",
        "May",
        "Mayday 16",
        "May sixteenth",
        "February 30",
        "May 16 - soon",
    ])
    def test_invalid_input_falls_back_to_today(self, parser, text):
        """Test the fallback for unknown months, bad days and bad dates."""
        assert parser.parse(text) == (FIXED_TODAY, None)

    def test_failures_are_recorded(self, parser):
        """Test that fallbacks are reported on the diagnostics list."""
        parser.parse("May 16")
        parser.parse("garbage text")

        assert len(parser.failures) == 1
        assert parser.failures[0].raw_text == "garbage text"
        assert "Unknown month" in parser.failures[0].reason

    def test_parse_date_range_uses_real_today(self):
        """Test the module-level helper against the real calendar."""
        current_year = date.today().year

        assert parse_date_range("May 16, 2026") == (date(2026, 5, 16), None)
        assert parse_date_range("May 16 - May 18") == (
            date(current_year, 5, 16),
            date(current_year, 5, 18)
        )
        assert parse_date_range("garbage text") == (date.today(), None)

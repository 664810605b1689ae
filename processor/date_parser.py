"""Parser for the human readable date ranges shown on the events listing."""
import logging
import re
from datetime import date
from typing import Callable, List, Optional, Tuple

from processor.models import DateParseFailure

logger = logging.getLogger(__name__)


class DateParseError(ValueError):
    """Raised when a date segment cannot be understood."""


MONTHS = {
    'january': 1, 'jan': 1,
    'february': 2, 'feb': 2,
    'march': 3, 'mar': 3,
    'april': 4, 'apr': 4,
    'may': 5,
    'june': 6, 'jun': 6,
    'july': 7, 'jul': 7,
    'august': 8, 'aug': 8,
    'september': 9, 'sep': 9, 'sept': 9,
    'october': 10, 'oct': 10,
    'november': 11, 'nov': 11,
    'december': 12, 'dec': 12,
}

RANGE_SEPARATOR = ' - '
YEAR_PATTERN = re.compile(r'\b(20\d{2})\b')


class DateRangeParser:
    """
    Parse listing dates such as 'May 16, 2026' or 'May 16 - May 18'.

    Parsing never raises. Text that cannot be parsed resolves to today's date
    with no end date, and the failure is appended to ``failures``.
    """

    def __init__(self, today: Optional[Callable[[], date]] = None):
        """
        Initialize the parser.

        Args:
            today: Callable returning the current date (default: date.today)
        """
        self._today = today or date.today
        self.failures: List[DateParseFailure] = []

    def parse(self, raw_text: str) -> Tuple[date, Optional[date]]:
        """
        Parse a raw date string into start and optional end dates.

        Args:
            raw_text: Date text with any time of day already removed

        Returns:
            Tuple of (start_date, end_date); end_date is None for single days
        """
        today = self._today()
        text = (raw_text or '').strip()

        try:
            if RANGE_SEPARATOR in text:
                parts = text.split(RANGE_SEPARATOR)
                start_year = (
                    self._extract_year(parts[0])
                    or self._extract_year(parts[1])
                    or today.year
                )
                end_year = self._extract_year(parts[1]) or start_year
                start = self._parse_segment(parts[0], start_year)
                end = self._parse_segment(parts[1], end_year)
                return start, end

            year = self._extract_year(text) or today.year
            return self._parse_segment(text, year), None

        except DateParseError as e:
            logger.warning(f"Falling back to today for date '{text}': {e}")
            self.failures.append(DateParseFailure(raw_text=text, reason=str(e)))
            return today, None

    def _extract_year(self, segment: str) -> Optional[int]:
        match = YEAR_PATTERN.search(segment)
        return int(match.group(1)) if match else None

    def _parse_segment(self, segment: str, default_year: int) -> date:
        """
        Parse 'May 16', 'May 16,' or 'May 16, 2026'.

        Raises:
            DateParseError: If the month, day or resulting date is invalid
        """
        tokens = segment.replace(',', '').split()
        if len(tokens) < 2:
            raise DateParseError(f"Invalid date format: {segment.strip()}")

        month = MONTHS.get(tokens[0].lower())
        if month is None:
            raise DateParseError(f"Unknown month: {tokens[0]}")

        try:
            day = int(tokens[1])
        except ValueError:
            raise DateParseError(f"Invalid day: {tokens[1]}")

        year = default_year
        if len(tokens) > 2 and tokens[2].isdigit():
            year = int(tokens[2])

        try:
            return date(year, month, day)
        except ValueError as e:
            raise DateParseError(f"Invalid date '{segment.strip()}': {e}")


def parse_date_range(raw_text: str) -> Tuple[date, Optional[date]]:
    """Parse a raw date string with a throwaway parser."""
    return DateRangeParser().parse(raw_text)

"""Data models for event processing."""
import hashlib
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass(frozen=True)
class RawEvent:
    """Raw event fields extracted from one listing container."""
    title: str
    raw_date_text: str
    link: str


@dataclass(frozen=True)
class EventRecord:
    """Structured event with parsed dates."""
    title: str
    raw_date_text: str
    start_date: date
    end_date: Optional[date]
    link: str

    @property
    def unique_id(self) -> str:
        """
        Short digest of title, raw date text and link.

        Stable across runs, but only 32 bits wide, so collisions are possible.
        """
        composite = f"{self.title}_{self.raw_date_text}_{self.link}"
        return hashlib.sha256(composite.encode('utf-8')).hexdigest()[:8]

    @property
    def formatted_date(self) -> str:
        """Human readable date, e.g. 'Saturday, May 16 - Sunday, May 17'."""
        current_year = date.today().year
        show_year = self.start_date.year != current_year
        text = _format_day(self.start_date, show_year)

        if self.end_date is not None and self.end_date != self.start_date:
            end_show_year = show_year or self.end_date.year != current_year
            text = f"{text} - {_format_day(self.end_date, end_show_year)}"

        return text


def _format_day(value: date, show_year: bool) -> str:
    text = f"{value:%A}, {value:%B} {value.day}"
    if show_year:
        text += f", {value.year}"
    return text


@dataclass
class DateParseFailure:
    """Raw date text that fell back to today's date."""
    raw_text: str
    reason: str


@dataclass
class ScrapeReport:
    """Summary of a scrape run."""
    page_count: int
    event_count: int
    failed_pages: List[int] = field(default_factory=list)
    date_parse_failures: List[DateParseFailure] = field(default_factory=list)
    discovery_network_errors: int = 0
    duration_seconds: float = 0.0

    @property
    def complete(self) -> bool:
        """True when every page was fetched and discovery saw no errors."""
        return not self.failed_pages and self.discovery_network_errors == 0


@dataclass
class FeedResult:
    """Events served to the caller, fresh or from the cached snapshot."""
    events: List[EventRecord]
    from_cache: bool
    message: Optional[str] = None
    report: Optional[ScrapeReport] = None

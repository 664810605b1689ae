"""Event processor for turning raw listing fields into event records."""
import logging
from typing import Iterable, List, Optional

from processor.date_parser import DateRangeParser
from processor.models import EventRecord, RawEvent

logger = logging.getLogger(__name__)


class EventProcessor:
    """Processor that parses dates and deduplicates events."""

    def __init__(self, date_parser: Optional[DateRangeParser] = None):
        """
        Initialize the processor.

        Args:
            date_parser: Parser for raw date text (default: new DateRangeParser)
        """
        self.date_parser = date_parser or DateRangeParser()

    def process_events(self, raw_events: Iterable[RawEvent]) -> List[EventRecord]:
        """
        Build event records from raw events, preserving their order.

        Args:
            raw_events: Raw events as extracted from a page or snapshot

        Returns:
            List of EventRecord objects
        """
        return [self.build_record(raw_event) for raw_event in raw_events]

    def build_record(self, raw_event: RawEvent) -> EventRecord:
        """
        Build a single event record.

        Unparseable dates never raise; they resolve to today's date.
        """
        start_date, end_date = self.date_parser.parse(raw_event.raw_date_text)
        return EventRecord(
            title=raw_event.title,
            raw_date_text=raw_event.raw_date_text,
            start_date=start_date,
            end_date=end_date,
            link=raw_event.link
        )

    def deduplicate(self, events: Iterable[EventRecord]) -> List[EventRecord]:
        """
        Drop repeated events, keeping the first occurrence of each.

        Events are compared on title, raw date text and link rather than on
        unique_id, which may collide.

        Args:
            events: Events in listing order

        Returns:
            Events in the same order with repeats removed
        """
        seen = set()
        unique_events = []
        duplicates = 0

        for event in events:
            key = (event.title, event.raw_date_text, event.link)
            if key in seen:
                duplicates += 1
                continue
            seen.add(key)
            unique_events.append(event)

        if duplicates:
            logger.info(f"Dropped {duplicates} duplicate events")
        return unique_events

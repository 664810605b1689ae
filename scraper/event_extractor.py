"""Event extraction for 'The Events Calendar' list pages."""
import logging
import re
from datetime import date
from typing import Callable, List, Optional

from bs4 import BeautifulSoup

from processor.date_parser import DateRangeParser
from processor.models import RawEvent

logger = logging.getLogger(__name__)

NOTICE_SELECTOR = '.tribe-events-c-messages__message--notice'
EVENT_SELECTOR = '.tribe-events-calendar-list__event'
TITLE_SELECTOR = '.tribe-events-calendar-list__event-title'
LINK_SELECTOR = '.tribe-events-calendar-list__event-title-link'
DATETIME_SELECTOR = '.tribe-events-calendar-list__event-datetime'

TIME_OF_DAY_PATTERN = re.compile(r'@.*')


class EventExtractor:
    """Extracts raw events from a listing page."""

    def __init__(
        self,
        current_year_only: bool = False,
        today: Optional[Callable[[], date]] = None
    ):
        """
        Initialize the extractor.

        Args:
            current_year_only: Only count a page as having events when one of
                them starts in the current year
            today: Callable returning the current date (default: date.today)
        """
        self.current_year_only = current_year_only
        self._today = today or date.today

    def extract_events(self, html_content: str) -> List[RawEvent]:
        """
        Extract events in document order.

        Containers missing a title, link or date are skipped.

        Args:
            html_content: HTML of a listing page

        Returns:
            List of RawEvent objects
        """
        soup = BeautifulSoup(html_content, 'html.parser')
        events = []

        for container in soup.select(EVENT_SELECTOR):
            event = self._parse_container(container)
            if event:
                events.append(event)

        return events

    def has_events(self, html_content: str) -> bool:
        """
        Check whether a page still belongs to the listing.

        Args:
            html_content: HTML of a listing page

        Returns:
            False if the 'no more events' notice is shown or no event
            containers exist, True otherwise
        """
        soup = BeautifulSoup(html_content, 'html.parser')

        if soup.select_one(NOTICE_SELECTOR) is not None:
            logger.debug("No events notice found")
            return False

        containers = soup.select(EVENT_SELECTOR)
        if not containers:
            logger.debug("No event containers found")
            return False

        if self.current_year_only:
            return self._has_current_year_event(containers)

        return True

    def _has_current_year_event(self, containers) -> bool:
        current_year = self._today().year
        parser = DateRangeParser(today=self._today)

        for container in containers:
            date_elem = container.select_one(DATETIME_SELECTOR)
            if date_elem is None:
                continue
            start_date, _ = parser.parse(clean_date_text(_text(date_elem)))
            if start_date.year == current_year:
                return True

        return False

    def _parse_container(self, container) -> Optional[RawEvent]:
        """
        Parse a single event container.

        Args:
            container: BeautifulSoup element for one event

        Returns:
            RawEvent or None if a required element is missing
        """
        title_elem = container.select_one(TITLE_SELECTOR)
        link_elem = container.select_one(LINK_SELECTOR)
        date_elem = container.select_one(DATETIME_SELECTOR)

        if not all([title_elem, link_elem, date_elem]):
            logger.warning("Skipping event container with missing elements")
            return None

        return RawEvent(
            title=_text(title_elem),
            raw_date_text=clean_date_text(_text(date_elem)),
            link=link_elem.get('href', '')
        )


def clean_date_text(text: str) -> str:
    """Strip the time of day ('@ 8:00 am - 5:00 pm') from a date string."""
    return TIME_OF_DAY_PATTERN.sub('', text).strip()


def _text(element) -> str:
    return ' '.join(element.get_text(' ').split())

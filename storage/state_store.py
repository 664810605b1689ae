"""Cross-run state: last page hint, event snapshot and refresh time."""
import json
import logging
from typing import Iterable, List, Optional

from processor.models import EventRecord, RawEvent

logger = logging.getLogger(__name__)

MISSING_TITLE = 'Unknown Event'
MISSING_DATE = 'Date TBD'


def encode_snapshot(events: Iterable[EventRecord]) -> str:
    """
    Encode events as a JSON array of {title, rawDateText, link} objects.

    Args:
        events: Events to store

    Returns:
        JSON string
    """
    return json.dumps([
        {
            'title': event.title,
            'rawDateText': event.raw_date_text,
            'link': event.link
        }
        for event in events
    ])


def decode_snapshot(payload: str) -> Optional[List[RawEvent]]:
    """
    Decode a snapshot written by encode_snapshot.

    Entries written under the older 'dateOnly' key are accepted too.

    Args:
        payload: JSON string

    Returns:
        List of RawEvent objects, or None if the payload is not a JSON array
    """
    try:
        items = json.loads(payload)
    except (TypeError, ValueError) as e:
        logger.warning(f"Ignoring unreadable event snapshot: {e}")
        return None

    if not isinstance(items, list):
        logger.warning("Ignoring event snapshot that is not a JSON array")
        return None

    raw_events = []
    for item in items:
        if not isinstance(item, dict):
            continue
        raw_events.append(RawEvent(
            title=str(item.get('title', MISSING_TITLE)),
            raw_date_text=str(item.get('rawDateText', item.get('dateOnly', MISSING_DATE))),
            link=str(item.get('link', ''))
        ))

    return raw_events


class StateStore:
    """Interface for the state kept between runs."""

    def get_last_page(self) -> Optional[int]:
        raise NotImplementedError

    def save_last_page(self, page_count: int) -> None:
        raise NotImplementedError

    def load_snapshot(self) -> Optional[List[RawEvent]]:
        raise NotImplementedError

    def save_snapshot(self, events: List[EventRecord]) -> None:
        raise NotImplementedError

    def get_last_refresh(self) -> Optional[int]:
        raise NotImplementedError

    def save_last_refresh(self, timestamp: int) -> None:
        raise NotImplementedError


class InMemoryStateStore(StateStore):
    """State store kept in process memory."""

    def __init__(
        self,
        last_page: Optional[int] = None,
        snapshot: Optional[str] = None,
        last_refresh: Optional[int] = None
    ):
        self.last_page = last_page
        self.snapshot = snapshot
        self.last_refresh = last_refresh

    def get_last_page(self) -> Optional[int]:
        return self.last_page

    def save_last_page(self, page_count: int) -> None:
        self.last_page = page_count

    def load_snapshot(self) -> Optional[List[RawEvent]]:
        if self.snapshot is None:
            return None
        return decode_snapshot(self.snapshot)

    def save_snapshot(self, events: List[EventRecord]) -> None:
        self.snapshot = encode_snapshot(events)

    def get_last_refresh(self) -> Optional[int]:
        return self.last_refresh

    def save_last_refresh(self, timestamp: int) -> None:
        self.last_refresh = timestamp

"""Serves events from a fresh scrape or from the cached snapshot."""
import logging
import time
from typing import Callable, Optional

from processor.event_processor import EventProcessor
from processor.models import FeedResult
from scraper.events_scraper import EventsScraper, ScrapeConfig
from storage.state_store import StateStore

logger = logging.getLogger(__name__)


class EventFeed:
    """Decides between the cached snapshot and a fresh scrape."""

    MAX_AGE_SECONDS = 7 * 24 * 60 * 60

    def __init__(
        self,
        config: ScrapeConfig,
        max_age_seconds: int = MAX_AGE_SECONDS,
        scraper: Optional[EventsScraper] = None,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize the feed.

        Args:
            config: Scrape config; its snapshot_store holds the cached events
            max_age_seconds: Snapshot age after which a fresh scrape runs
            scraper: Scraper to use (default: EventsScraper(config))
            clock: Returns the current time in epoch seconds
        """
        if config.snapshot_store is None:
            raise ValueError("EventFeed requires a snapshot_store")

        self.config = config
        self.store: StateStore = config.snapshot_store
        self.max_age_seconds = max_age_seconds
        self.scraper = scraper or EventsScraper(config)
        self.clock = clock

    def load(self, force_refresh: bool = False) -> FeedResult:
        """
        Return the current events.

        A fresh scrape runs when forced, when the snapshot is older than
        max_age_seconds or when there is no snapshot. If that scrape raises
        or comes back incomplete after network errors, the snapshot is served
        with an explanatory message. An incomplete scrape without a snapshot
        returns the partial events; neither case updates the refresh time.

        Args:
            force_refresh: Scrape even if the snapshot is recent

        Returns:
            FeedResult with the events and where they came from

        Raises:
            Exception: The scrape error, when no snapshot exists to fall back on
        """
        if not force_refresh and not self._snapshot_expired():
            cached = self._cached_events()
            if cached is not None:
                logger.info(f"Serving {len(cached)} events from snapshot")
                return FeedResult(events=cached, from_cache=True)

        try:
            events = self.scraper.scrape()
        except Exception as e:
            logger.error(
                f"Fresh scrape failed: {str(e)}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            cached = self._cached_events()
            if cached is None:
                raise
            return FeedResult(
                events=cached,
                from_cache=True,
                message=f"Showing cached data. {e}"
            )

        report = self.scraper.last_report
        if report is not None and not report.complete:
            reason = _incomplete_reason(report)
            logger.warning(
                f"Fresh scrape incomplete: {reason}",
                extra={
                    'failed_pages': report.failed_pages,
                    'discovery_network_errors': report.discovery_network_errors
                }
            )
            cached = self._cached_events()
            if cached is not None:
                return FeedResult(
                    events=cached,
                    from_cache=True,
                    message=f"Showing cached data. {reason}",
                    report=report
                )
            return FeedResult(
                events=events,
                from_cache=False,
                message=f"Showing partial data. {reason}",
                report=report
            )

        self.store.save_last_refresh(int(self.clock()))
        return FeedResult(
            events=events,
            from_cache=False,
            report=report
        )

    def _snapshot_expired(self) -> bool:
        last_refresh = self.store.get_last_refresh()
        if last_refresh is None:
            return True
        return self.clock() - last_refresh >= self.max_age_seconds

    def _cached_events(self):
        raw_events = self.store.load_snapshot()
        if raw_events is None:
            return None
        return EventProcessor().process_events(raw_events)


def _incomplete_reason(report) -> str:
    if report.failed_pages:
        pages = ', '.join(str(p) for p in report.failed_pages)
        return f"Scrape incomplete, failed to fetch pages {pages}."
    return (
        f"Scrape incomplete, {report.discovery_network_errors} network "
        f"errors while counting pages."
    )

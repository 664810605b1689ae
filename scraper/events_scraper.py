"""Scrape pipeline: discover the page count, then scrape every page."""
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from processor.date_parser import DateRangeParser
from processor.event_processor import EventProcessor
from processor.models import EventRecord, ScrapeReport
from scraper.event_extractor import EventExtractor
from scraper.page_discovery import LastPageDiscovery, PageOracle
from scraper.page_fetcher import DEFAULT_USER_AGENT, PageFetcher
from scraper.page_scraper import ConcurrentPageScraper
from scraper.response_cache import ResponseCache
from storage.state_store import InMemoryStateStore, StateStore

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://dreamparknj.com/events"


@dataclass
class ScrapeConfig:
    """Settings and collaborators for a scrape run."""
    base_url: str = DEFAULT_BASE_URL
    concurrency_limit: int = 5
    connect_timeout: float = 15.0
    request_timeout: float = 30.0
    hint_store: StateStore = field(default_factory=InMemoryStateStore)
    snapshot_store: Optional[StateStore] = None
    current_year_only: bool = False
    user_agent: str = DEFAULT_USER_AGENT


class EventsScraper:
    """Runs discovery and the concurrent page scrape for one listing."""

    def __init__(
        self,
        config: ScrapeConfig,
        fetcher_factory: Optional[Callable[[ScrapeConfig], PageFetcher]] = None
    ):
        """
        Initialize the scraper.

        Args:
            config: Scrape settings and state stores
            fetcher_factory: Builds the PageFetcher for a run (default: HTTP)
        """
        self.config = config
        self.fetcher_factory = fetcher_factory or _http_fetcher
        self.last_report: Optional[ScrapeReport] = None

    def scrape(self) -> List[EventRecord]:
        """
        Scrape the full listing.

        Errors on individual pages or dates never reach the caller; only a
        failure to build the fetcher or to access the stores does.

        Returns:
            Deduplicated events in listing order
        """
        start_time = time.time()
        config = self.config
        hint = config.hint_store.get_last_page()
        logger.info(f"Starting scrape of {config.base_url}", extra={'hint': hint})

        cache = ResponseCache()
        date_parser = DateRangeParser()
        processor = EventProcessor(date_parser)
        extractor = EventExtractor(current_year_only=config.current_year_only)

        with self.fetcher_factory(config) as fetcher:
            oracle = PageOracle(fetcher, cache, extractor)
            page_count = LastPageDiscovery(oracle).discover(hint)
            logger.info(
                f"Discovered {page_count} pages",
                extra={'fetches': oracle.fetch_count, 'hint': hint}
            )

            page_scraper = ConcurrentPageScraper(
                fetcher,
                cache,
                extractor,
                processor,
                concurrency_limit=config.concurrency_limit
            )
            events = processor.deduplicate(page_scraper.scrape(page_count))

        config.hint_store.save_last_page(page_count)

        report = ScrapeReport(
            page_count=page_count,
            event_count=len(events),
            failed_pages=list(page_scraper.failed_pages),
            date_parse_failures=list(date_parser.failures),
            discovery_network_errors=oracle.network_errors,
            duration_seconds=round(time.time() - start_time, 2)
        )
        self.last_report = report

        if config.snapshot_store is not None:
            if report.complete:
                config.snapshot_store.save_snapshot(events)
            else:
                logger.warning(
                    "Keeping previous event snapshot after incomplete scrape",
                    extra={
                        'failed_pages': report.failed_pages,
                        'discovery_network_errors': report.discovery_network_errors
                    }
                )

        logger.info(
            f"Scrape completed with {len(events)} events",
            extra={
                'page_count': page_count,
                'failed_pages': report.failed_pages,
                'date_parse_failures': len(report.date_parse_failures),
                'duration_seconds': report.duration_seconds
            }
        )
        return events


def _http_fetcher(config: ScrapeConfig) -> PageFetcher:
    return PageFetcher(
        config.base_url,
        connect_timeout=config.connect_timeout,
        request_timeout=config.request_timeout,
        pool_size=config.concurrency_limit,
        user_agent=config.user_agent
    )


def scrape(config: ScrapeConfig) -> List[EventRecord]:
    """Scrape the listing described by ``config``."""
    return EventsScraper(config).scrape()

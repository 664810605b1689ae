"""Concurrent scraping of every listing page."""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List

from processor.event_processor import EventProcessor
from processor.models import EventRecord
from scraper.event_extractor import EventExtractor
from scraper.page_fetcher import PageFetcher
from scraper.response_cache import ResponseCache

logger = logging.getLogger(__name__)


class ConcurrentPageScraper:
    """Fetches and parses pages 1..N with a cap on concurrent requests."""

    DEFAULT_CONCURRENCY = 5

    def __init__(
        self,
        fetcher: PageFetcher,
        cache: ResponseCache,
        extractor: EventExtractor,
        processor: EventProcessor,
        concurrency_limit: int = DEFAULT_CONCURRENCY
    ):
        """
        Initialize the scraper.

        Args:
            fetcher: Fetcher used for pages missing from the cache
            cache: Response cache shared with discovery
            extractor: Extractor for raw event fields
            processor: Processor that parses dates into records
            concurrency_limit: Maximum simultaneous fetches (default: 5)
        """
        if concurrency_limit < 1:
            raise ValueError("concurrency_limit must be at least 1")

        self.fetcher = fetcher
        self.cache = cache
        self.extractor = extractor
        self.processor = processor
        self.concurrency_limit = concurrency_limit
        self._permits = threading.BoundedSemaphore(concurrency_limit)
        self.failed_pages: List[int] = []

    def scrape(self, page_count: int) -> List[EventRecord]:
        """
        Scrape pages 1..page_count.

        A page that fails contributes no events; the rest still complete.

        Args:
            page_count: Last page with events, from discovery

        Returns:
            Events of all pages, concatenated in page order
        """
        self.failed_pages = []
        if page_count < 1:
            return []

        logger.info(f"Scraping {page_count} pages")
        results: Dict[int, List[EventRecord]] = {}

        # Permits bound concurrent fetches; parsing runs outside them.
        workers = min(page_count, self.concurrency_limit * 2)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self._process_page, page_index): page_index
                for page_index in range(1, page_count + 1)
            }
            for future in as_completed(futures):
                page_index = futures[future]
                try:
                    results[page_index] = future.result()
                except Exception as e:
                    logger.warning(f"Failed to process page {page_index}: {e}")
                    self.failed_pages.append(page_index)
                    results[page_index] = []

        self.failed_pages.sort()
        events = []
        for page_index in range(1, page_count + 1):
            events.extend(results[page_index])

        logger.info(
            f"Scraped {len(events)} events from {page_count} pages",
            extra={'failed_pages': self.failed_pages}
        )
        return events

    def _process_page(self, page_index: int) -> List[EventRecord]:
        html_content = self.cache.get(page_index)

        if html_content is None:
            with self._permits:
                html_content = self.fetcher.fetch(page_index)
            self.cache.put(page_index, html_content)

        raw_events = self.extractor.extract_events(html_content)
        logger.debug(f"Page {page_index}: {len(raw_events)} events")
        return self.processor.process_events(raw_events)

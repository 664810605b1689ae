"""Discovery of the last listing page that still contains events."""
import logging
from typing import Callable, Optional

from scraper.event_extractor import EventExtractor
from scraper.page_fetcher import NetworkError, PageFetcher
from scraper.response_cache import ResponseCache
from scraper.search import find_last_true

logger = logging.getLogger(__name__)


class PageOracle:
    """
    Answers 'does page N contain events' by fetching and inspecting the page.

    Cached pages are never fetched again. A page that fails to fetch counts
    as having no events, which ends the doubling phase during discovery and
    narrows the bracket during binary search.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        cache: ResponseCache,
        extractor: EventExtractor
    ):
        self.fetcher = fetcher
        self.cache = cache
        self.extractor = extractor
        self.fetch_count = 0
        self.network_errors = 0

    def __call__(self, page_index: int) -> bool:
        html_content = self.cache.get(page_index)

        if html_content is None:
            try:
                html_content = self.fetcher.fetch(page_index)
            except NetworkError as e:
                self.network_errors += 1
                logger.warning(f"Treating page {page_index} as empty: {e}")
                return False
            finally:
                self.fetch_count += 1
            self.cache.put(page_index, html_content)
        else:
            logger.debug(f"Cache hit for page {page_index}")

        result = self.extractor.has_events(html_content)
        logger.debug(f"Page {page_index} has events: {result}")
        return result


class LastPageDiscovery:
    """Finds the last page with events, optionally seeded by a previous run."""

    COLD_START_PAGE = 10
    HINT_LOOKAHEAD = 5
    MAX_PAGE = 100_000

    def __init__(self, oracle: Callable[[int], bool], max_page: int = MAX_PAGE):
        """
        Initialize discovery.

        Args:
            oracle: Monotonic predicate telling whether a page has events
            max_page: Ceiling for the doubling phase
        """
        self.oracle = oracle
        self.max_page = max_page

    def discover(self, hint: Optional[int] = None) -> int:
        """
        Determine the last page index containing events.

        Args:
            hint: Last page count from a previous run, if any

        Returns:
            Last page with events, or 0 if the listing is empty
        """
        if hint is not None and hint > 0:
            if self.oracle(hint):
                if not self.oracle(hint + 1):
                    logger.info(f"Last page hint {hint} is still current")
                    return hint

                logger.info(f"Listing grew past hint {hint}, searching forward")
                return self._search(
                    left=hint,
                    right=hint + self.HINT_LOOKAHEAD,
                    last_valid=hint
                )

            logger.info(f"Last page hint {hint} is stale, rediscovering")

        return self._search(left=1, right=self.COLD_START_PAGE, last_valid=0)

    def _search(self, left: int, right: int, last_valid: int) -> int:
        logger.debug(f"Searching for last page from {left}, probing {right}")
        return find_last_true(
            self.oracle, left, right, last_valid, max_right=self.max_page
        )

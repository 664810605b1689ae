"""HTTP fetcher for the paginated events listing."""
import logging

import requests
from requests.adapters import HTTPAdapter

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class NetworkError(Exception):
    """Raised when a listing page cannot be fetched."""

    def __init__(self, page_index: int, message: str):
        super().__init__(f"Page {page_index}: {message}")
        self.page_index = page_index


class PageFetcher:
    """Fetches listing pages over a shared, pooled HTTP session."""

    PAGE_PATH = "/list/page/{page_index}"

    def __init__(
        self,
        base_url: str,
        connect_timeout: float = 15.0,
        request_timeout: float = 30.0,
        pool_size: int = 5,
        user_agent: str = DEFAULT_USER_AGENT
    ):
        """
        Initialize the fetcher and its HTTP session.

        Args:
            base_url: Listing base URL, e.g. https://dreamparknj.com/events
            connect_timeout: Connection timeout in seconds (default: 15)
            request_timeout: Read timeout in seconds (default: 30); it bounds
                each wait for data from the server, not the whole transfer
            pool_size: Connection pool size, match the concurrency limit
            user_agent: User-Agent header sent with every request
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = (connect_timeout, request_timeout)
        self.session = requests.Session()
        self.session.headers.update({'User-Agent': user_agent})
        adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
        self.session.mount('http://', adapter)
        self.session.mount('https://', adapter)

    def page_url(self, page_index: int) -> str:
        """Return the URL of a listing page."""
        return self.base_url + self.PAGE_PATH.format(page_index=page_index)

    def fetch(self, page_index: int) -> str:
        """
        Fetch the HTML of a listing page.

        Args:
            page_index: 1-based page number

        Returns:
            Response body as text

        Raises:
            NetworkError: On timeout, connection failure or non-2xx status
        """
        url = self.page_url(page_index)
        logger.debug(f"Fetching page {page_index}: {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.text
        except requests.RequestException as e:
            logger.warning(f"Failed to fetch page {page_index}: {e}")
            raise NetworkError(page_index, str(e)) from e

    def close(self) -> None:
        """Release pooled connections."""
        self.session.close()

    def __enter__(self) -> 'PageFetcher':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

"""In-run cache of fetched listing pages."""
import threading
from typing import Dict, Optional


class ResponseCache:
    """
    Thread-safe mapping of page index to fetched HTML.

    Shared by the discovery phase and the fan-out workers. Concurrent writes
    to the same page keep the last one.
    """

    def __init__(self):
        self._pages: Dict[int, str] = {}
        self._lock = threading.Lock()

    def get(self, page_index: int) -> Optional[str]:
        with self._lock:
            return self._pages.get(page_index)

    def put(self, page_index: int, html: str) -> None:
        with self._lock:
            self._pages[page_index] = html

    def __contains__(self, page_index: int) -> bool:
        with self._lock:
            return page_index in self._pages

    def __len__(self) -> int:
        with self._lock:
            return len(self._pages)

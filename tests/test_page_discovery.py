"""Unit tests for page discovery and the integer search helpers."""
import pytest

from scraper.event_extractor import EventExtractor
from scraper.page_discovery import LastPageDiscovery, PageOracle
from scraper.response_cache import ResponseCache
from scraper.search import Bracket, expand_upper_bound, find_last_true, last_true


class CountingOracle:
    """Monotonic oracle that is true for pages 1..last_page."""

    def __init__(self, last_page: int):
        self.last_page = last_page
        self.probes = []

    def __call__(self, page_index: int) -> bool:
        self.probes.append(page_index)
        return page_index <= self.last_page


class TestSearch:
    """Test cases for the integer search helpers."""

    def test_expand_upper_bound_stops_at_first_false(self):
        """Test doubling until the predicate fails."""
        bracket = expand_upper_bound(lambda n: n <= 45, left=1, right=10)
        assert bracket == Bracket(left=40, right=80, last_valid=40)

    def test_expand_upper_bound_false_at_start(self):
        """Test that a false first probe leaves the bracket untouched."""
        bracket = expand_upper_bound(lambda n: n <= 3, left=1, right=10)
        assert bracket == Bracket(left=1, right=10, last_valid=0)

    def test_expand_upper_bound_respects_ceiling(self):
        """Test that doubling stops past max_right."""
        bracket = expand_upper_bound(lambda n: True, left=1, right=10, max_right=100)
        assert bracket.right == 160
        assert bracket.last_valid == 80

    def test_last_true_returns_known_valid_when_range_is_empty(self):
        """Test the binary search on a bracket with no true index."""
        assert last_true(lambda n: False, Bracket(5, 10, 4)) == 4

    @pytest.mark.parametrize("last_page", [0, 1, 2, 9, 10, 11, 64, 999])
    def test_find_last_true(self, last_page):
        """Test the combined unbounded search."""
        assert find_last_true(lambda n: n <= last_page) == last_page


class TestLastPageDiscovery:
    """Test cases for LastPageDiscovery class."""

    @pytest.mark.parametrize("last_page", [0, 1, 7, 23, 1000])
    def test_cold_discovery_finds_last_page(self, last_page):
        """Test discovery without a hint over a monotonic oracle."""
        oracle = CountingOracle(last_page)
        assert LastPageDiscovery(oracle).discover() == last_page

    def test_cold_discovery_probe_order(self):
        """Test the probe sequence for a listing of seven pages."""
        oracle = CountingOracle(7)

        assert LastPageDiscovery(oracle).discover(hint=None) == 7
        assert oracle.probes == [10, 5, 8, 6, 7]

    def test_empty_listing_returns_zero(self):
        """Test that a listing with no events reports zero pages."""
        oracle = CountingOracle(0)
        assert LastPageDiscovery(oracle).discover() == 0

    def test_hint_fast_path_uses_two_probes(self):
        """Test that an up-to-date hint is verified with two probes."""
        oracle = CountingOracle(42)

        assert LastPageDiscovery(oracle).discover(hint=42) == 42
        assert oracle.probes == [42, 43]

    def test_stale_hint_falls_back_to_cold_discovery(self):
        """Test that a shrunken listing is rediscovered."""
        oracle = CountingOracle(12)

        assert LastPageDiscovery(oracle).discover(hint=30) == 12
        assert oracle.probes[0] == 30
        assert oracle.probes[1] == 10

    @pytest.mark.parametrize("last_page", [21, 25, 26, 40, 300])
    def test_grown_listing_searches_forward_from_hint(self, last_page):
        """Test that a listing that grew past the hint is found."""
        oracle = CountingOracle(last_page)

        assert LastPageDiscovery(oracle).discover(hint=20) == last_page
        assert oracle.probes[:3] == [20, 21, 25]

    @pytest.mark.parametrize("hint", [0, -3])
    def test_non_positive_hint_is_ignored(self, hint):
        """Test that a zero or negative hint runs cold discovery."""
        oracle = CountingOracle(7)

        assert LastPageDiscovery(oracle).discover(hint=hint) == 7
        assert oracle.probes[0] == 10

    def test_max_page_bounds_runaway_listing(self):
        """Test that a listing that never ends stops at the ceiling."""
        discovery = LastPageDiscovery(lambda n: True, max_page=1000)
        assert discovery.discover() == 1280


class TestPageOracle:
    """Test cases for PageOracle class."""

    def test_oracle_fetches_and_caches(self, fake_fetcher, site):
        """Test that each page is fetched once and stored."""
        fetcher = fake_fetcher(site(3))
        cache = ResponseCache()
        oracle = PageOracle(fetcher, cache, EventExtractor())

        assert oracle(2) is True
        assert oracle(2) is True
        assert oracle(4) is False

        assert fetcher.calls == [2, 4]
        assert oracle.fetch_count == 2
        assert 2 in cache and 4 in cache

    def test_oracle_uses_prefilled_cache(self, fake_fetcher, site):
        """Test that cached pages are not fetched."""
        pages = site(3)
        fetcher = fake_fetcher(pages)
        cache = ResponseCache()
        cache.put(1, pages[1])

        assert PageOracle(fetcher, cache, EventExtractor())(1) is True
        assert fetcher.calls == []

    def test_network_error_counts_as_no_events(self, fake_fetcher, site):
        """Test that a failed fetch answers False and is not cached."""
        fetcher = fake_fetcher(site(3), failing_pages=[2])
        cache = ResponseCache()
        oracle = PageOracle(fetcher, cache, EventExtractor())

        assert oracle(2) is False
        assert oracle.network_errors == 1
        assert 2 not in cache

    def test_discovery_with_page_oracle(self, fake_fetcher, site):
        """Test discovery end to end over fetched pages."""
        fetcher = fake_fetcher(site(7))
        oracle = PageOracle(fetcher, ResponseCache(), EventExtractor())

        assert LastPageDiscovery(oracle).discover() == 7
        assert fetcher.calls == [10, 5, 8, 6, 7]

    def test_hint_lookahead_skips_cached_empty_page(self, fake_fetcher, site):
        """Test that a cached empty page at hint + 5 is not fetched again."""
        pages = site(22)
        fetcher = fake_fetcher(pages)
        cache = ResponseCache()
        oracle = PageOracle(fetcher, cache, EventExtractor())
        cache.put(25, fetcher.fetch(25))
        fetcher.calls.clear()

        assert LastPageDiscovery(oracle).discover(hint=20) == 22
        assert 25 not in fetcher.calls

    def test_network_error_during_doubling_undercounts(self, fake_fetcher, site):
        """Test that a failure while doubling ends the upper bound search."""
        fetcher = fake_fetcher(site(30), failing_pages=[20])
        oracle = PageOracle(fetcher, ResponseCache(), EventExtractor())

        assert LastPageDiscovery(oracle).discover() == 19

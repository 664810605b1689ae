"""Shared fixtures for listing page tests."""
import pytest

from listing_pages import FakeFetcher, build_listing_page, build_site


@pytest.fixture
def listing_page():
    """Builder for list view pages."""
    return build_listing_page


@pytest.fixture
def site():
    """Builder for a whole listing, keyed by page index."""
    return build_site


@pytest.fixture
def fake_fetcher():
    """Factory for FakeFetcher instances."""
    return FakeFetcher

"""
Shared pytest fixtures for the show calendar test suite.

No test touches the network: adapters get a FakeFetcher that serves
canned HTML by URL.
"""

from typing import Dict, List, Optional, Union

import pytest

from okladiy.config import PipelineConfig
from okladiy.errors import FetchError
from okladiy.models import ShowRecord


class FakeFetcher:
    """Stands in for Fetcher. Values are page bodies or exceptions to raise."""

    def __init__(self, pages: Dict[str, Union[str, Exception]]):
        self.pages = pages
        self.calls: List[tuple] = []

    async def get_text(self, url: str, jitter: bool = True) -> str:
        self.calls.append((url, jitter))
        page = self.pages.get(url)
        if page is None:
            raise FetchError(f"HTTP 404 fetching {url}", url)
        if isinstance(page, Exception):
            raise page
        return page


@pytest.fixture
def config(tmp_path):
    """Config with no politeness delays and output under tmp_path."""
    return PipelineConfig(
        output_path=tmp_path / "docs" / "shows.json",
        overrides_path=tmp_path / "image_overrides.json",
        log_dir=None,
        jitter_min=0.0,
        jitter_max=0.0,
        batch_pause_min=0.0,
        batch_pause_max=0.0,
    )


@pytest.fixture
def fake_fetcher():
    """Return a factory: fake_fetcher({url: html_or_exception})."""
    return FakeFetcher


@pytest.fixture
def create_show():
    """
    Return a function that creates ShowRecords with sensible defaults.

    Example:
        show = create_show(title="Band A", date=None)
    """

    def _create_show(
        title: str = "Test Band",
        venue: str = "Test Venue",
        date: Optional[str] = "2026-03-14",
        **kwargs,
    ) -> ShowRecord:
        return ShowRecord(title=title, venue=venue, date=date, **kwargs)

    return _create_show

"""Adapter contract shared by every venue source.

An adapter is one named unit with one operation: `await adapter.fetch()`
returns the CandidateRecords it could find. Malformed items are skipped
inside the adapter; only failures that sink the whole source (transport,
timeout, a page that no longer has the expected structure) escape fetch().
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from urllib.parse import urljoin

from ..config import PipelineConfig
from ..errors import SourceError
from ..fetching import Fetcher, gather_in_batches
from ..models import CandidateRecord

logger = logging.getLogger("okladiy.sources")


def absolute_url(href: Optional[str], base: str) -> Optional[str]:
    """Resolve a possibly-relative href; blank becomes None."""
    if not href or not href.strip():
        return None
    return urljoin(base, href.strip())


class Adapter(ABC):
    """One source of shows."""

    name: str = ""

    def __init__(self, config: PipelineConfig, fetcher: Optional[Fetcher] = None):
        self.config = config
        self.http = fetcher or Fetcher(config)

    @abstractmethod
    async def fetch(self) -> List[CandidateRecord]:
        """Fetch and extract all upcoming shows from this source."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class SingleDocumentAdapter(Adapter):
    """One page holds every show with all fields present."""

    url: str = ""

    async def fetch(self) -> List[CandidateRecord]:
        html = await self.http.get_text(self.url)
        records = list(self.parse(html))
        if not records:
            logger.warning(f"{self.name}: 0 shows parsed — page structure may have changed")
        return records

    @abstractmethod
    def parse(self, html: str) -> Iterable[CandidateRecord]:
        """Extract records from the fetched page."""


class ListingDetailAdapter(Adapter):
    """A listing page yields stubs; each stub's detail page fills it in.

    Stubs are CandidateRecords whose event_url is the detail page. Detail
    pages are fetched in concurrent batches with a pause between batches.
    A detail page that fails to load or parse falls back to degrade(stub).
    If every detail page fails and degrade() keeps nothing, the source fails.
    """

    async def fetch(self) -> List[CandidateRecord]:
        stubs = await self.fetch_listing()
        if not stubs:
            logger.warning(f"{self.name}: listing had no upcoming shows")
            return []

        pages = await gather_in_batches(
            stubs,
            self._fetch_detail,
            batch_size=self.config.detail_batch_size,
            pause=(self.config.batch_pause_min, self.config.batch_pause_max),
        )

        records: List[CandidateRecord] = []
        failures = [page for page in pages if isinstance(page, Exception)]
        for stub, page in zip(stubs, pages):
            if isinstance(page, Exception):
                logger.debug(f"{self.name}: detail fetch failed for {stub.event_url}: {page}")
                records.extend(self.degrade(stub))
                continue
            try:
                records.extend(self.parse_detail(stub, page))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.debug(f"{self.name}: detail parse failed for {stub.event_url}: {e}")
                records.extend(self.degrade(stub))

        if len(failures) == len(stubs) and not records:
            raise SourceError(f"All {len(stubs)} detail pages failed, last: {failures[-1]}")
        return records

    async def _fetch_detail(self, stub: CandidateRecord) -> str:
        # Batches are paced already, so no per-request jitter here
        return await self.http.get_text(stub.event_url, jitter=False)

    @abstractmethod
    async def fetch_listing(self) -> List[CandidateRecord]:
        """Return stub records, each with event_url set to its detail page."""

    @abstractmethod
    def parse_detail(self, stub: CandidateRecord, html: str) -> Iterable[CandidateRecord]:
        """Return the record(s) built from the stub plus its detail page."""

    def degrade(self, stub: CandidateRecord) -> Iterable[CandidateRecord]:
        """What to keep when the detail page is unavailable."""
        return [stub]

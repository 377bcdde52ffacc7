"""HTTP fetching shared by all adapters.

requests is blocking, so each call runs in a worker thread via
asyncio.to_thread; the event loop only ever waits on those threads and
on the politeness sleeps.
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, List, Sequence, TypeVar, Union

import requests

from .config import HEADERS, PipelineConfig
from .errors import FetchError

logger = logging.getLogger("okladiy.fetching")

T = TypeVar("T")
R = TypeVar("R")


async def random_pause(low: float, high: float) -> None:
    """Sleep a random number of seconds in [low, high]."""
    if high <= 0:
        return
    await asyncio.sleep(random.uniform(low, high))


class Fetcher:
    """Fetches pages with a polite User-Agent, a timeout, and jitter."""

    def __init__(self, config: PipelineConfig):
        self.timeout = config.request_timeout
        self.jitter = (config.jitter_min, config.jitter_max)

    async def get_text(self, url: str, jitter: bool = True) -> str:
        """Return the response body, or raise FetchError on any failure.

        Pass jitter=False when the caller already paces its own requests.
        """
        if jitter:
            await random_pause(*self.jitter)
        # requests' timeout bounds each socket read, not the whole download
        try:
            return await asyncio.wait_for(asyncio.to_thread(self._get, url), self.timeout)
        except asyncio.TimeoutError:
            logger.debug(f"Gave up on {url} after {self.timeout:g}s")
            raise FetchError(f"Timed out after {self.timeout:g}s fetching {url}", url) from None

    def _get(self, url: str) -> str:
        try:
            response = requests.get(url, headers=HEADERS, timeout=self.timeout, allow_redirects=True)
        except requests.exceptions.Timeout:
            raise FetchError(f"Timed out after {self.timeout:g}s fetching {url}", url)
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Request failed for {url}: {str(e)[:120]}", url)

        if not response.ok:
            logger.debug(f"{url} answered {response.status_code}")
            raise FetchError(f"HTTP {response.status_code} fetching {url}", url)
        return response.text


async def gather_in_batches(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    batch_size: int,
    pause: Sequence[float] = (0.0, 0.0),
) -> List[Union[R, BaseException]]:
    """Run worker over items in fixed-size concurrent batches.

    Every item gets a result or the exception it raised, at the same index
    as the item, regardless of completion order. Waits a random pause
    between batches (not after the last one).
    """
    results: List[Union[R, BaseException]] = []
    for start in range(0, len(items), batch_size):
        batch = items[start:start + batch_size]
        results.extend(await asyncio.gather(*(worker(item) for item in batch), return_exceptions=True))
        if start + batch_size < len(items):
            await random_pause(*pause)
    return results

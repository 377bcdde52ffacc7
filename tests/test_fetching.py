"""Tests for the HTTP layer and batch helper."""

import asyncio
import time
from dataclasses import replace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import requests

from okladiy.errors import FetchError
from okladiy.fetching import Fetcher, gather_in_batches


def _response(status=200, text="<html></html>"):
    response = MagicMock()
    response.ok = 200 <= status < 300
    response.status_code = status
    response.text = text
    return response


class TestFetcher:

    @pytest.mark.asyncio
    async def test_returns_body(self, config):
        with patch("okladiy.fetching.requests.get", return_value=_response(text="hello")) as get:
            body = await Fetcher(config).get_text("https://example.com")

        assert body == "hello"
        _, kwargs = get.call_args
        assert kwargs["timeout"] == config.request_timeout
        assert "okladiy-scraper" in kwargs["headers"]["User-Agent"]

    @pytest.mark.asyncio
    async def test_http_error(self, config):
        with patch("okladiy.fetching.requests.get", return_value=_response(status=503)):
            with pytest.raises(FetchError, match="HTTP 503"):
                await Fetcher(config).get_text("https://example.com")

    @pytest.mark.asyncio
    async def test_timeout(self, config):
        with patch("okladiy.fetching.requests.get", side_effect=requests.exceptions.ReadTimeout()):
            with pytest.raises(FetchError, match="Timed out after 15s") as excinfo:
                await Fetcher(config).get_text("https://example.com/slow")

        assert excinfo.value.url == "https://example.com/slow"

    @pytest.mark.asyncio
    async def test_slow_download_bounded_by_timeout(self, config):
        def trickle(*args, **kwargs):
            time.sleep(0.5)
            return _response(text="late")

        fetcher = Fetcher(replace(config, request_timeout=0.1))
        started = time.monotonic()
        with patch("okladiy.fetching.requests.get", side_effect=trickle):
            with pytest.raises(FetchError, match="Timed out after 0.1s") as excinfo:
                await fetcher.get_text("https://example.com/slow")

        assert time.monotonic() - started < 0.4
        assert excinfo.value.url == "https://example.com/slow"

    @pytest.mark.asyncio
    async def test_transport_error(self, config):
        with patch("okladiy.fetching.requests.get", side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(FetchError, match="Request failed"):
                await Fetcher(config).get_text("https://example.com")

    @pytest.mark.asyncio
    async def test_jitter_can_be_suppressed(self, config):
        with patch("okladiy.fetching.requests.get", return_value=_response()), \
                patch("okladiy.fetching.random_pause", new_callable=AsyncMock) as pause:
            await Fetcher(config).get_text("https://example.com", jitter=False)

        pause.assert_not_called()


class TestGatherInBatches:

    @pytest.mark.asyncio
    async def test_results_are_positional(self):
        async def worker(n):
            # Later items finish first
            await asyncio.sleep(0.01 * (5 - n))
            if n == 2:
                raise ValueError("bad item")
            return n * 10

        results = await gather_in_batches([0, 1, 2, 3, 4], worker, batch_size=2)

        assert results[0] == 0
        assert results[1] == 10
        assert isinstance(results[2], ValueError)
        assert results[3:] == [30, 40]

    @pytest.mark.asyncio
    async def test_batch_size_bounds_concurrency(self):
        running = 0
        peak = 0

        async def worker(n):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
            return n

        await gather_in_batches(list(range(20)), worker, batch_size=8)

        assert peak == 8

    @pytest.mark.asyncio
    async def test_pauses_between_batches_only(self):
        async def worker(n):
            return n

        with patch("okladiy.fetching.random_pause", new_callable=AsyncMock) as pause:
            await gather_in_batches(list(range(5)), worker, batch_size=2, pause=(0.4, 0.6))

        # 3 batches -> 2 pauses
        assert pause.call_count == 2
        pause.assert_called_with(0.4, 0.6)

    @pytest.mark.asyncio
    async def test_empty(self):
        async def worker(n):
            return n

        assert await gather_in_batches([], worker, batch_size=8) == []

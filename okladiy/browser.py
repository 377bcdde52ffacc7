"""Browser automation helpers for JavaScript-heavy sites."""

import logging

from playwright.async_api import async_playwright

from .config import USER_AGENT
from .errors import FetchError

logger = logging.getLogger("okladiy.browser")

# Asset requests we never need; the HTML is all we read.
BLOCKED_ASSETS = "**/*.{png,jpg,jpeg,gif,webp,svg,woff,woff2,ttf,css}"


async def render_page(url: str, timeout: float = 30.0, settle_ms: int = 1500) -> str:
    """
    Load a page in headless Chromium and return the rendered HTML.

    Args:
        url: The URL to fetch
        timeout: Page load timeout in seconds
        settle_ms: Extra wait after load for client-side rendering

    Raises:
        FetchError: if the browser can't load the page
    """
    logger.debug(f"Rendering {url} in headless Chromium")
    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(
                headless=True,
                args=[
                    "--disable-blink-features=AutomationControlled",
                    "--no-first-run",
                    "--no-default-browser-check",
                ],
            )
            try:
                page = await browser.new_page(user_agent=USER_AGENT)
                await page.route(BLOCKED_ASSETS, lambda route: route.abort())
                await page.goto(url, wait_until="load", timeout=timeout * 1000)
                await page.wait_for_timeout(settle_ms)
                return await page.content()
            finally:
                await browser.close()
    except Exception as e:
        # Playwright raises its own Error/TimeoutError types from many places
        raise FetchError(f"Browser error fetching {url}: {str(e)[:100]}", url) from e

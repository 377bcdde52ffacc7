"""The Vanguard (Tulsa, OK) — Webflow site.

Listing page (/shows), one .ec-col-item.w-dyn-item per show:
  .title > div          — title, sometimes "SOLD OUT | Title"
  .start-date > div     — "February 26, 2026"
  a.webflow-link        — href="/shows/slug"

Detail page:
  #event-data[data-price]        — "$23.04"
  #event-data[data-description]  — performers, comma-separated
  .uui-event_time-wrapper        — "Doors: 7:00 pm / Show: 8:00 pm"
"""

import logging
import re
from dataclasses import replace
from typing import List

from bs4 import BeautifulSoup

from ..date_utils import extract_age_limit, extract_show_time, parse_date, today_local
from ..models import CandidateRecord
from ..normalize import strip_status_prefix
from .base import ListingDetailAdapter, absolute_url

logger = logging.getLogger("okladiy.sources.vanguard")

BASE_URL = "https://www.thevanguardtulsa.com"
EVENTS_URL = f"{BASE_URL}/shows"
VENUE_NAME = "The Vanguard"

DETAIL_PRICE = re.compile(r"\$[\d.]+")


class VanguardAdapter(ListingDetailAdapter):
    name = "vanguard"

    async def fetch_listing(self) -> List[CandidateRecord]:
        html = await self.http.get_text(EVENTS_URL)
        return self.parse_listing(html)

    def parse_listing(self, html: str) -> List[CandidateRecord]:
        soup = BeautifulSoup(html, "html.parser")
        today = today_local().isoformat()
        stubs = []

        for item in soup.select(".ec-col-item.w-dyn-item"):
            try:
                title_el = item.select_one(".title > div")
                title = strip_status_prefix(title_el.get_text(strip=True)) if title_el else ""
                if not title:
                    continue

                date_el = item.select_one(".start-date > div")
                date = parse_date(date_el.get_text(strip=True)) if date_el else None
                # Past shows stay on the listing; skip them before paying for a detail fetch
                if not date or date < today:
                    continue

                link = item.select_one("a.webflow-link")
                stubs.append(CandidateRecord(
                    title=title,
                    venue=VENUE_NAME,
                    venue_url=BASE_URL,
                    date=date,
                    event_url=absolute_url(link.get("href") if link else None, BASE_URL) or EVENTS_URL,
                    tags=[],
                ))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.debug(f"Skipping malformed listing item: {e}")
                continue

        return stubs

    def parse_detail(self, stub: CandidateRecord, html: str) -> List[CandidateRecord]:
        soup = BeautifulSoup(html, "html.parser")

        data = soup.select_one("#event-data")
        price_raw = (data.get("data-price") or "").strip() if data else ""
        description = (data.get("data-description") or "").strip() if data else ""

        time_el = soup.select_one(".uui-event_time-wrapper")
        body = soup.body.get_text(" ") if soup.body else soup.get_text(" ")

        return [replace(
            stub,
            # A bare "Doors" time is not the show time
            time=extract_show_time(time_el.get_text(" ") if time_el else None, fallback=False),
            price=price_raw if DETAIL_PRICE.search(price_raw) else None,
            description=description or None,
            age_limit=extract_age_limit(body),
        )]

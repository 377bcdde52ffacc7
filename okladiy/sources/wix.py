"""89th Street OKC — Wix Thunderbolt site.

All event data is embedded in a <script id="wix-warmup-data"> JSON blob
once the page has rendered. The homepage carries the full upcoming list
(the /events page only shows a single featured event), at:

  appsWarmupData[WIX_EVENTS_APP_ID][<widget>].events.events[]
  appsWarmupData[WIX_EVENTS_APP_ID][<widget>].dates.events{<id>}

dates.events[id].startDateISOFormatNotUTC is already venue-local.
"""

import json
import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from ..browser import render_page
from ..date_utils import extract_age_limit, iso_date
from ..errors import DocumentShapeError
from ..models import CandidateRecord
from .base import Adapter
from .jsonld import text_value

logger = logging.getLogger("okladiy.sources.wix")

EVENTS_URL = "https://www.89thstreetokc.com/"
VENUE_NAME = "89th Street OKC"
VENUE_URL = "https://www.89thstreetokc.com"

# Wix Events app ID, stable across Wix sites
WIX_EVENTS_APP_ID = "140603ad-af8d-84a5-2c80-a0f60cb47351"
WIX_MEDIA_URI = re.compile(r"^wix:image://v1/([^/]+)/")


def wix_image_url(raw) -> Optional[str]:
    """mainImage is {url: …}; older payloads use a wix:image://v1/<id>/… URI."""
    if isinstance(raw, dict):
        return text_value(raw.get("url"))
    if isinstance(raw, str):
        match = WIX_MEDIA_URI.match(raw)
        if match:
            return f"https://static.wixstatic.com/media/{match.group(1)}/v1/fit/w_300,h_300/img.jpg"
    return None


class EightyNinthStreetAdapter(Adapter):
    name = "89thstreet"

    async def fetch(self) -> List[CandidateRecord]:
        html = await render_page(EVENTS_URL, timeout=self.config.render_timeout)
        return self.parse(html)

    def parse(self, html: str) -> List[CandidateRecord]:
        soup = BeautifulSoup(html, "html.parser")
        script = soup.find("script", id="wix-warmup-data")
        if script is None:
            raise DocumentShapeError("wix-warmup-data block not found on page")
        try:
            warmup = json.loads(script.string or "")
        except json.JSONDecodeError as e:
            raise DocumentShapeError(f"wix-warmup-data is not valid JSON: {e}")

        app_data = (warmup.get("appsWarmupData") or {}).get(WIX_EVENTS_APP_ID) or {}
        events, date_map = [], {}
        # First widget that has an events array
        for widget in app_data.values():
            candidate = ((widget or {}).get("events") or {}).get("events")
            if isinstance(candidate, list) and candidate:
                events = candidate
                date_map = ((widget.get("dates") or {}).get("events")) or {}
                break

        records = []
        for event in events:
            try:
                record = self._event_to_record(event, date_map)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.debug(f"Skipping malformed Wix event: {e}")
                continue
            if record:
                records.append(record)
        return records

    def _event_to_record(self, event: dict, date_map: dict) -> Optional[CandidateRecord]:
        if not event.get("id"):
            return None

        date_info = date_map.get(event["id"]) or {}
        local_iso = (
            date_info.get("startDateISOFormatNotUTC")
            or ((event.get("scheduling") or {}).get("config") or {}).get("startDate")
        )
        date = iso_date(local_iso)

        # Prefer the external ticketing URL; fall back to the Wix event page
        external = text_value(((event.get("registration") or {}).get("external") or {}).get("registration"))
        slug = text_value(event.get("slug"))
        event_url = external or (f"{VENUE_URL}/events/{slug}" if slug else VENUE_URL)

        description = (event.get("description") or "").strip()

        return CandidateRecord(
            title=(event.get("title") or "").strip(),
            venue=VENUE_NAME,
            venue_url=VENUE_URL,
            date=date,
            time=text_value(date_info.get("startTime")),
            # Price isn't in the warm-up data; it's on the ticketing page
            price=None,
            description=description or None,
            event_url=event_url,
            # 89th Street is an all-ages room unless a show says otherwise
            age_limit=extract_age_limit(description) or "All ages",
            tags=[],
            image_url=wix_image_url(event.get("mainImage") or event.get("image")),
        )

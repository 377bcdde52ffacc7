"""Squarespace event collections (server-rendered).

Squarespace marks upcoming vs past events with CSS modifier classes:

  <article class="eventlist-event eventlist-event--upcoming">
    <a href="/events/slug" class="eventlist-column-thumbnail"><img src="…"></a>
    <h1 class="eventlist-title">
      <a href="/events/slug" class="eventlist-title-link">Title</a>
    </h1>
    <ul class="eventlist-meta">
      <li class="eventlist-meta-item eventlist-meta-date">
        <time class="event-date" datetime="2026-03-14">Friday, March 14, 2026</time>
      </li>
      <li class="eventlist-meta-item eventlist-meta-time">
        <time class="event-time-localized-start">9:00 PM</time>
      </li>
      <li class="eventlist-meta-item">18+ · 21+ to drink</li>
    </ul>
    <div class="eventlist-excerpt"><p>Tickets $10</p></div>
  </article>
"""

import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from ..date_utils import extract_age_limit, iso_date
from ..models import CandidateRecord
from .base import SingleDocumentAdapter, absolute_url

logger = logging.getLogger("okladiy.sources.squarespace")

EXCERPT_PRICE = re.compile(r"(?:tickets?\s*)?\$\s*(\d+(?:\.\d{1,2})?)", re.IGNORECASE)
THUMBNAIL_FORMAT = re.compile(r"\?format=\w+$")


class SquarespaceAdapter(SingleDocumentAdapter):
    """Squarespace event list.

    With read_excerpt=True the excerpt text is used as the description and
    searched for a price and age limit (some venues only put them there).
    """

    def __init__(self, config, fetcher=None, *, name, base_url, events_path, venue_name, read_excerpt=False):
        super().__init__(config, fetcher)
        self.name = name
        self.base_url = base_url
        self.url = f"{base_url}{events_path}"
        self.venue_name = venue_name
        self.read_excerpt = read_excerpt

    def parse(self, html: str) -> List[CandidateRecord]:
        soup = BeautifulSoup(html, "html.parser")
        records = []

        for article in soup.select(".eventlist-event--upcoming"):
            try:
                record = self._parse_article(article)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.debug(f"{self.name}: skipping malformed event: {e}")
                continue
            if record:
                records.append(record)

        return records

    def _parse_article(self, article) -> Optional[CandidateRecord]:
        title_el = article.select_one(".eventlist-title-link") or article.select_one(".eventlist-title")
        title = title_el.get_text(strip=True) if title_el else ""
        if not title:
            return None

        link = article.select_one(".eventlist-title-link") or article.select_one("a.eventlist-column-thumbnail")
        event_url = absolute_url(link.get("href") if link else None, self.base_url) or self.url

        # The datetime attribute is reliable; the visible text is not
        date_el = article.select_one("time.event-date")
        date_attr = (date_el.get("datetime") or "").strip() if date_el else ""
        date = iso_date(date_attr)

        time_el = article.select_one(".event-time-localized-start")
        time = time_el.get_text(strip=True) if time_el else None

        img = article.select_one(".eventlist-column-thumbnail img")
        img_src = (img.get("src") or img.get("data-src")) if img else None
        image = THUMBNAIL_FORMAT.sub("?format=1000w", img_src) if img_src else None

        age_limit = None
        for item in article.select(".eventlist-meta-item"):
            age_limit = extract_age_limit(item.get_text(" ", strip=True))
            if age_limit:
                break

        price = None
        description = None
        if self.read_excerpt:
            excerpt_el = article.select_one(".eventlist-excerpt")
            excerpt = excerpt_el.get_text(" ") if excerpt_el else ""
            match = EXCERPT_PRICE.search(excerpt)
            price = f"${match.group(1)}" if match else None
            description = excerpt
            age_limit = age_limit or extract_age_limit(excerpt)

        return CandidateRecord(
            title=title,
            venue=self.venue_name,
            venue_url=self.base_url,
            date=date,
            time=time,
            price=price,
            description=description,
            event_url=event_url,
            age_limit=age_limit,
            tags=[],
            image_url=image,
        )

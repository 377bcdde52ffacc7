"""Prekindle ticketing pages.

Several venues whose own sites are JS-rendered sell through Prekindle,
which serves server-rendered HTML:

  - /events/<venue> pages embed every upcoming event as JSON-LD
    (name, startDate, offers, performer, image) but carry no show time.
  - The same pages, and the organizer grid widget, render .pk-eachevent
    cards whose .pk-times line has "Doors 7:00pm, Start 8:00pm".
"""

import logging
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from ..date_utils import extract_show_time, parse_date
from ..models import CandidateRecord
from .base import SingleDocumentAdapter, absolute_url
from .jsonld import image_url, iter_jsonld_events, offer_price, performers_text, start_date, text_value

logger = logging.getLogger("okladiy.sources.prekindle")

PREKINDLE_URL = "https://www.prekindle.com"


def title_key(title: str) -> str:
    """Join key between the JSON-LD and card renderings of one listing."""
    return title.strip().lower()


class _PrekindleVenue(SingleDocumentAdapter):

    def __init__(self, config, fetcher=None, *, name, url, venue_name, venue_url):
        super().__init__(config, fetcher)
        self.name = name
        self.url = url
        self.venue_name = venue_name
        self.venue_url = venue_url


class PrekindleAdapter(_PrekindleVenue):
    """Prekindle /events/<venue> page, read from its JSON-LD."""

    def parse(self, html: str) -> List[CandidateRecord]:
        soup = BeautifulSoup(html, "html.parser")
        times = self.time_lookup(soup)
        records = []

        for event in iter_jsonld_events(soup):
            try:
                name = event.get("name")
                date = start_date(event)
                if not isinstance(name, str) or not name.strip() or not date:
                    continue

                records.append(CandidateRecord(
                    title=name.strip(),
                    venue=self.venue_name,
                    venue_url=self.venue_url,
                    date=date,
                    time=times.get(title_key(name)),
                    price=offer_price(event.get("offers")),
                    description=performers_text(event.get("performer")),
                    event_url=text_value(event.get("url")) or self.url,
                    tags=[],
                    image_url=image_url(event.get("image")),
                ))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.debug(f"{self.name}: skipping malformed event: {e}")
                continue

        return records

    def time_lookup(self, soup: BeautifulSoup) -> Dict[str, Optional[str]]:
        """JSON-LD on Prekindle has no show time; nothing to join."""
        return {}


class PrekindleTimedAdapter(PrekindleAdapter):
    """Prekindle page where the time is joined in from the HTML cards.

    The cards and the JSON-LD describe the same listing; they are matched
    on title_key(). A record whose title has no card keeps time=None.
    """

    def time_lookup(self, soup: BeautifulSoup) -> Dict[str, Optional[str]]:
        times = {}
        for card in soup.select(".pk-eachevent"):
            headline = card.select_one(".pk-headline")
            key = title_key(headline.get_text()) if headline else ""
            if not key:
                continue
            times_el = card.select_one(".pk-times div")
            times[key] = extract_show_time(times_el.get_text(strip=True) if times_el else None)
        return times


class PrekindleWidgetAdapter(_PrekindleVenue):
    """Prekindle organizer grid widget: cards only, no JSON-LD.

    Each .pk-eachevent card:
      .pk-headline          — title
      .pk-date-day          — "Thursday"
      .pk-date              — "February 26"  (no year)
      .pk-times > div       — "Doors 7:00pm, Start 8:00pm"
      a.pk-title-link[href] — Prekindle event URL
    """

    def parse(self, html: str) -> List[CandidateRecord]:
        soup = BeautifulSoup(html, "html.parser")
        records = []

        for card in soup.select(".pk-eachevent"):
            try:
                headline = card.select_one(".pk-headline")
                title = headline.get_text(strip=True) if headline else ""
                if not title:
                    continue

                day_el = card.select_one(".pk-date-day")
                date_el = card.select_one(".pk-date")
                day_name = day_el.get_text(strip=True) if day_el else ""
                date_text = date_el.get_text(strip=True) if date_el else ""
                combined = f"{day_name}, {date_text}" if day_name and date_text else date_text

                times_el = card.select_one(".pk-times div")
                link = card.select_one("a.pk-title-link")
                img = card.select_one(".pk-image img")

                records.append(CandidateRecord(
                    title=title,
                    venue=self.venue_name,
                    venue_url=self.venue_url,
                    date=parse_date(combined),
                    time=extract_show_time(times_el.get_text(strip=True) if times_el else None),
                    event_url=absolute_url(link.get("href") if link else None, PREKINDLE_URL) or self.venue_url,
                    tags=[],
                    image_url=img.get("src") if img else None,
                ))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.debug(f"{self.name}: skipping malformed card: {e}")
                continue

        return records

"""Helpers for Schema.org Event data embedded as JSON-LD.

Prekindle and most WordPress event plugins put the event list in
<script type="application/ld+json"> blocks. A block may hold a single
object, an array, or an {"@graph": [...]} wrapper.
"""

import html as html_lib
import json
import logging
import math
import re
from datetime import date
from typing import Any, Iterator, Optional

from bs4 import BeautifulSoup

logger = logging.getLogger("okladiy.sources.jsonld")

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def iter_jsonld_events(soup: BeautifulSoup, event_types: Optional[set] = None) -> Iterator[dict]:
    """Yield every JSON object from the page's JSON-LD blocks.

    If event_types is given, only objects whose @type is in it are yielded.
    Blocks that aren't valid JSON are skipped.
    """
    for script in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(script.string or "")
        except (json.JSONDecodeError, TypeError):
            logger.debug("Skipping unparseable JSON-LD block")
            continue

        if isinstance(data, list):
            items = data
        elif isinstance(data, dict) and "@graph" in data:
            items = data["@graph"]
        else:
            items = [data]

        for item in items:
            if not isinstance(item, dict):
                continue
            if event_types and item.get("@type") not in event_types:
                continue
            yield item


def start_date(event: dict) -> Optional[str]:
    """ISO date part of startDate ('2026-03-14T20:00:00+0000' -> '2026-03-14').

    Anything that isn't a valid YYYY-MM-DD date gives None.
    """
    raw = event.get("startDate")
    if not isinstance(raw, str):
        return None
    day = raw.split("T")[0].strip()
    if not ISO_DATE.match(day):
        return None
    try:
        return date.fromisoformat(day).isoformat()
    except ValueError:
        return None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def offer_price(offers: Any) -> Optional[str]:
    """Format an Offer/AggregateOffer as '$15' or '$10–$20'.

    A price of 0 usually means "not set" on these sites, so it is treated
    as unknown rather than free.
    """
    if isinstance(offers, list):
        offers = offers[0] if offers else None
    if not isinstance(offers, dict):
        return None

    try:
        low = float(offers.get("lowPrice") or offers.get("price") or 0)
        high = float(offers.get("highPrice") or 0)
    except (TypeError, ValueError):
        return None

    if low <= 0:
        return None
    if high > 0 and high != low:
        return f"${_round_half_up(low)}–${_round_half_up(high)}"
    return f"${_round_half_up(low)}"


def performers_text(performer: Any) -> Optional[str]:
    """Join performer names ('A, B, C'); accepts strings, objects or a mix."""
    if performer is None:
        return None
    if not isinstance(performer, list):
        performer = [performer]
    names = []
    for p in performer:
        name = p.get("name") if isinstance(p, dict) else p
        if isinstance(name, str) and name.strip():
            names.append(name.strip())
    return ", ".join(names) or None


def image_url(image: Any) -> Optional[str]:
    """Image may be a URL string, a list of them, or an ImageObject."""
    if isinstance(image, list):
        image = image[0] if image else None
    if isinstance(image, dict):
        image = image.get("url")
    if isinstance(image, str) and image.strip():
        return image.strip()
    return None


def text_value(value: Any) -> Optional[str]:
    """The value if it is a non-blank string, else None. JSON fields are untyped."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def decode_title(name: str) -> str:
    """WordPress stores titles with HTML entities (&#8211; etc.)."""
    return html_lib.unescape(name).strip()

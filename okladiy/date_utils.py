"""Shared date and time parsing utilities.

Used by every adapter. Nothing here raises on bad input: an unparseable
date is None, which downstream treats as "date unknown".
"""

import re
from datetime import date, datetime
from typing import Optional

from .config import LOCAL_TZ

ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")

# Tried in order, first match wins. Year-less formats get the reference
# year appended before parsing (see parse_date).
DATE_FORMATS = [
    ("%Y-%m-%d", True),
    ("%m/%d/%Y", True),          # "03/14/2026", "3/14/2026"
    ("%B %d, %Y", True),         # "March 14, 2026"
    ("%b %d, %Y", True),         # "Mar 14, 2026"
    ("%A, %B %d, %Y", True),     # "Saturday, March 14, 2026"
    ("%A, %b %d, %Y", True),
    ("%a, %B %d, %Y", True),
    ("%a, %b %d, %Y", True),
    ("%A, %B %d", False),        # "Thursday, February 26"
    ("%A, %b %d", False),
    ("%a, %B %d", False),        # "Thu, February 26"
    ("%a, %b %d", False),        # "Thu, Feb 26"
    ("%B %d", False),            # "February 26"
    ("%b %d", False),            # "Feb 26"
    ("%a %b %d", False),         # "Thu Feb 26"
    ("%m/%d", False),            # "2/26"
]

TIME_TOKEN = re.compile(r"(\d{1,2}:\d{2})\s*([ap]m)", re.IGNORECASE)
START_TIME = re.compile(r"(?:Start|Show)[:\s]+(\d{1,2}:\d{2})\s*([ap]m)", re.IGNORECASE)
ISO_TIME = re.compile(r"T(\d{2}):(\d{2})")
AGE_LIMIT = re.compile(r"\b(all\s*ages?|18\+|21\+)", re.IGNORECASE)


def today_local() -> date:
    """Today's calendar date at the venues."""
    return datetime.now(LOCAL_TZ).date()


def iso_date(raw) -> Optional[str]:
    """Validate an ISO calendar date ("2026-03-14"); anything else is None."""
    if not isinstance(raw, str) or not ISO_PREFIX.match(raw.strip()):
        return None
    try:
        return date.fromisoformat(raw.strip()[:10]).isoformat()
    except ValueError:
        return None


def parse_date(raw: Optional[str], today: Optional[date] = None) -> Optional[str]:
    """Parse a messy date string into an ISO date string ("2026-03-14").

    A format without a year resolves to the reference year, rolled forward
    one year if that lands before today, since venues only post upcoming
    shows. Returns None if nothing matches.
    """
    if not raw:
        return None
    cleaned = re.sub(r"\s+", " ", raw.strip())
    if not cleaned:
        return None
    today = today or today_local()

    if ISO_PREFIX.match(cleaned):
        try:
            return date.fromisoformat(cleaned[:10]).isoformat()
        except ValueError:
            return None

    for fmt, has_year in DATE_FORMATS:
        try:
            if has_year:
                parsed = datetime.strptime(cleaned, fmt).date()
            else:
                parsed = datetime.strptime(f"{cleaned} {today.year}", f"{fmt} %Y").date()
        except ValueError:
            continue

        if not has_year and parsed < today:
            try:
                parsed = parsed.replace(year=parsed.year + 1)
            except ValueError:
                # Feb 29 with no leap day next year
                return None
        return parsed.isoformat()

    return None


def iso_time_to_display(iso_str: Optional[str]) -> Optional[str]:
    """'2026-03-01T19:30:00-0500' -> '7:30 PM'; '…T20:00…' -> '8 PM'.

    The clock time is taken as written (venue-local), with no timezone
    conversion. Returns None when there is no time component.
    """
    if not iso_str:
        return None
    match = ISO_TIME.search(iso_str)
    if not match:
        return None
    hour = int(match.group(1))
    minute = match.group(2)
    ampm = "PM" if hour >= 12 else "AM"
    hour = hour % 12 or 12
    return f"{hour} {ampm}" if minute == "00" else f"{hour}:{minute} {ampm}"


def extract_show_time(text: Optional[str], fallback: bool = True) -> Optional[str]:
    """Pull the show start out of strings like 'Doors 7:00pm, Start 8:00pm'.

    Prefers the 'Start'/'Show' time. With fallback, the first time found
    is used when there is no labelled start; without it, that gives None.
    """
    if not text:
        return None
    match = START_TIME.search(text) or (TIME_TOKEN.search(text) if fallback else None)
    if not match:
        return None
    return f"{match.group(1)} {match.group(2).upper()}"


def extract_age_limit(text: Optional[str]) -> Optional[str]:
    """Find 'all ages', '18+' or '21+' in free text."""
    if not text:
        return None
    match = AGE_LIMIT.search(text)
    return match.group(1) if match else None

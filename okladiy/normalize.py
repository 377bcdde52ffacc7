"""Show normalization.

Turns adapter output into ShowRecords. Everything in here is pure and
total: bad input degrades to a default or to None, never to an exception.
"""

import re
from typing import Optional

from .date_utils import iso_date
from .models import UNKNOWN_SHOW, UNKNOWN_VENUE, CandidateRecord, ShowRecord

FREE_WORDS = {"free", "free admission", "0", "$0"}

STATUS_PREFIX = re.compile(
    r"^(?:SOLD\s*OUT|CANCELL?ED|POSTPONED)\s*[|–-]\s*",
    re.IGNORECASE,
)

AGE_LIMITS = {
    "all ages": "All ages",
    "all age": "All ages",
    "allages": "All ages",
    "18+": "18+",
    "21+": "21+",
}


def clean_text(text: Optional[str]) -> Optional[str]:
    """Trim; blank or non-string becomes None."""
    if not isinstance(text, str):
        return None
    text = text.strip()
    return text or None


def collapse_whitespace(text: Optional[str]) -> Optional[str]:
    """Trim and squeeze internal whitespace runs to one space."""
    if not isinstance(text, str):
        return None
    return clean_text(re.sub(r"\s+", " ", text))


def strip_status_prefix(title: str) -> str:
    """'SOLD OUT | Band' -> 'Band'; 'Cancelled - Band' -> 'Band'."""
    return STATUS_PREFIX.sub("", title.strip()).strip()


def normalize_price(raw: Optional[str]) -> Optional[str]:
    """Normalize price strings to a consistent format.

    "15.00" -> "$15", "free" -> "Free", "$10-$15" -> "$10–$15".
    Missing or blank stays None; it is never guessed to be free.
    """
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text:
        return None
    if text.lower() in FREE_WORDS:
        return "Free"

    text = re.sub(r"\.00\b", "", text)
    text = text.replace("-", "–")
    return re.sub(r"^\$?(\d)", r"$\1", text)


def normalize_age_limit(raw: Optional[str]) -> Optional[str]:
    """Map 'all ages' / 'ALL AGES' / '18+' to canonical spelling.

    Anything else is kept as-is (trimmed), since the set is open.
    """
    text = collapse_whitespace(raw)
    if text is None:
        return None
    return AGE_LIMITS.get(text.lower(), text)


def normalize_show(candidate: CandidateRecord) -> ShowRecord:
    """Fill defaults so every show is well-formed."""
    title = clean_text(candidate.title)
    if title:
        title = strip_status_prefix(title) or title
    tags = candidate.tags if isinstance(candidate.tags, (list, tuple)) else ()

    return ShowRecord(
        title=title or UNKNOWN_SHOW,
        venue=clean_text(candidate.venue) or UNKNOWN_VENUE,
        venue_url=clean_text(candidate.venue_url),
        date=iso_date(candidate.date),
        time=clean_text(candidate.time),
        price=normalize_price(candidate.price),
        description=collapse_whitespace(candidate.description),
        event_url=clean_text(candidate.event_url),
        age_limit=normalize_age_limit(candidate.age_limit),
        tags=tuple(str(t) for t in tags),
        image_url=clean_text(candidate.image_url),
    )

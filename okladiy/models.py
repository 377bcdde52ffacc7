"""Data models for show records and pipeline output."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

UNKNOWN_SHOW = "Unknown Show"
UNKNOWN_VENUE = "Unknown Venue"

DedupKey = Tuple[str, str, str]


@dataclass(frozen=True)
class CandidateRecord:
    """A best-effort, unnormalized show as an adapter found it.

    Every field is optional. None means the source didn't say; an empty
    string means it said nothing useful. Both normalize the same way, but
    adapters keep the distinction so enrichment can tell them apart.
    """
    title: Optional[str] = None
    venue: Optional[str] = None
    venue_url: Optional[str] = None
    date: Optional[str] = None  # ISO calendar date, e.g. "2026-03-14"
    time: Optional[str] = None  # venue-local display text, e.g. "8:00 PM"
    price: Optional[str] = None  # raw price text, normalized later
    description: Optional[str] = None
    event_url: Optional[str] = None
    age_limit: Optional[str] = None
    tags: Optional[Sequence[str]] = None
    image_url: Optional[str] = None


@dataclass(frozen=True)
class ShowRecord:
    """A normalized show. Only normalize_show() builds these."""
    title: str
    venue: str
    venue_url: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    price: Optional[str] = None  # "Free", "$15" or "$10–$20"
    description: Optional[str] = None
    event_url: Optional[str] = None
    age_limit: Optional[str] = None
    tags: Tuple[str, ...] = ()
    image_url: Optional[str] = None

    def dedup_key(self) -> DedupKey:
        """Key for deduplication: venue, date, title (case/whitespace-folded)."""
        return (
            self.venue.lower().strip(),
            self.date or "",
            self.title.lower().strip(),
        )

    def override_key(self) -> str:
        """Key into the image override table: 'venue|date|title'."""
        return "|".join(self.dedup_key())

    @property
    def display_line(self) -> str:
        """Format as 'TITLE — VENUE' or 'TITLE — VENUE (TIME)'."""
        line = f"{self.title} — {self.venue}"
        if self.time:
            line += f" ({self.time})"
        return line

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "venue": self.venue,
            "venueUrl": self.venue_url,
            "date": self.date,
            "time": self.time,
            "price": self.price,
            "description": self.description,
            "eventUrl": self.event_url,
            "ageLimit": self.age_limit,
            "tags": list(self.tags),
            "imageUrl": self.image_url,
        }


@dataclass
class AdapterResult:
    """Outcome of one adapter invocation: records or an error, never both."""
    source_name: str
    records: List[CandidateRecord] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error_message is None

    @property
    def status_line(self) -> str:
        if not self.success:
            return f"❌ {self.source_name}: {self.error_message}"
        return f"✅ {self.source_name}: {len(self.records)} shows"


@dataclass(frozen=True)
class SourceFailure:
    """Error descriptor persisted in the snapshot."""
    source: str
    error: str

    def to_dict(self) -> dict:
        return {"source": self.source, "error": self.error}


@dataclass(frozen=True)
class Snapshot:
    """The persisted artifact for one run."""
    last_updated: datetime
    errors: Tuple[SourceFailure, ...] = ()
    shows: Tuple[ShowRecord, ...] = ()

    def to_dict(self) -> dict:
        return {
            "lastUpdated": self.last_updated.isoformat(),
            "scraperErrors": [e.to_dict() for e in self.errors],
            "shows": [s.to_dict() for s in self.shows],
        }

"""Snapshot assembly and persistence.

Takes the deduplicated shows plus the per-adapter errors and produces the
shows.json document the static site reads.
"""

import json
import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .config import LOCAL_TZ
from .models import ShowRecord, Snapshot, SourceFailure

logger = logging.getLogger("okladiy.snapshot")


# ---------------------------------------------------------------------------
# Image overrides
# ---------------------------------------------------------------------------

def override_key(venue: str, date: Optional[str], title: str) -> str:
    """Build an override-table key the same way ShowRecord.override_key does."""
    return "|".join((venue.lower().strip(), (date or "").strip(), title.lower().strip()))


def load_image_overrides(path: Path) -> Dict[str, str]:
    """Load the 'venue|date|title' -> image URL table.

    A missing file means no overrides. A corrupt file is logged and ignored;
    a bad override table is not worth losing a run over.
    """
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Image overrides unreadable ({e}), ignoring {path}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Image overrides in {path} are not an object, ignoring")
        return {}

    table = {}
    for raw_key, url in data.items():
        parts = str(raw_key).split("|", 2)
        if len(parts) != 3 or not isinstance(url, str) or not url.strip():
            logger.warning(f"Skipping malformed image override {raw_key!r}")
            continue
        table[override_key(*parts)] = url.strip()
    return table


def apply_image_overrides(shows: Iterable[ShowRecord], overrides: Dict[str, str]) -> List[ShowRecord]:
    """Swap in manual image URLs. Only image_url is touched."""
    result = []
    for show in shows:
        url = overrides.get(show.override_key())
        result.append(replace(show, image_url=url) if url else show)
    return result


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

def sort_shows(shows: Iterable[ShowRecord]) -> List[ShowRecord]:
    """Date ascending, undated shows last. Stable, so ties keep input order."""
    return sorted(shows, key=lambda s: (s.date is None, s.date or ""))


# ---------------------------------------------------------------------------
# Assembly and output
# ---------------------------------------------------------------------------

def assemble_snapshot(
    shows: Iterable[ShowRecord],
    errors: Iterable[SourceFailure] = (),
    overrides: Optional[Dict[str, str]] = None,
    now: Optional[datetime] = None,
) -> Snapshot:
    """Apply overrides, sort, and stamp. Empty input is a valid snapshot."""
    overridden = apply_image_overrides(shows, overrides or {})
    return Snapshot(
        last_updated=now or datetime.now(LOCAL_TZ),
        errors=tuple(errors),
        shows=tuple(sort_shows(overridden)),
    )


def write_snapshot(snapshot: Snapshot, path: Path) -> None:
    """Write the snapshot as JSON. Failures propagate: there is no fallback."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(snapshot.to_dict(), f, indent=2, ensure_ascii=False)
        f.write("\n")
    logger.info(f"Wrote {len(snapshot.shows)} shows → {path}")

"""
Show deduplication.

The same show can come back from two adapters (a venue's own site and its
ticketing partner), or twice from one page. Shows with the same venue +
date + title (lowercased, trimmed) are the same show; the first one seen
is kept and later ones are dropped without merging fields.
"""

import logging
from typing import Iterable, List, Set

from .models import DedupKey, ShowRecord

logger = logging.getLogger("okladiy.dedup")


def deduplicate(shows: Iterable[ShowRecord]) -> List[ShowRecord]:
    """Drop shows whose dedup key was already seen, preserving input order."""
    seen: Set[DedupKey] = set()
    unique = []
    dropped = 0

    for show in shows:
        key = show.dedup_key()
        if key in seen:
            dropped += 1
            continue
        seen.add(key)
        unique.append(show)

    if dropped:
        logger.info(f"Removed {dropped} duplicate(s)")
    return unique

#!/usr/bin/env python3
"""OKC/Tulsa Show Calendar — Main Runner

Runs every venue adapter concurrently, normalizes and deduplicates the
results, sorts by date, and writes docs/shows.json for the static site.

Usage:
    python -m okladiy.main              # Normal run
    python -m okladiy.main --dry-run    # Print results without writing files
"""

import argparse
import asyncio
import logging
import sys
from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from .config import LOCAL_TZ, PipelineConfig
from .dedup import deduplicate
from .models import ShowRecord, Snapshot
from .normalize import normalize_show
from .orchestrator import collect_failures, fetch_all
from .snapshot import assemble_snapshot, load_image_overrides, write_snapshot
from .sources import build_adapters
from .sources.base import Adapter

logger = logging.getLogger("okladiy")


def setup_logging(config: PipelineConfig, level: int = logging.INFO) -> None:
    """Log to stdout, plus a dated file when a log directory is configured."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.log_dir:
        config.log_dir.mkdir(parents=True, exist_ok=True)
        log_date = datetime.now(LOCAL_TZ).strftime("%Y-%m-%d")
        handlers.append(logging.FileHandler(config.log_dir / f"{log_date}.log", encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


async def run(
    config: PipelineConfig,
    adapters: Optional[Sequence[Adapter]] = None,
    dry_run: bool = False,
) -> Snapshot:
    """Main pipeline: fetch → normalize → deduplicate → assemble → write."""
    run_timestamp = datetime.now(LOCAL_TZ)
    logger.info("=" * 60)
    logger.info(f"OKC/TULSA SHOW CALENDAR — {run_timestamp.strftime('%Y-%m-%d %H:%M')}")
    logger.info("=" * 60)

    if adapters is None:
        adapters = build_adapters(config)

    # ---- STEP 1: Fetch from all sources ----
    results = await fetch_all(adapters)

    # ---- STEP 2: Normalize ----
    shows = [normalize_show(record) for result in results for record in result.records]
    logger.info(f"Raw shows collected: {len(shows)}")

    # ---- STEP 3: Deduplicate ----
    unique = deduplicate(shows)
    logger.info(f"After deduplication: {len(unique)}")

    # ---- STEP 4: Overrides, sort, stamp ----
    snapshot = assemble_snapshot(
        unique,
        errors=collect_failures(results),
        overrides=load_image_overrides(config.overrides_path),
        now=run_timestamp,
    )

    if dry_run:
        logger.info("DRY RUN — Not writing files")
        _print_summary(snapshot.shows)
        return snapshot

    # ---- STEP 5: Write output ----
    write_snapshot(snapshot, config.output_path)
    _print_summary(snapshot.shows)

    if snapshot.errors:
        logger.warning(f"{len(snapshot.errors)} adapter(s) failed — check scraperErrors in {config.output_path.name}")
        for failure in snapshot.errors:
            logger.warning(f"   - {failure.source}: {failure.error}")

    return snapshot


def _print_summary(shows: Sequence[ShowRecord]) -> None:
    """Print a text summary of shows grouped by date."""
    by_date = defaultdict(list)
    for show in shows:
        by_date[show.date].append(show)

    print(f"\n{'='*60}")
    print("SHOW SUMMARY")
    print(f"{'='*60}")

    for day, day_shows in by_date.items():
        heading = datetime.strptime(day, "%Y-%m-%d").strftime("%A, %B %d").upper() if day else "DATE TBA"
        print(f"\n━━━ {heading} ━━━")
        for show in day_shows:
            print(f"  {show.display_line}")

    print(f"\n{'='*60}\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Scrape all venues and write the show snapshot.")
    parser.add_argument("--dry-run", action="store_true", help="print results without writing files")
    parser.add_argument("--output", type=Path, help="snapshot path (default: docs/shows.json)")
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    args = parser.parse_args(argv)

    config = PipelineConfig.from_env(output_path=args.output)
    setup_logging(config, logging.DEBUG if args.verbose else logging.INFO)

    try:
        asyncio.run(run(config, dry_run=args.dry_run))
    except Exception:
        logger.exception("Fatal error")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

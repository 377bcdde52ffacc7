"""Run a single adapter by name for fast debugging.

Usage:
    python -m okladiy.run_one <name>
    python -m okladiy.run_one beercity

Prints each raw record as JSON and a summary count.
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict, replace
from typing import Optional, Sequence

from .config import PipelineConfig
from .main import setup_logging
from .sources import adapter_names, get_adapter

logger = logging.getLogger("okladiy.run_one")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run one venue adapter and print its raw output.")
    parser.add_argument("name", help=f"adapter name, one of: {', '.join(adapter_names())}")
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    args = parser.parse_args(argv)

    # Debug runs only log to the console
    config = replace(PipelineConfig.from_env(), log_dir=None)
    setup_logging(config, logging.DEBUG if args.verbose else logging.INFO)

    try:
        adapter = get_adapter(args.name, config)
    except KeyError as e:
        logger.error(e.args[0])
        return 1

    logger.info(f"Running adapter: {adapter.name}")
    try:
        records = asyncio.run(adapter.fetch())
    except Exception:
        logger.exception(f"Adapter {adapter.name!r} raised")
        return 1

    for record in records:
        print(json.dumps(asdict(record), indent=2, ensure_ascii=False))
    print(f"\n── {len(records)} show(s) from {adapter.name} ──")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Fetch orchestration.

Runs every adapter at once and waits for all of them. A failing adapter
becomes an error entry; it never stops the others or the run.
"""

import asyncio
import logging
from typing import List, Sequence

from .models import AdapterResult, SourceFailure
from .sources.base import Adapter

logger = logging.getLogger("okladiy.orchestrator")


def describe_error(exc: BaseException) -> str:
    """Human-readable cause for the snapshot's error list."""
    message = str(exc).strip()
    if isinstance(exc, asyncio.TimeoutError) and not message:
        return "Timed out"
    return message or type(exc).__name__


async def fetch_all(adapters: Sequence[Adapter]) -> List[AdapterResult]:
    """Invoke all adapters concurrently; results come back in adapter order."""
    logger.info(f"Running {len(adapters)} adapter(s)…")
    outcomes = await asyncio.gather(*(a.fetch() for a in adapters), return_exceptions=True)

    results = []
    for adapter, outcome in zip(adapters, outcomes):
        if isinstance(outcome, BaseException):
            result = AdapterResult(source_name=adapter.name, error_message=describe_error(outcome))
            logger.error(f"  {result.status_line}")
            logger.debug(f"{adapter.name} failed", exc_info=outcome)
        else:
            result = AdapterResult(source_name=adapter.name, records=list(outcome or []))
            logger.info(f"  {result.status_line}")
        results.append(result)
    return results


def collect_failures(results: Sequence[AdapterResult]) -> List[SourceFailure]:
    return [
        SourceFailure(source=r.source_name, error=r.error_message)
        for r in results
        if not r.success
    ]

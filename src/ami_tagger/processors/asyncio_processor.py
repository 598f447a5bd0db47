"""AsyncIO fan-out - a task group of region workers gated by a semaphore."""

import asyncio
import threading
from typing import List, Optional

from ..core import RegionResult, get_logger
from .common import RegionWorkerFn, unexpected_failure


async def run_regions_async(
    regions: List[str],
    worker_fn: RegionWorkerFn,
    max_workers: int,
    cancel_event: threading.Event,
    timeout: Optional[float] = None,
) -> List[RegionResult]:
    """Run region workers as tasks; the blocking boto3 calls go to threads."""
    logger = get_logger()
    sem = asyncio.Semaphore(max_workers)

    async def _task(region: str) -> RegionResult:
        async with sem:
            return await asyncio.to_thread(worker_fn, region)

    tasks = [asyncio.create_task(_task(region)) for region in regions]
    if not tasks:
        return []

    try:
        _, pending = await asyncio.wait(tasks, timeout=timeout)
        if pending:
            logger.warning(
                f"Run exceeded {timeout}s with {len(pending)} region(s) unfinished; cancelling"
            )
            cancel_event.set()
            await asyncio.wait(pending)
    except asyncio.CancelledError:
        # Threads cannot be interrupted; tell them to stop at the next check
        cancel_event.set()
        raise

    results: List[RegionResult] = []
    for region, task in zip(regions, tasks):
        exc = task.exception()
        if exc is not None:
            results.append(unexpected_failure(region, exc))
        else:
            results.append(task.result())
    return results


def run_regions(
    regions: List[str],
    worker_fn: RegionWorkerFn,
    max_workers: int,
    cancel_event: threading.Event,
    timeout: Optional[float] = None,
) -> List[RegionResult]:
    """
    Runs region workers using asyncio.

    This is the synchronous wrapper that runs the async function.

    Args:
        regions: Region names to process.
        worker_fn: Callable running the workflow for a single region.
        max_workers: Upper bound on concurrently running regions.
        cancel_event: Shared cancellation token.
        timeout: Optional deadline for the whole run, in seconds.

    Returns:
        One `RegionResult` per region, in input order.
    """
    try:
        return asyncio.run(
            run_regions_async(regions, worker_fn, max_workers, cancel_event, timeout)
        )
    except KeyboardInterrupt:
        cancel_event.set()
        raise

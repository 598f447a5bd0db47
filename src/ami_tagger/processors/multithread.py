"""Multithreaded fan-out - one pooled thread per region, bounded by max_workers."""

import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import List, Optional

from ..core import RegionResult, get_logger
from .common import RegionWorkerFn, unexpected_failure


def run_regions(
    regions: List[str],
    worker_fn: RegionWorkerFn,
    max_workers: int,
    cancel_event: threading.Event,
    timeout: Optional[float] = None,
) -> List[RegionResult]:
    """
    Runs region workers concurrently in a thread pool.

    Region workers spend nearly all their time waiting on EC2, so threads
    are enough. If ``timeout`` elapses before every region finishes, the
    cancel event is set and the pool is drained; workers stop at their next
    cancellation check.

    Args:
        regions: Region names to process.
        worker_fn: Callable running the workflow for a single region.
        max_workers: Upper bound on concurrently running regions.
        cancel_event: Shared cancellation token.
        timeout: Optional deadline for the whole run, in seconds.

    Returns:
        One `RegionResult` per region, in input order.
    """
    if not regions:
        return []

    logger = get_logger()
    pool_size = min(max_workers, len(regions))
    executor = ThreadPoolExecutor(max_workers=pool_size, thread_name_prefix="region-worker")

    try:
        futures = [executor.submit(worker_fn, region) for region in regions]

        _, not_done = wait(futures, timeout=timeout)
        if not_done:
            logger.warning(
                f"Run exceeded {timeout}s with {len(not_done)} region(s) unfinished; cancelling"
            )
            cancel_event.set()
            wait(not_done)

        results: List[RegionResult] = []
        for region, future in zip(regions, futures):
            try:
                results.append(future.result())
            except Exception as e:
                results.append(unexpected_failure(region, e))
        return results

    except KeyboardInterrupt:
        cancel_event.set()
        raise
    finally:
        executor.shutdown(wait=True, cancel_futures=True)

"""Serial fan-out - runs regions one by one in the calling thread."""

import threading
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
    Runs the region worker for each region sequentially.

    A timer sets the cancel event when ``timeout`` elapses, so the region
    in progress stops at its next check and the rest report cancellation.

    Args:
        regions: Region names to process.
        worker_fn: Callable running the workflow for a single region.
        max_workers: Ignored; present to match the other strategies.
        cancel_event: Shared cancellation token.
        timeout: Optional deadline for the whole run, in seconds.

    Returns:
        One `RegionResult` per region, in input order.
    """
    logger = get_logger()
    results: List[RegionResult] = []

    def _expire() -> None:
        logger.warning(f"Run exceeded {timeout}s; cancelling remaining regions")
        cancel_event.set()

    timer = threading.Timer(timeout, _expire) if timeout else None
    if timer is not None:
        timer.daemon = True
        timer.start()

    try:
        for region in regions:
            try:
                results.append(worker_fn(region))
            except Exception as e:
                results.append(unexpected_failure(region, e))
    except KeyboardInterrupt:
        cancel_event.set()
        raise
    finally:
        if timer is not None:
            timer.cancel()

    return results

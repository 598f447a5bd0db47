"""Common pieces shared across all fan-out strategies."""

from typing import Callable

from ..core import RegionResult, get_logger

RegionWorkerFn = Callable[[str], RegionResult]


def unexpected_failure(region: str, exc: BaseException) -> RegionResult:
    """Turn an exception that escaped a region worker into a failed result."""
    logger = get_logger()
    logger.error(f"{region}: worker crashed: {exc}", exc_info=exc)
    return RegionResult(region=region, success=False, error=f"unexpected error: {exc}")

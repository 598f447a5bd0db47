"""Region fan-out strategies."""

from .serial import run_regions as serial_run_regions
from .multithread import run_regions as multithread_run_regions
from .asyncio_processor import run_regions as asyncio_run_regions

__all__ = [
    "serial_run_regions",
    "multithread_run_regions",
    "asyncio_run_regions",
    "get_strategy",
]

_STRATEGIES = {
    "serial": serial_run_regions,
    "multithread": multithread_run_regions,
    "asyncio": asyncio_run_regions,
}


def get_strategy(name: str):
    """Return the run_regions function registered under ``name``."""
    try:
        return _STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Unknown processor: {name}") from None

"""Shared test fixtures."""

import logging

import pytest


@pytest.fixture(autouse=True)
def _isolate_package_logger():
    """Restore the process-wide ``ami-tagger`` logger after each test."""
    logger = logging.getLogger("ami-tagger")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]

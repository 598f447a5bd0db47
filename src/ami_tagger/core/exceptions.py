"""Custom exceptions for the AMI tagger."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Optional


class AmiTaggerError(Exception):
    """Base exception for all AMI tagger errors."""


class ConfigurationError(AmiTaggerError):
    """Error raised for invalid configuration or unusable credentials."""


class Ec2Error(AmiTaggerError):
    """Error raised when an EC2 API call fails."""


class RegionDiscoveryError(AmiTaggerError):
    """Error raised when the list of enabled regions cannot be fetched."""


class ImageListingError(AmiTaggerError):
    """Error raised when images cannot be listed in a region."""

    def __init__(self, region: str, cause: Any):
        self.region = region
        super().__init__(f"{region}: failed to list images: {cause}")


class TaggingError(AmiTaggerError):
    """Error raised when tagging a single image fails."""

    def __init__(self, region: str, image_id: str, cause: Any):
        self.region = region
        self.image_id = image_id
        super().__init__(f"{region}: failed to tag image {image_id}: {cause}")


class RunCancelledError(AmiTaggerError):
    """Error raised inside a region worker once the run has been cancelled."""

    def __init__(self, region: str, image_id: Optional[str] = None):
        self.region = region
        self.image_id = image_id
        where = f" before tagging {image_id}" if image_id else ""
        super().__init__(f"{region}: run cancelled{where}")


@contextmanager
def batch_error_handler(region: str) -> Any:
    """Wrap a region's image listing so any failure carries the region name."""
    try:
        yield
    except AmiTaggerError as exc:
        if isinstance(exc, ImageListingError):
            raise
        raise ImageListingError(region, exc) from exc
    except Exception as exc:  # noqa: BLE001
        raise ImageListingError(region, exc) from exc

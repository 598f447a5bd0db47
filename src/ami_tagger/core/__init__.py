"""Core utilities and shared components for the AMI tagger."""

from .image_filter import filter_untagged_images, lacks_tag
from .logging_config import (
    get_logger,
    setup_logger,
)
from .exceptions import (
    AmiTaggerError,
    ConfigurationError,
    Ec2Error,
    ImageListingError,
    RegionDiscoveryError,
    RunCancelledError,
    TaggingError,
    batch_error_handler,
)
from .models import Image, RegionResult, RunSummary, Tag, TaggingConfig

__all__ = [
    "Tag",
    "Image",
    "TaggingConfig",
    "RegionResult",
    "RunSummary",
    "filter_untagged_images",
    "lacks_tag",
    "setup_logger",
    "get_logger",
    "AmiTaggerError",
    "ConfigurationError",
    "Ec2Error",
    "ImageListingError",
    "RegionDiscoveryError",
    "RunCancelledError",
    "TaggingError",
    "batch_error_handler",
]

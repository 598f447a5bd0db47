"""Protocol definitions for dependency injection and testability."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Protocol

from .models import Image, RegionResult, RunSummary, TaggingConfig


class Ec2ClientProtocol(Protocol):
    """Protocol for the subset of the boto3 EC2 client we use."""

    def describe_regions(self, **kwargs: Any) -> Dict[str, Any]:
        """Describe enabled regions."""
        ...

    def describe_images(self, **kwargs: Any) -> Dict[str, Any]:
        """Describe images."""
        ...

    def create_tags(
        self, Resources: List[str], Tags: List[Dict[str, str]]
    ) -> Dict[str, Any]:
        """Create tags on resources."""
        ...


class Ec2ClientFactoryProtocol(Protocol):
    """Protocol for creating region-bound EC2 clients."""

    def create_ec2_client(self, region_name: Optional[str] = None) -> Ec2ClientProtocol:
        """Return an EC2 client for ``region_name`` (default region if None)."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        ...


class ImageService(ABC):
    """Abstract cloud collaborator: region discovery, image listing, tagging."""

    @abstractmethod
    def list_enabled_regions(self) -> List[str]:
        """Return the names of all enabled regions."""
        ...

    @abstractmethod
    def list_owned_public_images(self, region: str) -> List[Image]:
        """Return images owned by the caller and executable by everyone."""
        ...

    @abstractmethod
    def create_tag(self, region: str, image_id: str, key: str, value: str) -> None:
        """Attach a single tag to an image."""
        ...


class RegionProcessor(ABC):
    """Abstract per-region unit of work."""

    @abstractmethod
    def run(self, region: str) -> RegionResult:
        """Run the workflow for one region. Must not raise."""
        ...


class RunCoordinator(ABC):
    """Abstract orchestrator of a whole run."""

    @abstractmethod
    def run(self, config: TaggingConfig) -> RunSummary:
        """Run every region and return the aggregated summary."""
        ...

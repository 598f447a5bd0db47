"""Shared data models for the AMI tagger."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TAG_KEY = "version"
DEFAULT_TAG_VALUE = "legacy-x86_64"
DEFAULT_MAX_WORKERS = 10
PROCESSORS = ("serial", "multithread", "asyncio")


class Tag(BaseModel):
    """A key/value tag attached to an EC2 resource."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str = ""


class Image(BaseModel):
    """Read-only snapshot of an AMI as returned by DescribeImages."""

    model_config = ConfigDict(frozen=True)

    image_id: str
    tags: List[Tag] = Field(default_factory=list)
    name: str = ""
    architecture: str = ""
    owner_id: str = ""
    public: bool = False

    @classmethod
    def from_api(cls, record: Dict[str, Any]) -> "Image":
        """Build an Image from a boto3 ``Images`` entry."""
        return cls(
            image_id=record["ImageId"],
            tags=[
                Tag(key=tag["Key"], value=tag.get("Value", ""))
                for tag in record.get("Tags", [])
            ],
            name=record.get("Name", ""),
            architecture=record.get("Architecture", ""),
            owner_id=record.get("OwnerId", ""),
            public=record.get("Public", False),
        )


class TaggingConfig(BaseModel):
    """Configuration for a tagging run. Read-only once built."""

    model_config = ConfigDict(frozen=True)

    tag_key: str = Field(default=DEFAULT_TAG_KEY, min_length=1)
    tag_value: str = Field(default=DEFAULT_TAG_VALUE, min_length=1)
    dry_run: bool = False
    max_workers: int = Field(default=DEFAULT_MAX_WORKERS, ge=1)
    timeout: Optional[float] = Field(default=None, gt=0)
    processor: str = Field(default="multithread", pattern="^(serial|multithread|asyncio)$")
    profile: Optional[str] = None
    home_region: Optional[str] = None
    debug: bool = False


class RegionResult(BaseModel):
    """Result of running the tagging workflow in a single region."""

    region: str
    image_ids: List[str] = Field(default_factory=list)
    dry_run: bool = False
    success: bool = False
    error: str = ""
    failed_image_id: Optional[str] = None
    processing_time: float = 0.0


class RunSummary(BaseModel):
    """Aggregated outcome of a run across all regions."""

    results: List[RegionResult] = Field(default_factory=list)
    dry_run: bool = False
    processing_time: float = 0.0

    @property
    def total_regions(self) -> int:
        return len(self.results)

    @property
    def failed_regions(self) -> List[RegionResult]:
        return [r for r in self.results if not r.success]

    @property
    def affected_images(self) -> int:
        return sum(len(r.image_ids) for r in self.results)

    @property
    def success(self) -> bool:
        return not self.failed_regions

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

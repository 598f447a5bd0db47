"""Service implementations for the AMI tagging workflow."""

import threading
import time
from typing import Callable, List, Optional

from .error_handling import RegionFailureCollector, with_error_handling
from .exceptions import (
    AmiTaggerError,
    ConfigurationError,
    RegionDiscoveryError,
    RunCancelledError,
    TaggingError,
    batch_error_handler,
)
from .image_filter import filter_untagged_images
from .models import Image, RegionResult, RunSummary, TaggingConfig
from .observability import LogContext, MetricsCollector, PerformanceMetrics
from .protocols import (
    Ec2ClientFactoryProtocol,
    ImageService,
    LoggerProtocol,
    RegionProcessor,
    RunCoordinator,
)

# Ownership/visibility pre-filter applied before the tag-absence filter
IMAGE_OWNERS = ["self"]
IMAGE_EXECUTABLE_USERS = ["all"]

FanOut = Callable[
    [List[str], Callable[[str], RegionResult], int, threading.Event, Optional[float]],
    List[RegionResult],
]


class Ec2ImageService(ImageService):
    """boto3-backed collaborator for region discovery, image listing and tagging."""

    def __init__(
        self,
        client_factory: Ec2ClientFactoryProtocol,
        logger: LoggerProtocol,
        home_region: Optional[str] = None,
    ):
        self._client_factory = client_factory
        self._logger = logger
        self._home_region = home_region

    @with_error_handling
    def list_enabled_regions(self) -> List[str]:
        """List regions enabled for the account (opted-out regions excluded)."""
        client = self._client_factory.create_ec2_client(self._home_region)
        response = client.describe_regions(AllRegions=False)
        regions = [region["RegionName"] for region in response.get("Regions", [])]
        self._logger.debug(f"Found {len(regions)} enabled regions")
        return regions

    @with_error_handling
    def list_owned_public_images(self, region: str) -> List[Image]:
        """List AMIs owned by this account that anyone may launch."""
        client = self._client_factory.create_ec2_client(region)
        response = client.describe_images(
            Owners=IMAGE_OWNERS, ExecutableUsers=IMAGE_EXECUTABLE_USERS
        )
        if response.get("NextToken"):
            self._logger.warning(
                f"{region}: more images available than returned; only the first page is processed"
            )
        return [Image.from_api(record) for record in response.get("Images", [])]

    @with_error_handling
    def create_tag(self, region: str, image_id: str, key: str, value: str) -> None:
        """Attach one tag to one image."""
        client = self._client_factory.create_ec2_client(region)
        client.create_tags(Resources=[image_id], Tags=[{"Key": key, "Value": value}])


class RegionWorker(RegionProcessor):
    """
    Runs list -> filter -> act for a single region.

    Tagging is sequential within a region and stops at the first failure.
    Images tagged before the failure keep their tag.
    """

    def __init__(
        self,
        image_service: ImageService,
        config: TaggingConfig,
        logger: LoggerProtocol,
        cancel_event: Optional[threading.Event] = None,
        log_context: Optional[LogContext] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self._image_service = image_service
        self._config = config
        self._logger = logger
        self._cancel_event = cancel_event or threading.Event()
        self._log_context = log_context or LogContext(component="region_worker")
        self._metrics_collector = metrics_collector

    def run(self, region: str) -> RegionResult:
        """Run the workflow for ``region``; failures are returned, never raised."""
        start_time = time.time()
        log_context = self._log_context.with_operation("tag_region").with_metadata(
            region=region
        )
        result = RegionResult(region=region, dry_run=self._config.dry_run)

        try:
            self._check_cancelled(region)

            with batch_error_handler(region):
                images = self._image_service.list_owned_public_images(region)

            selected = self.select_images(region, images, log_context)

            if self._config.dry_run:
                self._report(region, selected, result)
            else:
                self._tag_images(region, selected, result)

            result.success = True

        except AmiTaggerError as e:
            result.success = False
            result.error = str(e)
            result.failed_image_id = getattr(e, "image_id", None)
            self._logger.error("Region failed", log_context.with_metadata(error=str(e)))

        except Exception as e:
            result.success = False
            result.error = f"{region}: unexpected error: {e}"
            self._logger.error("Region crashed", log_context.with_metadata(error=str(e)))

        end_time = time.time()
        result.processing_time = end_time - start_time

        if self._metrics_collector is not None:
            self._metrics_collector.record_metric(
                PerformanceMetrics(
                    operation="tag_region",
                    start_time=start_time,
                    end_time=end_time,
                    success=result.success,
                    error_message=result.error or None,
                    metadata={"region": region, "images": len(result.image_ids)},
                )
            )

        return result

    def select_images(
        self, region: str, images: List[Image], log_context: LogContext
    ) -> List[Image]:
        """Apply the tag-absence filter, logging what gets skipped."""
        key = self._config.tag_key
        selected = filter_untagged_images(images, key)
        self._logger.debug(
            f"{region}: {len(images)} owned public image(s), {len(selected)} missing tag '{key}'",
            log_context,
        )
        selected_ids = {image.image_id for image in selected}
        for image in images:
            if image.image_id not in selected_ids:
                self._logger.debug(f"{region}: Skipping image {image.image_id}, already has '{key}'")
        return selected

    def _report(self, region: str, images: List[Image], result: RegionResult) -> None:
        key, value = self._config.tag_key, self._config.tag_value
        for image in images:
            self._logger.debug(
                f"{region}: Would tag image {image.image_id} with tag '{key}' = '{value}'"
            )
            result.image_ids.append(image.image_id)

    def _tag_images(self, region: str, images: List[Image], result: RegionResult) -> None:
        key, value = self._config.tag_key, self._config.tag_value
        for image in images:
            self._check_cancelled(region, image.image_id)
            try:
                self._image_service.create_tag(region, image.image_id, key, value)
            except Exception as e:
                raise TaggingError(region, image.image_id, e) from e

            result.image_ids.append(image.image_id)
            self._logger.debug(
                f"{region}: Tagged image {image.image_id} with tag '{key}' = '{value}'"
            )

    def _check_cancelled(self, region: str, image_id: Optional[str] = None) -> None:
        if self._cancel_event.is_set():
            raise RunCancelledError(region, image_id)


class FanOutCoordinator(RunCoordinator):
    """
    Discovers enabled regions and runs one RegionWorker per region.

    Every region's result is collected; a failing region never stops the
    others. Region discovery failure aborts the run before any worker starts.
    """

    def __init__(
        self,
        image_service: ImageService,
        fan_out: FanOut,
        logger: LoggerProtocol,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self._image_service = image_service
        self._fan_out = fan_out
        self._logger = logger
        self._metrics_collector = metrics_collector

    def discover_regions(self, log_context: LogContext) -> List[str]:
        self._logger.info("Discovering enabled regions", log_context)
        try:
            return self._image_service.list_enabled_regions()
        except ConfigurationError:
            raise
        except Exception as e:
            raise RegionDiscoveryError(f"error fetching enabled regions: {e}") from e

    def run(self, config: TaggingConfig) -> RunSummary:
        """Run the tagging workflow across all enabled regions."""
        start_time = time.time()
        log_context = LogContext(component="fan_out_coordinator").with_metadata(
            dry_run=config.dry_run
        )

        regions = self.discover_regions(log_context.with_operation("discover_regions"))

        if not regions:
            self._logger.info("No enabled regions found", log_context)
            return RunSummary(dry_run=config.dry_run)

        # One token per run; a timed-out run must not cancel the next one.
        cancel_event = threading.Event()
        worker = RegionWorker(
            self._image_service,
            config,
            self._logger,
            cancel_event=cancel_event,
            log_context=log_context,
            metrics_collector=self._metrics_collector,
        )

        self._logger.info(
            f"Dispatching {len(regions)} region worker(s)",
            log_context.with_operation("dispatch"),
            max_workers=config.max_workers,
        )

        results = self._fan_out(
            regions, worker.run, config.max_workers, cancel_event, config.timeout
        )

        summary = RunSummary(
            results=results,
            dry_run=config.dry_run,
            processing_time=time.time() - start_time,
        )

        with RegionFailureCollector("Tagging run") as collector:
            for failed in summary.failed_regions:
                collector.add_error(failed.error, failed.region)

        verb = "would be tagged" if config.dry_run else "tagged"
        self._logger.info(
            f"Run finished: {summary.total_regions} region(s), "
            f"{summary.affected_images} image(s) {verb}, "
            f"{len(summary.failed_regions)} region(s) failed",
            log_context.with_operation("summary"),
        )
        return summary

"""Factory classes for creating configured service instances."""

import logging
import threading
from typing import Dict, Optional, TYPE_CHECKING

import boto3
from botocore.exceptions import BotoCoreError

from ..processors import get_strategy
from .exceptions import ConfigurationError
from .models import TaggingConfig
from .observability import (
    MetricsCollector,
    ObservabilityConfig,
    create_logger,
    create_metrics_collector,
)
from .protocols import Ec2ClientFactoryProtocol, Ec2ClientProtocol, LoggerProtocol
from .services import Ec2ImageService, FanOutCoordinator

if TYPE_CHECKING:
    from mypy_boto3_ec2.client import EC2Client


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str = "ami-tagger", debug: bool = False) -> LoggerProtocol:
        """Create a structured logger; ``debug`` forces DEBUG level."""
        config = ObservabilityConfig(log_level=logging.DEBUG if debug else None)
        return create_logger(name, config)


class Ec2ClientFactory:
    """
    Creates EC2 clients from one boto3 session, cached per region.

    boto3 sessions are not thread-safe but clients are, so clients are
    created under a lock and then shared by the region worker that uses them.
    """

    def __init__(self, profile: Optional[str] = None):
        try:
            self._session = boto3.Session(profile_name=profile)
        except BotoCoreError as e:
            raise ConfigurationError(f"unable to load AWS configuration: {e}") from e
        self._clients: Dict[Optional[str], "EC2Client"] = {}
        self._lock = threading.Lock()

    def create_ec2_client(self, region_name: Optional[str] = None) -> Ec2ClientProtocol:
        """Return the cached EC2 client for ``region_name``, creating it once."""
        with self._lock:
            client = self._clients.get(region_name)
            if client is None:
                try:
                    client = self._session.client("ec2", region_name=region_name)
                except BotoCoreError as e:
                    raise ConfigurationError(
                        f"unable to create EC2 client for {region_name or 'default region'}: {e}"
                    ) from e
                self._clients[region_name] = client
            return client  # type: ignore[return-value]


class TaggingPipelineFactory:
    """Factory for creating the complete tagging pipeline."""

    @staticmethod
    def create_pipeline(
        config: TaggingConfig,
        client_factory: Optional[Ec2ClientFactoryProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> FanOutCoordinator:
        """Create a fully configured coordinator for ``config``."""
        if client_factory is None:
            client_factory = Ec2ClientFactory(profile=config.profile)

        if logger is None:
            logger = LoggerFactory.create_logger("ami-tagger", debug=config.debug)

        if metrics_collector is None:
            metrics_collector = create_metrics_collector(ObservabilityConfig())

        image_service = Ec2ImageService(
            client_factory, logger, home_region=config.home_region
        )

        return FanOutCoordinator(
            image_service=image_service,
            fan_out=get_strategy(config.processor),
            logger=logger,
            metrics_collector=metrics_collector,
        )

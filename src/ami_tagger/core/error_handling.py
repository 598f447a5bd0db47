# src/ami_tagger/core/error_handling.py

import functools

from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from .exceptions import ConfigurationError, Ec2Error
from .logging_config import get_logger


def with_error_handling(func):
    """
    A decorator that turns botocore failures into AMI tagger errors.

    Missing credentials become ConfigurationError, every other botocore
    error becomes Ec2Error. Anything else propagates unchanged.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger()
        try:
            return func(*args, **kwargs)
        except NoCredentialsError as e:
            logger.error(f"No AWS credentials available for '{func.__name__}': {e}")
            raise ConfigurationError(f"AWS credentials not found: {e}") from e
        except ClientError as e:
            code = e.response.get('Error', {}).get('Code', 'Unknown')
            logger.debug(f"EC2 call '{func.__name__}' failed with {code}", exc_info=True)
            raise Ec2Error(f"{func.__name__} failed ({code}): {e}") from e
        except BotoCoreError as e:
            logger.debug(f"EC2 call '{func.__name__}' failed", exc_info=True)
            raise Ec2Error(f"{func.__name__} failed: {e}") from e
    return wrapper


class RegionFailureCollector:
    """
    Context manager for a fan-out run to collect and summarize region failures.
    """
    def __init__(self, operation_name="Tagging run"):
        self.operation_name = operation_name
        self.errors = []
        self.logger = get_logger()

    def __enter__(self):
        self.logger.debug(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.errors:
            self.logger.warning(
                f"{self.operation_name} completed with {len(self.errors)} failed region(s)."
            )
            for i, error_detail in enumerate(self.errors):
                self.logger.error(
                    f"  Failure {i+1}/{len(self.errors)} in region "
                    f"'{error_detail['region']}': {error_detail['error']}"
                )
        elif exc_type:
            self.logger.error(
                f"{self.operation_name} failed due to an unhandled exception: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb)
            )
        else:
            self.logger.info(f"{self.operation_name} completed successfully.")

        # Never suppress exceptions raised inside the block
        return False

    def add_error(self, error_message: str, region: str):
        """
        Report a failed region.

        Args:
            error_message (str): The error message or exception string.
            region (str): The region whose pipeline failed.
        """
        self.errors.append({"region": region, "error": str(error_message)})
        self.logger.debug(f"Error added for region '{region}' in {self.operation_name}: {error_message}")

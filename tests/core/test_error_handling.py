# tests/core/test_error_handling.py

import pytest
from unittest import mock

from botocore.exceptions import ClientError, EndpointConnectionError, NoCredentialsError

from ami_tagger.core.exceptions import AmiTaggerError, ConfigurationError, Ec2Error
from ami_tagger.core.error_handling import (
    RegionFailureCollector,
    with_error_handling,
)


# --- Tests for custom exceptions ---

def test_custom_exception_inheritance():
    """All tagger errors share one base class."""
    assert issubclass(ConfigurationError, AmiTaggerError)
    assert issubclass(Ec2Error, AmiTaggerError)
    assert issubclass(AmiTaggerError, Exception)


# --- Tests for @with_error_handling decorator ---

@pytest.fixture
def mock_logger():
    """Patch the logger used by the decorator and the collector."""
    with mock.patch('ami_tagger.core.error_handling.get_logger') as mock_get_logger:
        mock_log_instance = mock.Mock()
        mock_get_logger.return_value = mock_log_instance
        yield mock_log_instance


def test_with_error_handling_returns_value():
    @with_error_handling
    def describe():
        return {"Regions": []}

    assert describe() == {"Regions": []}


def test_with_error_handling_converts_client_error(mock_logger):
    @with_error_handling
    def create_tags():
        raise ClientError(
            {"Error": {"Code": "UnauthorizedOperation", "Message": "denied"}}, "CreateTags"
        )

    with pytest.raises(Ec2Error, match="UnauthorizedOperation") as info:
        create_tags()

    assert isinstance(info.value.__cause__, ClientError)
    assert "create_tags" in str(info.value)


def test_with_error_handling_converts_botocore_error(mock_logger):
    @with_error_handling
    def describe_images():
        raise EndpointConnectionError(endpoint_url="https://ec2.mars-1.amazonaws.com")

    with pytest.raises(Ec2Error, match="describe_images failed"):
        describe_images()


def test_with_error_handling_missing_credentials_is_configuration_error(mock_logger):
    @with_error_handling
    def describe_regions():
        raise NoCredentialsError()

    with pytest.raises(ConfigurationError, match="credentials"):
        describe_regions()

    mock_logger.error.assert_called_once()


def test_with_error_handling_leaves_other_errors_alone(mock_logger):
    @with_error_handling
    def broken():
        raise KeyError("ImageId")

    with pytest.raises(KeyError):
        broken()


def test_with_error_handling_works_on_methods():
    class Service:
        @with_error_handling
        def create_tag(self, image_id):
            raise ClientError({"Error": {"Code": "Throttling", "Message": "slow"}}, "CreateTags")

    with pytest.raises(Ec2Error, match="Throttling"):
        Service().create_tag("ami-1")


# --- Tests for RegionFailureCollector ---

def test_collector_no_errors_logs_success(mock_logger):
    with RegionFailureCollector("Run") as collector:
        pass

    assert collector.errors == []
    mock_logger.info.assert_called_with("Run completed successfully.")
    mock_logger.warning.assert_not_called()


def test_collector_summarizes_errors(mock_logger):
    with RegionFailureCollector("Run") as collector:
        collector.add_error("denied", "us-east-1")
        collector.add_error(ValueError("boom"), "eu-west-1")

    assert collector.errors == [
        {"region": "us-east-1", "error": "denied"},
        {"region": "eu-west-1", "error": "boom"},
    ]
    mock_logger.warning.assert_called_once_with("Run completed with 2 failed region(s).")
    assert mock_logger.error.call_count == 2
    first = mock_logger.error.call_args_list[0][0][0]
    assert "us-east-1" in first and "denied" in first


def test_collector_does_not_suppress_exceptions(mock_logger):
    with pytest.raises(RuntimeError):
        with RegionFailureCollector("Run"):
            raise RuntimeError("unexpected")

    mock_logger.error.assert_called_once()
    _, kwargs = mock_logger.error.call_args
    assert kwargs.get('exc_info') is not None

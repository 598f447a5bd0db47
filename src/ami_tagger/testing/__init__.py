"""Testing utilities and fakes for the AMI tagger."""

from .fakes import (
    FAKE_ACCOUNT_ID,
    FakeEc2Client,
    FakeEc2Cloud,
    FakeLogger,
    FakeRegion,
    make_client_error,
    setup_test_ec2_environment,
)

__all__ = [
    "FAKE_ACCOUNT_ID",
    "FakeEc2Client",
    "FakeEc2Cloud",
    "FakeLogger",
    "FakeRegion",
    "make_client_error",
    "setup_test_ec2_environment",
]

"""
Unit tests for boto3 session and client construction.
"""

from unittest.mock import MagicMock, patch

from config import BOTO_CLIENT_CONFIG
from stack_deployer.aws_clients import (
    create_cloudformation_client,
    create_session,
    create_sts_client,
)


@patch("stack_deployer.aws_clients.boto3")
def test_create_session(mock_boto3):
    """Test that the session uses the given profile and region."""
    create_session("deployer", "eu-west-1")
    mock_boto3.Session.assert_called_once_with(
        profile_name="deployer", region_name="eu-west-1"
    )


@patch("stack_deployer.aws_clients.boto3")
def test_create_session_defaults(mock_boto3):
    """Test that empty profile and region fall back to boto3 defaults."""
    create_session("", None)
    mock_boto3.Session.assert_called_once_with(profile_name=None, region_name=None)


def test_create_cloudformation_client():
    """Test the CloudFormation client gets the endpoint and shared config."""
    session = MagicMock()
    create_cloudformation_client(session, "eu-west-1", "http://localhost:4566")
    session.client.assert_called_once_with(
        "cloudformation",
        region_name="eu-west-1",
        endpoint_url="http://localhost:4566",
        config=BOTO_CLIENT_CONFIG,
    )


def test_create_sts_client():
    """Test the STS client gets the shared config."""
    session = MagicMock()
    create_sts_client(session)
    session.client.assert_called_once_with(
        "sts", endpoint_url=None, config=BOTO_CLIENT_CONFIG
    )

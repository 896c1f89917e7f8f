"""AWS client construction for a deploy invocation.

Clients are built once at the start of an invocation and handed to the
components that need them.
"""

from typing import Optional

import boto3
from mypy_boto3_cloudformation.client import CloudFormationClient
from mypy_boto3_sts.client import STSClient

from config import BOTO_CLIENT_CONFIG


def create_session(
    profile: Optional[str] = None, region: Optional[str] = None
) -> boto3.Session:
    """Create a boto3 session for the given credential profile and region."""
    return boto3.Session(profile_name=profile or None, region_name=region or None)


def create_cloudformation_client(
    session: boto3.Session,
    region: Optional[str] = None,
    endpoint_url: Optional[str] = None,
) -> CloudFormationClient:
    """Create a CloudFormation client, optionally against a custom endpoint."""
    return session.client(
        "cloudformation",
        region_name=region or None,
        endpoint_url=endpoint_url or None,
        config=BOTO_CLIENT_CONFIG,
    )


def create_sts_client(
    session: boto3.Session, endpoint_url: Optional[str] = None
) -> STSClient:
    return session.client(
        "sts", endpoint_url=endpoint_url or None, config=BOTO_CLIENT_CONFIG
    )

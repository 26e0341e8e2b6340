"""Pytest configuration and shared fixtures for cloudfetch tests.

This module provides common fixtures used across multiple test modules,
including fake boto3 clients, moto-backed clients, and shared raw items.
"""

from __future__ import annotations

import os
import pytest
from typing import Any, Callable, Dict, Generator, List, Union
from unittest.mock import MagicMock

import boto3
from botocore.exceptions import ClientError
from moto import mock_aws


# ============================================================================
# Custom Pytest Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers", "aws: marks tests backed by moto AWS mocks"
    )
    config.addinivalue_line(
        "markers", "concurrency: marks tests asserting thread behaviour"
    )


# ============================================================================
# Helpers
# ============================================================================

PageSource = Union[List[Dict[str, Any]], Exception, Callable[..., List[Dict[str, Any]]]]


def client_error(code: str = "AccessDenied", operation: str = "ListBuckets") -> ClientError:
    """Build a botocore ClientError with the given error code."""
    return ClientError({"Error": {"Code": code, "Message": f"{code} for test"}}, operation)


def fake_client(pages: Dict[str, PageSource] = None) -> MagicMock:
    """Create a mock boto3 client whose paginators serve canned pages.

    Args:
        pages: Maps a paginated method name to a list of pages, an exception
            to raise, or a callable receiving the paginate() kwargs

    Returns:
        Mock client; direct (non-paginated) calls are configured by the test
    """
    pages = pages or {}
    client = MagicMock()

    def get_paginator(method: str) -> MagicMock:
        paginator = MagicMock()

        def paginate(**kwargs):
            source = pages[method]
            if isinstance(source, Exception):
                raise source
            if callable(source):
                return source(**kwargs)
            return source

        paginator.paginate.side_effect = paginate
        return paginator

    client.get_paginator.side_effect = get_paginator
    return client


# ============================================================================
# AWS Mock Fixtures
# ============================================================================

@pytest.fixture
def aws_credentials(monkeypatch) -> None:
    """Mock AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def moto_aws(aws_credentials) -> Generator[None, None, None]:
    """Activate moto for the duration of a test."""
    with mock_aws():
        yield


@pytest.fixture
def s3_client(moto_aws) -> Any:
    """Create a mocked S3 client in us-east-1."""
    return boto3.client("s3", region_name="us-east-1")


@pytest.fixture
def iam_client(moto_aws) -> Any:
    """Create a mocked IAM client."""
    return boto3.client("iam", region_name="us-east-1")


@pytest.fixture
def mock_sts_client() -> MagicMock:
    """Create a mock STS client with GetCallerIdentity response."""
    client = MagicMock()
    client.get_caller_identity.return_value = {
        "UserId": "AIDAEXAMPLEUSERID",
        "Account": "123456789012",
        "Arn": "arn:aws:iam::123456789012:user/testuser"
    }
    return client


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Drop cached settings so env changes in one test don't leak."""
    from cloudfetch.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# Shared Raw Items
# ============================================================================

@pytest.fixture
def sample_user() -> Dict[str, Any]:
    """A ListUsers entry."""
    return {
        "UserName": "alice",
        "UserId": "AIDAALICE",
        "Arn": "arn:aws:iam::123456789012:user/alice",
        "Path": "/",
        "CreateDate": "2024-01-01T00:00:00+00:00",
    }


@pytest.fixture
def sample_user_detail() -> Dict[str, Any]:
    """A GetAccountAuthorizationDetails UserDetailList entry."""
    return {
        "UserName": "alice",
        "UserId": "AIDAALICE",
        "Arn": "arn:aws:iam::123456789012:user/alice",
        "Path": "/",
        "CreateDate": "2024-01-01T00:00:00+00:00",
        "GroupList": ["admins", "devs"],
        "AttachedManagedPolicies": [
            {"PolicyName": "ReadOnlyAccess", "PolicyArn": "arn:aws:iam::aws:policy/ReadOnlyAccess"},
        ],
        "UserPolicyList": [{"PolicyName": "inline-s3", "PolicyDocument": {}}],
    }

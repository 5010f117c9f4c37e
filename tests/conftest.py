"""Pytest configuration and shared fixtures."""

import asyncio
from unittest.mock import MagicMock, patch

import pytest

from uplifty.core.config import S3Config, S3StorageConfig


@pytest.fixture
def s3_config():
    """S3 storage configuration with test credentials."""
    return S3StorageConfig(
        s3=S3Config(
            access_key_id="test-access-key",
            secret_access_key="test-secret-key",
            region="eu-west-1",
            bucket="test-bucket",
        )
    )


@pytest.fixture
def mock_boto3_client():
    """Mock boto3 S3 client so no test reaches the network."""
    mock_client = MagicMock()
    with patch("uplifty.storage.s3.boto3.client") as mock_factory:
        mock_factory.return_value = mock_client
        yield mock_client


@pytest.fixture
def drain_events():
    """Coroutine function that lets posted progress callbacks run."""

    async def drain():
        for _ in range(3):
            await asyncio.sleep(0)

    return drain

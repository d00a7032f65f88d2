"""Integration test fixtures — S3-compatible endpoint (LocalStack, MinIO)."""

from __future__ import annotations

import os
import uuid

import boto3
import pytest

from s3_mcp.core.config import S3Config
from s3_mcp.persistence.s3_backend import create_s3_client

# Default LocalStack endpoint
S3_TEST_ENDPOINT = os.environ.get("S3_TEST_ENDPOINT", "http://localhost:4566")
S3_TEST_KEY = os.environ.get("S3_TEST_ACCESS_KEY_ID", "test")
S3_TEST_SECRET = os.environ.get("S3_TEST_SECRET_ACCESS_KEY", "test")


def _endpoint_available() -> bool:
    """Check if the S3 endpoint is reachable."""
    try:
        client = boto3.client(
            "s3", region_name="us-east-1", endpoint_url=S3_TEST_ENDPOINT,
            aws_access_key_id=S3_TEST_KEY, aws_secret_access_key=S3_TEST_SECRET,
        )
        client.list_buckets()
        return True
    except Exception:
        return False


skip_no_endpoint = pytest.mark.skipif(
    not _endpoint_available(),
    reason="S3-compatible endpoint not available",
)


@pytest.fixture(scope="session")
def s3_config():
    """Config pointing at a fresh bucket on the test endpoint."""
    config = S3Config(
        endpoint=S3_TEST_ENDPOINT,
        region="us-east-1",
        access_key_id=S3_TEST_KEY,
        secret_access_key=S3_TEST_SECRET,
        bucket=f"s3-mcp-inttest-{uuid.uuid4().hex[:8]}",
        public_url="https://cdn.example.test",
        path_prefix="inttest/",
    )
    create_s3_client(config).create_bucket(Bucket=config.bucket)
    return config

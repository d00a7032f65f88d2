"""Pluggable object store backends behind the IObjectStore protocol."""

from __future__ import annotations

from s3_mcp.core.config import S3Config
from s3_mcp.persistence.s3_backend import S3ObjectStore, create_s3_client


def create_object_store(config: S3Config) -> S3ObjectStore:
    """Create the bucket-bound object store from configuration."""
    return S3ObjectStore(create_s3_client(config), config.bucket)

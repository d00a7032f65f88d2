"""S3 object store backend implementing IObjectStore."""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from s3_mcp.core.config import S3Config
from s3_mcp.core.exceptions import StorageError
from s3_mcp.models.storage import StorageObject

logger = logging.getLogger(__name__)


def create_s3_client(config: S3Config) -> Any:
    """Create a boto3 S3 client for an S3-compatible endpoint.

    Checksums are only sent/validated when the operation requires them;
    R2 and several other S3-compatible stores reject the newer defaults.
    """
    return boto3.client(
        "s3",
        endpoint_url=config.endpoint,
        region_name=config.region,
        aws_access_key_id=config.access_key_id,
        aws_secret_access_key=config.secret_access_key,
        config=Config(
            request_checksum_calculation="when_required",
            response_checksum_validation="when_required",
        ),
    )


class S3ObjectStore:
    """Production IObjectStore backed by a single S3 bucket."""

    def __init__(self, client: Any, bucket: str) -> None:
        self._client = client
        self._bucket = bucket

    @property
    def bucket(self) -> str:
        return self._bucket

    def put(self, key: str, body: bytes, content_type: str) -> None:
        try:
            self._client.put_object(
                Bucket=self._bucket, Key=key, Body=body, ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"S3 upload failed for {key!r}: {exc}") from exc
        logger.debug("Stored %d bytes at s3://%s/%s", len(body), self._bucket, key)

    def list_objects(self, prefix: str | None, max_keys: int) -> list[StorageObject]:
        """Return a single page of objects; continuation tokens are not followed."""
        kwargs: dict = {"Bucket": self._bucket, "MaxKeys": max_keys}
        if prefix is not None:
            kwargs["Prefix"] = prefix
        try:
            resp = self._client.list_objects_v2(**kwargs)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"S3 list failed for prefix={prefix!r}: {exc}") from exc

        objects: list[StorageObject] = []
        for obj in resp.get("Contents", []):
            last_modified = obj.get("LastModified")
            objects.append(StorageObject(
                key=obj["Key"],
                size=obj.get("Size") or 0,
                last_modified=last_modified.isoformat() if last_modified else "",
            ))
        return objects

    def delete(self, key: str) -> None:
        # S3 reports success for keys that never existed.
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"S3 delete failed for {key!r}: {exc}") from exc

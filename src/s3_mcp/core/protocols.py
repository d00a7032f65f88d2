"""Protocol interfaces for s3-mcp abstractions.

Tool handlers talk to storage only through these Protocols, so the boto3
backend and the in-memory test backend are interchangeable.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from s3_mcp.models.storage import StorageObject


# ---------------------------------------------------------------------------
# Persistence: Object Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IObjectStore(Protocol):
    """Single-bucket, S3-compatible object store."""

    def put(self, key: str, body: bytes, content_type: str) -> None: ...

    def list_objects(self, prefix: str | None, max_keys: int) -> list[StorageObject]: ...

    def delete(self, key: str) -> None: ...

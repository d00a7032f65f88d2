"""In-memory backend for unit tests — dict-backed fake."""

from __future__ import annotations

from datetime import datetime, timezone

from s3_mcp.models.storage import StorageObject


class MemoryObjectStore:
    """Dict-backed IObjectStore for unit tests.

    Records every call in ``calls`` so tests can assert that validation
    failures never reach storage.
    """

    def __init__(self) -> None:
        self._objects: dict[str, tuple[bytes, str, datetime]] = {}
        self.calls: list[tuple[str, str | None]] = []

    def put(self, key: str, body: bytes, content_type: str) -> None:
        self.calls.append(("put", key))
        self._objects[key] = (bytes(body), content_type, datetime.now(timezone.utc))

    def list_objects(self, prefix: str | None, max_keys: int) -> list[StorageObject]:
        self.calls.append(("list", prefix))
        keys = sorted(k for k in self._objects if k.startswith(prefix or ""))
        return [
            StorageObject(
                key=k,
                size=len(self._objects[k][0]),
                last_modified=self._objects[k][2].isoformat(),
            )
            for k in keys[:max_keys]
        ]

    def delete(self, key: str) -> None:
        self.calls.append(("delete", key))
        self._objects.pop(key, None)

    # ---- test helpers ----

    def body(self, key: str) -> bytes:
        return self._objects[key][0]

    def content_type(self, key: str) -> str:
        return self._objects[key][1]

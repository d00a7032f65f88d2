"""Object store models."""

from __future__ import annotations

from pydantic import BaseModel


class StorageObject(BaseModel):
    """One entry of a bucket listing."""

    key: str
    size: int = 0
    last_modified: str = ""  # ISO-8601, empty when the store omits it

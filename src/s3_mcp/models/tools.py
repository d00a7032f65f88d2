"""Tool input models and the result envelope returned by every tool."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

_KEY_DESCRIPTION = "Custom object key. Auto-generated if omitted"


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

class UploadFileInput(BaseModel):
    """Arguments of ``upload_file``."""

    file_path: str = Field(description="Absolute path to the local file")
    key: str | None = Field(default=None, description=_KEY_DESCRIPTION)


class UploadBase64Input(BaseModel):
    """Arguments of ``upload_base64``."""

    data: str = Field(description="Base64-encoded file content")
    filename: str = Field(description="Filename for key generation and extension detection")
    content_type: str | None = Field(
        default=None, description="MIME type. Inferred from filename if omitted",
    )
    key: str | None = Field(default=None, description=_KEY_DESCRIPTION)


class UploadFromUrlInput(BaseModel):
    """Arguments of ``upload_from_url``."""

    url: str = Field(description="URL to fetch the file from")
    filename: str | None = Field(
        default=None,
        description="Override filename for key generation. Inferred from URL if omitted",
    )
    key: str | None = Field(default=None, description=_KEY_DESCRIPTION)

    @field_validator("url")
    @classmethod
    def _require_absolute_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("must be an absolute URL")
        return value


class ListFilesInput(BaseModel):
    """Arguments of ``list_files``."""

    prefix: str | None = Field(default=None, description="Filter by key prefix")
    max_results: int = Field(
        default=20, ge=1, le=100,
        description="Maximum number of results (default 20, max 100)",
    )


class DeleteFileInput(BaseModel):
    """Arguments of ``delete_file``."""

    key: str = Field(description="Object key to delete")


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

class UploadResult(BaseModel):
    url: str
    key: str
    size: int
    content_type: str


class ListedFile(BaseModel):
    key: str
    url: str
    size: int
    last_modified: str


class ListResult(BaseModel):
    files: list[ListedFile]
    count: int


class DeleteResult(BaseModel):
    deleted: bool = True
    key: str


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------

class ToolResult(BaseModel):
    """Success payload or error message, never both."""

    ok: bool
    payload: dict[str, Any] | None = None
    error: str | None = None

    @classmethod
    def success(cls, payload: BaseModel | dict[str, Any]) -> "ToolResult":
        if isinstance(payload, BaseModel):
            payload = payload.model_dump()
        return cls(ok=True, payload=payload)

    @classmethod
    def failure(cls, message: str) -> "ToolResult":
        return cls(ok=False, error=message)

    def to_text(self) -> str:
        """JSON text sent back to the agent."""
        if self.ok:
            return json.dumps(self.payload, indent=2)
        return json.dumps({"error": self.error})

"""MCP tools for S3 file operations.

Each tool has a pydantic input model that validates its arguments and an
async handler on :class:`ToolRegistry` that returns a
:class:`ToolResult` instead of raising.
"""

from __future__ import annotations

import asyncio
import base64
import functools
import logging
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel, ValidationError

from s3_mcp.core.config import S3Config
from s3_mcp.core.exceptions import FetchError, ToolInputError
from s3_mcp.core.protocols import IObjectStore
from s3_mcp.models.tools import (
    DeleteFileInput,
    DeleteResult,
    ListedFile,
    ListFilesInput,
    ListResult,
    ToolResult,
    UploadBase64Input,
    UploadFileInput,
    UploadFromUrlInput,
    UploadResult,
)
from s3_mcp.skills.content_types import detect_content_type
from s3_mcp.skills.object_keys import generate_key

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_NAME = "download"

_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")

Handler = Callable[[Any], Awaitable[ToolResult]]


def error_message(exc: BaseException) -> str:
    """Display text for any failure raised inside a tool."""
    return str(exc) or type(exc).__name__


def _enveloped(func: Callable[..., Awaitable[ToolResult]]) -> Callable[..., Awaitable[ToolResult]]:
    """Turn any exception raised by a handler into a failed ToolResult."""

    @functools.wraps(func)
    async def wrapper(self: "ToolRegistry", params: Any) -> ToolResult:
        try:
            return await func(self, params)
        except Exception as exc:
            logger.warning("Tool %s failed: %s", func.__name__, exc)
            return ToolResult.failure(error_message(exc))

    return wrapper


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "arguments"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def filename_from_url(url: str) -> str:
    """Last path segment of ``url``, or ``download`` when the path is empty.

    Trailing slashes are ignored, so ``/files/`` yields ``files``.
    """
    return posixpath.basename(urlparse(url).path.rstrip("/")) or DEFAULT_DOWNLOAD_NAME


def decode_base64(data: str) -> bytes:
    """Decode standard or URL-safe base64, with or without padding.

    Whitespace (e.g. MIME line breaks) is ignored. Characters outside both
    alphabets raise ``binascii.Error``.
    """
    cleaned = "".join(data.split()).translate(_URLSAFE_TO_STANDARD).rstrip("=")
    return base64.b64decode(cleaned + "=" * (-len(cleaned) % 4), validate=True)


@dataclass(frozen=True)
class ToolSpec:
    """Name, description and input model of one MCP tool."""

    name: str
    description: str
    input_model: type[BaseModel]


TOOL_SPECS: tuple[ToolSpec, ...] = (
    ToolSpec(
        "upload_file",
        "Upload a local file to the S3 bucket and return its public URL",
        UploadFileInput,
    ),
    ToolSpec(
        "upload_base64",
        "Upload base64-encoded data to the S3 bucket and return its public URL",
        UploadBase64Input,
    ),
    ToolSpec(
        "upload_from_url",
        "Fetch a file from a URL and upload it to the S3 bucket",
        UploadFromUrlInput,
    ),
    ToolSpec(
        "list_files",
        "List files in the S3 bucket, optionally filtered by prefix",
        ListFilesInput,
    ),
    ToolSpec(
        "delete_file",
        "Delete a file from the S3 bucket",
        DeleteFileInput,
    ),
)


class ToolRegistry:
    """Maps tool invocations onto object store operations.

    Config, store and HTTP client are built once at startup and only read
    here, so one registry serves every request.
    """

    def __init__(self, store: IObjectStore, config: S3Config,
                 http_client: httpx.AsyncClient) -> None:
        self._store = store
        self._config = config
        self._http = http_client
        self._specs = {spec.name: spec for spec in TOOL_SPECS}
        self._handlers: dict[str, Handler] = {
            "upload_file": self.upload_file,
            "upload_base64": self.upload_base64,
            "upload_from_url": self.upload_from_url,
            "list_files": self.list_files,
            "delete_file": self.delete_file,
        }

    def validate(self, name: str, arguments: dict[str, Any] | None) -> BaseModel:
        """Parse raw arguments into the tool's input model.

        Raises:
            ToolInputError: Unknown tool or arguments violating the model.
        """
        spec = self._specs.get(name)
        if spec is None:
            raise ToolInputError(name, "unknown tool")
        try:
            return spec.input_model.model_validate(arguments or {})
        except ValidationError as exc:
            raise ToolInputError(name, _format_validation_error(exc)) from exc

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        """Validate ``arguments`` and run the named tool.

        Invalid input yields a failed result without touching storage.
        """
        logger.debug("Tool call: %s", name)
        try:
            params = self.validate(name, arguments)
        except ToolInputError as exc:
            logger.warning("%s", exc)
            return ToolResult.failure(str(exc))
        return await self._handlers[name](params)

    # ---- helpers ----

    def _key_for(self, filename: str, key: str | None) -> str:
        return key if key is not None else generate_key(filename, self._config.path_prefix)

    async def _upload(self, body: bytes, filename: str, content_type: str,
                      key: str | None) -> UploadResult:
        object_key = self._key_for(filename, key)
        await asyncio.to_thread(self._store.put, object_key, body, content_type)
        logger.info("Uploaded %s (%d bytes, %s)", object_key, len(body), content_type)
        return UploadResult(
            url=self._config.object_url(object_key),
            key=object_key,
            size=len(body),
            content_type=content_type,
        )

    # ---- tools ----

    @_enveloped
    async def upload_file(self, params: UploadFileInput) -> ToolResult:
        path = Path(params.file_path)
        body = await asyncio.to_thread(path.read_bytes)
        result = await self._upload(body, path.name, detect_content_type(path.name), params.key)
        return ToolResult.success(result)

    @_enveloped
    async def upload_base64(self, params: UploadBase64Input) -> ToolResult:
        body = decode_base64(params.data)
        content_type = params.content_type or detect_content_type(params.filename)
        result = await self._upload(body, params.filename, content_type, params.key)
        return ToolResult.success(result)

    @_enveloped
    async def upload_from_url(self, params: UploadFromUrlInput) -> ToolResult:
        response = await self._http.get(params.url)
        if not response.is_success:
            raise FetchError(response.status_code, response.reason_phrase)

        filename = params.filename or filename_from_url(params.url)
        content_type = response.headers.get("content-type") or detect_content_type(filename)
        result = await self._upload(response.content, filename, content_type, params.key)
        return ToolResult.success(result)

    @_enveloped
    async def list_files(self, params: ListFilesInput) -> ToolResult:
        path_prefix = self._config.path_prefix
        if params.prefix:
            full_prefix: str | None = f"{path_prefix}{params.prefix}"
        else:
            full_prefix = path_prefix or None

        objects = await asyncio.to_thread(
            self._store.list_objects, full_prefix, params.max_results,
        )
        files = [
            ListedFile(
                key=obj.key,
                url=self._config.object_url(obj.key),
                size=obj.size,
                last_modified=obj.last_modified,
            )
            for obj in objects
        ]
        return ToolResult.success(ListResult(files=files, count=len(files)))

    @_enveloped
    async def delete_file(self, params: DeleteFileInput) -> ToolResult:
        await asyncio.to_thread(self._store.delete, params.key)
        logger.info("Deleted %s", params.key)
        return ToolResult.success(DeleteResult(key=params.key))

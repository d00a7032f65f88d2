"""s3-mcp exception hierarchy."""

from __future__ import annotations


class S3McpError(Exception):
    """Base exception for all s3-mcp errors."""


class ConfigurationError(S3McpError):
    """Required environment variables are missing."""

    def __init__(self, missing: list[str], message: str) -> None:
        self.missing = missing
        super().__init__(message)


class StorageError(S3McpError):
    """Object store call failed."""


class FetchError(S3McpError):
    """Source URL answered with a non-success status."""

    def __init__(self, status_code: int, reason: str) -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Failed to fetch URL: {status_code} {reason}")


class ToolInputError(S3McpError):
    """Tool arguments do not satisfy the tool's input model."""

    def __init__(self, tool: str, detail: str) -> None:
        self.tool = tool
        self.detail = detail
        super().__init__(f"Invalid arguments for {tool}: {detail}")

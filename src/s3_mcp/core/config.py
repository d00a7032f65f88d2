"""Application configuration using pydantic-settings with env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from s3_mcp.core.exceptions import ConfigurationError

ENV_PREFIX = "S3_"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

REQUIRED_ENV_VARS = (
    "S3_ENDPOINT",
    "S3_ACCESS_KEY_ID",
    "S3_SECRET_ACCESS_KEY",
    "S3_BUCKET",
    "S3_PUBLIC_URL",
)

# Validation error types that mean "variable not provided".
_MISSING_ERROR_TYPES = {"missing", "string_too_short"}


class S3Config(BaseSettings):
    """S3-compatible bucket configuration, read once at startup."""

    model_config = {"env_prefix": ENV_PREFIX, "frozen": True}

    endpoint: str = Field(min_length=1)
    region: str = "auto"
    access_key_id: str = Field(min_length=1)
    secret_access_key: str = Field(min_length=1)
    bucket: str = Field(min_length=1)
    public_url: str = Field(min_length=1)
    path_prefix: str = ""

    @field_validator("public_url")
    @classmethod
    def _strip_trailing_slashes(cls, value: str) -> str:
        return value.rstrip("/")

    def object_url(self, key: str) -> str:
        """Public URL under which ``key`` is served."""
        return f"{self.public_url}/{key}"


class ServerConfig(BaseSettings):
    """MCP server process settings."""

    model_config = {"env_prefix": "S3_MCP_"}

    name: str = "s3-mcp"
    log_level: LogLevel = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


def _missing_env_vars(exc: ValidationError) -> list[str]:
    reported = {
        f"{ENV_PREFIX}{str(err['loc'][0]).upper()}"
        for err in exc.errors()
        if err["loc"] and err["type"] in _MISSING_ERROR_TYPES
    }
    return [name for name in REQUIRED_ENV_VARS if name in reported]


def _missing_message(missing: list[str]) -> str:
    return (
        f"Missing required environment variable(s): {', '.join(missing)}\n\n"
        "Configure them when adding the MCP server:\n"
        f"  claude mcp add -e {missing[0]}=... s3-mcp -- uvx s3-mcp"
    )


def load_config() -> S3Config:
    """Build the bucket configuration from ``S3_*`` environment variables.

    Raises:
        ConfigurationError: One or more required variables are unset or
            empty. Every missing name is listed, not just the first.
    """
    try:
        return S3Config()
    except ValidationError as exc:
        missing = _missing_env_vars(exc)
        if not missing:
            raise
        raise ConfigurationError(missing, _missing_message(missing)) from None

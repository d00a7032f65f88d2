"""FastMCP server: S3-compatible object storage tools over stdio.

Wires configuration, the object store, the HTTP client used for URL
fetches, and the tool registry into a FastMCP server, then serves it until
the client disconnects or SIGINT/SIGTERM arrives.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import os
import signal
import sys
from typing import Annotated, Any

import httpx
from mcp import types
from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel, Field, ValidationError

from s3_mcp import __version__
from s3_mcp.core.config import LOG_LEVELS, S3Config, ServerConfig, load_config
from s3_mcp.core.exceptions import ConfigurationError
from s3_mcp.models.tools import (
    DeleteFileInput,
    ListFilesInput,
    ToolResult,
    UploadBase64Input,
    UploadFileInput,
    UploadFromUrlInput,
)
from s3_mcp.persistence import create_object_store
from s3_mcp.skills.storage_tools import TOOL_SPECS, ToolRegistry

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _argument(model: type[BaseModel], field: str) -> Any:
    """Tool parameter annotation mirroring an input-model field (type, description, bounds)."""
    info = model.model_fields[field]
    return Annotated[(info.annotation, Field(description=info.description), *info.metadata)]


FilePathArg = _argument(UploadFileInput, "file_path")
KeyArg = _argument(UploadFileInput, "key")
DataArg = _argument(UploadBase64Input, "data")
FilenameArg = _argument(UploadBase64Input, "filename")
ContentTypeArg = _argument(UploadBase64Input, "content_type")
UrlArg = _argument(UploadFromUrlInput, "url")
FilenameOverrideArg = _argument(UploadFromUrlInput, "filename")
PrefixArg = _argument(ListFilesInput, "prefix")
MaxResultsArg = _argument(ListFilesInput, "max_results")
ObjectKeyArg = _argument(DeleteFileInput, "key")


def render(result: ToolResult) -> types.CallToolResult:
    """Convert a tool envelope into an MCP tool result."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=result.to_text())],
        isError=not result.ok,
    )


def create_server(registry: ToolRegistry, name: str = "s3-mcp") -> FastMCP:
    """Create a FastMCP server exposing the registry's tools."""
    mcp = FastMCP(name)
    specs = {spec.name: spec for spec in TOOL_SPECS}

    def tool(tool_name: str):
        spec = specs[tool_name]
        return mcp.tool(name=spec.name, description=spec.description, structured_output=False)

    async def call(tool_name: str, **arguments: Any) -> types.CallToolResult:
        return render(await registry.dispatch(tool_name, arguments))

    @tool("upload_file")
    async def upload_file(file_path: FilePathArg, key: KeyArg = None) -> types.CallToolResult:
        return await call("upload_file", file_path=file_path, key=key)

    @tool("upload_base64")
    async def upload_base64(
        data: DataArg,
        filename: FilenameArg,
        content_type: ContentTypeArg = None,
        key: KeyArg = None,
    ) -> types.CallToolResult:
        return await call("upload_base64", data=data, filename=filename,
                          content_type=content_type, key=key)

    @tool("upload_from_url")
    async def upload_from_url(
        url: UrlArg,
        filename: FilenameOverrideArg = None,
        key: KeyArg = None,
    ) -> types.CallToolResult:
        return await call("upload_from_url", url=url, filename=filename, key=key)

    @tool("list_files")
    async def list_files(prefix: PrefixArg = None, max_results: MaxResultsArg = 20) -> types.CallToolResult:
        return await call("list_files", prefix=prefix, max_results=max_results)

    @tool("delete_file")
    async def delete_file(key: ObjectKeyArg) -> types.CallToolResult:
        return await call("delete_file", key=key)

    return mcp


async def serve(config: S3Config, server_config: ServerConfig) -> None:
    """Serve the tools over stdio until EOF or a shutdown signal.

    On SIGINT/SIGTERM the session is cancelled, the HTTP client closed and
    the process exits with status 0. The stdin reader blocks in a worker
    thread until EOF, so the exit cannot wait for the transport to unwind.
    """
    store = create_object_store(config)
    async with httpx.AsyncClient(follow_redirects=True) as http_client:
        mcp = create_server(ToolRegistry(store, config, http_client), server_config.name)
        run = asyncio.ensure_future(mcp.run_stdio_async())
        stopping = _install_signal_handlers()
        stop_wait = asyncio.ensure_future(stopping.wait())
        logger.info("Serving %d tools over stdio", len(TOOL_SPECS))

        done, _ = await asyncio.wait({run, stop_wait}, return_when=asyncio.FIRST_COMPLETED)
        if run in done:
            stop_wait.cancel()
            run.result()
            return

        logger.info("Shutdown signal received, closing server")
        run.cancel()
    _exit_process(0)


def _install_signal_handlers() -> asyncio.Event:
    stopping = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Windows event loops have no signal handler support.
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stopping.set)
    return stopping


def _exit_process(code: int) -> None:
    logging.shutdown()
    sys.stdout.flush()
    sys.stderr.flush()
    os._exit(code)


def configure_logging(level: str) -> None:
    """Log to stderr; stdout carries the protocol."""
    logging.basicConfig(stream=sys.stderr, level=level, format=LOG_FORMAT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s3-mcp",
        description="MCP server for uploading, listing and deleting files in an S3-compatible bucket",
    )
    parser.add_argument("--log-level", default=None, type=str.upper, choices=LOG_LEVELS,
                        help="Logging level (default: $S3_MCP_LOG_LEVEL or INFO)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        server_config = ServerConfig()
    except ValidationError as exc:
        print(f"Invalid server settings:\n{exc}", file=sys.stderr)
        sys.exit(1)
    configure_logging(args.log_level or server_config.log_level)

    try:
        config = load_config()
    except ConfigurationError as exc:
        print(exc, file=sys.stderr)
        sys.exit(1)

    logger.info("Starting %s %s for bucket %r at %s",
                server_config.name, __version__, config.bucket, config.endpoint)
    asyncio.run(serve(config, server_config))


if __name__ == "__main__":
    main()

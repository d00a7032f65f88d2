"""MCP server exposing S3-compatible object storage as agent tools."""

from __future__ import annotations

__version__ = "0.1.0"

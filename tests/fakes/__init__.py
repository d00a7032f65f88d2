"""Shared test doubles — re-export memory backends."""

from __future__ import annotations

from s3_mcp.persistence.memory_backend import MemoryObjectStore

__all__ = ["MemoryObjectStore"]

"""Filename extension to MIME type lookup."""

from __future__ import annotations

import mimetypes

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Entries missing from, or outdated in, older interpreters' default table.
_OVERRIDES = {
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".json": "application/json",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".webm": "video/webm",
    ".md": "text/markdown",
    ".wasm": "application/wasm",
}

# A fresh MimeTypes instance only carries Python's built-in table, so results
# do not depend on the host's mime.types files.
_table = mimetypes.MimeTypes()
for _ext, _type in _OVERRIDES.items():
    _table.add_type(_type, _ext)


def detect_content_type(filename: str) -> str:
    """MIME type for ``filename``, or ``application/octet-stream``."""
    content_type, _encoding = _table.guess_type(filename, strict=False)
    return content_type or DEFAULT_CONTENT_TYPE

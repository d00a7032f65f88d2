"""Object key generation for uploaded files."""

from __future__ import annotations

import random
import re
import string
from datetime import datetime, timezone

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")
_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
SUFFIX_LENGTH = 6


def sanitize_filename(filename: str) -> str:
    """Replace every character outside ``[A-Za-z0-9._-]`` with ``_``."""
    return _UNSAFE_CHARS.sub("_", filename)


def generate_key(filename: str, prefix: str = "") -> str:
    """Build ``<prefix><YYYYMMDD>-<rand6>-<sanitized filename>``.

    The date is today's UTC date. The suffix is not cryptographically random
    and no existence check is made against the bucket.
    """
    date = datetime.now(timezone.utc).strftime("%Y%m%d")
    suffix = "".join(random.choices(_SUFFIX_ALPHABET, k=SUFFIX_LENGTH))
    return f"{prefix}{date}-{suffix}-{sanitize_filename(filename)}"

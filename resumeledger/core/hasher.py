"""Canonical hashing helpers for resume content.

Content is serialized once, canonically, at creation time. The same bytes
are stored and hashed so later reads can prove they are unchanged.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes — deterministic, sorted, compact.

    - sorted keys
    - no whitespace separators (",", ":")
    - ensure_ascii=True
    - UTF-8 encoding
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def address_of_bytes(data: bytes) -> str:
    """Content-address already-canonical bytes."""
    return f"sha256:{sha256_hex(data)}"

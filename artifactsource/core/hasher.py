"""Hashing helpers for content-addressed identifiers."""

from __future__ import annotations

import hashlib
import json
from typing import Any


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes: sorted keys, compact separators."""
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha1_hex(data: bytes) -> str:
    """Return the SHA-1 hex digest of raw bytes."""
    return hashlib.sha1(data).hexdigest()


def git_blob_sha(content: bytes) -> str:
    """Git object id of a blob holding *content*.

    Matches ``git hash-object``, so ids minted locally agree with the ids
    GitHub returns for the same bytes.
    """
    header = f"blob {len(content)}\0".encode("ascii")
    return sha1_hex(header + content)


def content_sha(obj: Any) -> str:
    """SHA-1 of the canonical JSON form of a JSON-serializable object."""
    return sha1_hex(canonical_json_bytes(obj))

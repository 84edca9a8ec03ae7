"""Kroki payload encoding.

Kroki accepts a diagram inline in the request path: the UTF-8 source is
deflated with zlib and Base64-encoded with the URL-safe alphabet
('+' -> '-', '/' -> '_'). Padding is kept as produced.
"""

from __future__ import annotations

import base64
import zlib


def encode(specification: str) -> str:
    """Deflate and URL-safe Base64-encode a diagram specification."""
    compressed = zlib.compress(specification.encode("utf-8"))
    return base64.urlsafe_b64encode(compressed).decode("ascii")


def decode(payload: str) -> str:
    """Inverse of `encode`; recovers the original specification text."""
    compressed = base64.urlsafe_b64decode(payload.encode("ascii"))
    return zlib.decompress(compressed).decode("utf-8")

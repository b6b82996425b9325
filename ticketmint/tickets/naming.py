"""Content-derived file names.

Downloaded logos, composed images and token documents are stored under a
name derived from a 64-bit digest of their content (or, for the image, of
the ticket it was rendered from). Equal content always maps to the same name.
"""

import hashlib
import json
from typing import Any

from pydantic import BaseModel

DIGEST_SIZE = 8  # 64-bit


def _canonical_bytes(value: Any) -> bytes:
    """Serialize a value into the bytes that get hashed."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, BaseModel):
        return value.model_dump_json(by_alias=True).encode("utf-8")
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str).encode("utf-8")


def content_digest(value: Any) -> str:
    """Compute a 64-bit BLAKE2b digest of a value.

    Args:
        value: Raw bytes, text, a pydantic model, or JSON-compatible data

    Returns:
        16-character lowercase hex string
    """
    return hashlib.blake2b(_canonical_bytes(value), digest_size=DIGEST_SIZE).hexdigest()


def hashed_filename(value: Any, extension: str) -> str:
    """Build ``{digest}.{extension}`` for a value."""
    return f"{content_digest(value)}.{extension.lstrip('.')}"

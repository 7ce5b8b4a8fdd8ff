"""Encoding helpers for drawing payloads and thumbnails."""

from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any

from core.exceptions import PayloadDecodeError, PayloadEncodeError, ThumbnailDecodeError

JSON_CONTENT_TYPE = "application/json"
THUMBNAIL_CONTENT_TYPE = "image/png"

_DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")


def encode_drawing(data: Any) -> bytes:
    """Serialize a drawing payload to UTF-8 JSON.

    Binary input is treated as an already serialized document and returned
    unchanged.
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    try:
        text = json.dumps(data, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise PayloadEncodeError(
            f"Drawing payload is not JSON serializable: {exc}",
            {"type": type(data).__name__},
        ) from exc
    return text.encode("utf-8")


def decode_drawing(raw: bytes, *, key: str = "") -> Any:
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise PayloadDecodeError(f"Stored drawing is not valid JSON: {exc}", {"key": key}) from exc


def decode_thumbnail(image: bytes | bytearray | memoryview | str) -> bytes:
    """Return the binary thumbnail for raw bytes, base64 or a base64 data URL."""
    if isinstance(image, (bytes, bytearray, memoryview)):
        return bytes(image)
    if not isinstance(image, str):
        raise ThumbnailDecodeError(
            f"Unsupported thumbnail type: {type(image).__name__}",
            {"type": type(image).__name__},
        )

    encoded = _DATA_URL_PREFIX.sub("", image, count=1).strip()
    # browsers occasionally drop the trailing padding
    encoded += "=" * (-len(encoded) % 4)
    try:
        return base64.b64decode(encoded)
    except (binascii.Error, ValueError) as exc:
        raise ThumbnailDecodeError(f"Thumbnail is not valid base64: {exc}") from exc


__all__ = [
    "JSON_CONTENT_TYPE",
    "THUMBNAIL_CONTENT_TYPE",
    "encode_drawing",
    "decode_drawing",
    "decode_thumbnail",
]

"""Object key naming for drawing payloads.

Every drawing owns two objects that share the folder ``drawings/{id}/``:
the JSON document and its raster thumbnail. Nothing else ties them
together, so these helpers are the single source of truth for the layout.
"""

from __future__ import annotations

DRAWINGS_ROOT = "drawings"
DATA_FILENAME = "data.json"
THUMBNAIL_FILENAME = "thumbnail.png"


def drawing_folder(drawing_id: str) -> str:
    return f"{DRAWINGS_ROOT}/{drawing_id}"


def data_key(drawing_id: str) -> str:
    """Key of the drawing JSON document. The identifier is not validated."""

    return f"{drawing_folder(drawing_id)}/{DATA_FILENAME}"


def thumbnail_key(drawing_id: str) -> str:
    """Key of the drawing thumbnail image."""

    return f"{drawing_folder(drawing_id)}/{THUMBNAIL_FILENAME}"


__all__ = [
    "DRAWINGS_ROOT",
    "DATA_FILENAME",
    "THUMBNAIL_FILENAME",
    "drawing_folder",
    "data_key",
    "thumbnail_key",
]

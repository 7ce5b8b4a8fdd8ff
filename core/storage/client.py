"""Drawing-level storage operations on top of an object storage backend.

``DrawingStorage`` derives the object keys for a drawing, wraps every
put/get/delete in the fixed retry policy and turns raw bytes into drawing
payloads. It holds no per-call state, so one instance is shared by all
concurrent requests.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Iterable

from loguru import logger

from core.exceptions import (
    DeleteError,
    DownloadError,
    EmptyResponseError,
    ObjectNotFoundError,
    UploadError,
)
from core.storage import ObjectStorage
from core.storage.codec import (
    JSON_CONTENT_TYPE,
    THUMBNAIL_CONTENT_TYPE,
    decode_drawing,
    decode_thumbnail,
    encode_drawing,
)
from core.storage.keys import DATA_FILENAME, DRAWINGS_ROOT, data_key, drawing_folder, thumbnail_key
from core.storage.retry import DEFAULT_RETRY_POLICY, RetryPolicy, with_retry


@dataclass(frozen=True)
class UploadResult:
    key: str
    url: str


@dataclass
class DeleteResult:
    """Per-object outcome of a best-effort drawing deletion."""

    drawing_id: str
    succeeded: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class DrawingStorage:
    def __init__(self, backend: ObjectStorage, policy: RetryPolicy | None = None) -> None:
        self.backend = backend
        self.policy = policy or DEFAULT_RETRY_POLICY

    async def _put(self, key: str, data: bytes, content_type: str) -> UploadResult:
        url = await with_retry(
            "upload",
            key,
            lambda: self.backend.put(key, data, content_type),
            policy=self.policy,
            error_cls=UploadError,
        )
        logger.info("Uploaded {key} ({size} bytes)", key=key, size=len(data))
        return UploadResult(key=key, url=url)

    async def _get(self, key: str) -> bytes:
        data = await with_retry(
            "download",
            key,
            lambda: self.backend.get(key),
            policy=self.policy,
            error_cls=DownloadError,
        )
        if data is None:
            raise EmptyResponseError("No data received from storage", {"key": key})
        return data

    async def _delete(self, key: str) -> None:
        await with_retry(
            "delete",
            key,
            lambda: self.backend.remove([key]),
            policy=self.policy,
            error_cls=DeleteError,
        )

    async def upload_drawing(self, drawing_id: str, data: Any) -> UploadResult:
        """Store the drawing JSON, replacing any previous version."""
        return await self._put(data_key(drawing_id), encode_drawing(data), JSON_CONTENT_TYPE)

    async def upload_thumbnail(self, drawing_id: str, image: bytes | str) -> UploadResult:
        """Store the thumbnail given as bytes, base64 or a base64 data URL."""
        return await self._put(thumbnail_key(drawing_id), decode_thumbnail(image), THUMBNAIL_CONTENT_TYPE)

    async def download_drawing(self, drawing_id: str) -> Any:
        key = data_key(drawing_id)
        return decode_drawing(await self._get(key), key=key)

    async def download_thumbnail(self, drawing_id: str) -> bytes:
        return await self._get(thumbnail_key(drawing_id))

    async def drawing_exists(self, drawing_id: str) -> bool:
        """Whether the drawing JSON is present. The thumbnail is not checked."""
        try:
            names = await self.backend.list(drawing_folder(drawing_id), search=DATA_FILENAME, limit=1)
        except ObjectNotFoundError:
            return False
        return DATA_FILENAME in names

    async def delete_drawing(self, drawing_id: str) -> DeleteResult:
        """Delete the JSON and the thumbnail concurrently without raising.

        Either delete may fail after its retries; the failure is recorded in
        the result and logged, and the other delete still runs.
        """
        keys = [data_key(drawing_id), thumbnail_key(drawing_id)]
        outcomes = await asyncio.gather(*(self._delete(key) for key in keys), return_exceptions=True)

        result = DeleteResult(drawing_id=drawing_id)
        for key, outcome in zip(keys, outcomes):
            if isinstance(outcome, Exception):
                result.failed[key] = str(outcome)
                logger.warning("Delete of {key} failed: {error}", key=key, error=str(outcome))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.succeeded.append(key)
        return result

    async def cleanup_orphans(self, valid_ids: Iterable[str]) -> list[str]:
        """Delete stored drawings that no longer have a metadata record."""
        keep = set(valid_ids)
        stored = await self.backend.list(DRAWINGS_ROOT)
        orphans = sorted(drawing_id for drawing_id in stored if drawing_id not in keep)
        logger.info(
            "Orphan cleanup: {stored} stored, {valid} valid, {orphans} orphaned",
            stored=len(stored),
            valid=len(keep),
            orphans=len(orphans),
        )
        for drawing_id in orphans:
            result = await self.delete_drawing(drawing_id)
            if not result.ok:
                logger.warning("Orphan {drawing_id} only partially removed", drawing_id=drawing_id)
        return orphans


__all__ = ["DrawingStorage", "UploadResult", "DeleteResult"]

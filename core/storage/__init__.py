"""Storage abstraction (S3-compatible bucket or local filesystem fallback)."""

from __future__ import annotations

from typing import Protocol, Sequence


class ObjectStorage(Protocol):
    async def put(self, key: str, data: bytes, content_type: str) -> str:  # returns public url
        ...

    async def get(self, key: str) -> bytes | None:  # raises ObjectNotFoundError
        ...

    async def remove(self, keys: Sequence[str]) -> None:
        ...

    async def list(self, prefix: str, search: str | None = None, limit: int | None = None) -> list[str]:
        ...

    def public_url(self, key: str) -> str:
        ...


__all__ = ["ObjectStorage"]

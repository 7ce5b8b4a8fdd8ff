from __future__ import annotations

import asyncio
import contextlib
import os
import tempfile
from pathlib import Path
from typing import Sequence
from urllib.parse import quote

from core.exceptions import ObjectNotFoundError, StorageError


class LocalStorage:
    """Filesystem backend laid out exactly like the bucket keys.

    Served by the API under ``base_url`` so uploads get a usable public URL.
    """

    def __init__(self, root: Path, base_url: str = "/files") -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self.base_url = base_url.rstrip("/")

    def _path(self, key: str) -> Path:
        root = self.root.resolve()
        path = (root / key.strip("/")).resolve()
        if path != root and root not in path.parents:
            raise StorageError(f"Key escapes storage root: {key}", {"key": key})
        return path

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/{quote(key.lstrip('/'), safe='/')}"

    def _write(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
        try:
            with os.fdopen(fd, "wb") as fp:
                fp.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        path = self._path(key)
        await asyncio.to_thread(self._write, path, data)
        return self.public_url(key)

    async def get(self, key: str) -> bytes | None:
        path = self._path(key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise ObjectNotFoundError(key) from exc

    def _remove(self, keys: Sequence[str]) -> None:
        root = self.root.resolve()
        for key in keys:
            path = self._path(key)
            with contextlib.suppress(FileNotFoundError):
                path.unlink()
            # prune folders left empty, stopping at the root
            parent = path.parent
            while parent != root:
                try:
                    parent.rmdir()
                except OSError:
                    break  # not empty, or already pruned by a concurrent delete
                parent = parent.parent

    async def remove(self, keys: Sequence[str]) -> None:
        await asyncio.to_thread(self._remove, list(keys))

    def _list(self, prefix: str, search: str | None, limit: int | None) -> list[str]:
        folder = self._path(prefix)
        if not folder.is_dir():
            return []
        names = sorted(
            entry.name
            for entry in folder.iterdir()
            if not entry.name.startswith(".") and (search is None or entry.name.startswith(search))
        )
        return names[:limit] if limit is not None else names

    async def list(self, prefix: str, search: str | None = None, limit: int | None = None) -> list[str]:
        return await asyncio.to_thread(self._list, prefix, search, limit)


__all__ = ["LocalStorage"]

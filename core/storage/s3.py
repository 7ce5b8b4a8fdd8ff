from __future__ import annotations

import asyncio
from typing import Any, Optional, Sequence
from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from core.exceptions import ObjectNotFoundError, StorageError

_NOT_FOUND_CODES = {"NoSuchKey", "NotFound", "404"}


class S3Storage:
    """S3-compatible bucket backend (AWS, MinIO, Supabase storage, R2).

    The boto3 client is created once and shared; calls run in worker threads.
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        public_base_url: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        client: Any = None,
    ) -> None:
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.region = region
        self.endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        if client is None:
            session = boto3.session.Session(region_name=region) if region else boto3.session.Session()
            client = session.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                config=Config(signature_version="s3v4", retries={"max_attempts": 1}),
            )
        self.client = client

    def _key(self, key: str) -> str:
        return f"{self.prefix}/{key}" if self.prefix else key

    def public_url(self, key: str) -> str:
        path = quote(self._key(key), safe="/")
        if self.public_base_url:
            return f"{self.public_base_url}/{path}"
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket}/{path}"
        region = self.region or "us-east-1"
        return f"https://{self.bucket}.s3.{region}.amazonaws.com/{path}"

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        await asyncio.to_thread(
            self.client.put_object,
            Bucket=self.bucket,
            Key=self._key(key),
            Body=data,
            ContentType=content_type,
        )
        return self.public_url(key)

    def _get(self, key: str) -> bytes | None:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=self._key(key))
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(key) from exc
            raise
        body = response.get("Body")
        if body is None:
            return None
        return body.read()

    async def get(self, key: str) -> bytes | None:
        return await asyncio.to_thread(self._get, key)

    def _remove(self, keys: Sequence[str]) -> None:
        response = self.client.delete_objects(
            Bucket=self.bucket,
            Delete={"Objects": [{"Key": self._key(key)} for key in keys], "Quiet": True},
        )
        errors = response.get("Errors") or []
        if errors:
            first = errors[0]
            raise StorageError(
                f"Failed to delete {first.get('Key')}: {first.get('Message', first.get('Code'))}",
                {"key": str(first.get("Key")), "code": str(first.get("Code"))},
            )

    async def remove(self, keys: Sequence[str]) -> None:
        if not keys:
            return
        await asyncio.to_thread(self._remove, list(keys))

    def _list(self, prefix: str, search: str | None, limit: int | None) -> list[str]:
        folder = self._key(prefix.strip("/")) + "/"
        params: dict[str, Any] = {
            "Bucket": self.bucket,
            "Prefix": folder + (search or ""),
            "Delimiter": "/",
        }
        if limit is not None:
            params["MaxKeys"] = limit
        names: list[str] = []
        paginator = self.client.get_paginator("list_objects_v2")
        for page in paginator.paginate(**params):
            names.extend(item["Key"][len(folder):] for item in page.get("Contents", []))
            names.extend(item["Prefix"][len(folder):].rstrip("/") for item in page.get("CommonPrefixes", []))
            if limit is not None and len(names) >= limit:
                break
        names = sorted(name for name in names if name)
        return names[:limit] if limit is not None else names

    async def list(self, prefix: str, search: str | None = None, limit: int | None = None) -> list[str]:
        return await asyncio.to_thread(self._list, prefix, search, limit)


__all__ = ["S3Storage"]

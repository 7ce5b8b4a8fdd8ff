"""Build the configured storage backend and drawing client."""

from __future__ import annotations

from loguru import logger

from core.exceptions import ConfigurationError
from core.settings import Settings
from core.storage import ObjectStorage
from core.storage.client import DrawingStorage


def create_storage(settings: Settings) -> ObjectStorage:
    storage = settings.storage
    if storage.backend == "local":
        from core.storage.local import LocalStorage

        logger.info("Using local drawing storage at {root}", root=str(storage.local_root))
        return LocalStorage(storage.local_root, base_url=storage.local_base_url)

    missing = storage.missing_requirements()
    if missing:
        raise ConfigurationError(
            f"Missing required storage configuration: {', '.join(missing)}",
            {"missing": ", ".join(missing)},
        )

    # boto3 is only imported when a bucket is actually configured
    from core.storage.s3 import S3Storage

    logger.info(
        "Using S3 drawing storage bucket={bucket} endpoint={endpoint}",
        bucket=storage.bucket,
        endpoint=storage.endpoint_url or "aws",
    )
    return S3Storage(
        bucket=storage.bucket,
        prefix=storage.prefix,
        region=storage.region,
        endpoint_url=storage.endpoint_url,
        public_base_url=storage.public_base_url,
        access_key=storage.access_key,
        secret_key=storage.secret_key,
    )


def create_drawing_storage(settings: Settings) -> DrawingStorage:
    return DrawingStorage(create_storage(settings), policy=settings.retry.policy())


__all__ = ["create_storage", "create_drawing_storage"]

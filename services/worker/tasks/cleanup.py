from __future__ import annotations

import asyncio

from celery import shared_task
from loguru import logger

from core.settings import get_settings
from core.storage.factory import create_drawing_storage


@shared_task(name="services.worker.tasks.cleanup_orphaned_drawings")
def cleanup_orphaned_drawings(valid_ids: list[str]) -> list[str]:
    """Remove stored drawings whose ids are missing from ``valid_ids``.

    The metadata layer passes the ids it still knows about; everything else
    under ``drawings/`` is deleted best-effort.
    """
    storage = create_drawing_storage(get_settings())
    removed = asyncio.run(storage.cleanup_orphans(valid_ids))
    logger.info("Removed {count} orphaned drawings", count=len(removed))
    return removed

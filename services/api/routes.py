from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, Response

from core.storage.client import DrawingStorage
from core.storage.codec import THUMBNAIL_CONTENT_TYPE
from services.api.schemas import (
    DeleteResponse,
    ExistsResponse,
    ErrorResponse,
    ThumbnailUploadRequest,
    UploadResultOut,
)


router = APIRouter(
    prefix="/v1/drawings",
    tags=["drawings"],
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)


def get_drawing_storage(request: Request) -> DrawingStorage:
    return request.app.state.drawing_storage


Storage = Annotated[DrawingStorage, Depends(get_drawing_storage)]


@router.put("/{drawing_id}/data", response_model=UploadResultOut)
async def put_drawing_data(drawing_id: str, storage: Storage, data: Any = Body(None)) -> UploadResultOut:
    result = await storage.upload_drawing(drawing_id, data)
    return UploadResultOut(key=result.key, url=result.url)


@router.get("/{drawing_id}/data")
async def get_drawing_data(drawing_id: str, storage: Storage) -> Any:
    return await storage.download_drawing(drawing_id)


@router.put("/{drawing_id}/thumbnail", response_model=UploadResultOut)
async def put_drawing_thumbnail(
    drawing_id: str,
    payload: ThumbnailUploadRequest,
    storage: Storage,
) -> UploadResultOut:
    result = await storage.upload_thumbnail(drawing_id, payload.image)
    return UploadResultOut(key=result.key, url=result.url)


@router.get("/{drawing_id}/thumbnail")
async def get_drawing_thumbnail(drawing_id: str, storage: Storage) -> Response:
    content = await storage.download_thumbnail(drawing_id)
    return Response(content=content, media_type=THUMBNAIL_CONTENT_TYPE)


@router.get("/{drawing_id}/exists", response_model=ExistsResponse)
async def get_drawing_exists(drawing_id: str, storage: Storage) -> ExistsResponse:
    return ExistsResponse(drawing_id=drawing_id, exists=await storage.drawing_exists(drawing_id))


@router.delete("/{drawing_id}", response_model=DeleteResponse)
async def delete_drawing(drawing_id: str, storage: Storage) -> DeleteResponse:
    # partial failures are reported in the body, never as an error status
    result = await storage.delete_drawing(drawing_id)
    return DeleteResponse(drawing_id=drawing_id, deleted=result.succeeded, failed=result.failed)


__all__ = ["router", "get_drawing_storage"]

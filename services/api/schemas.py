from __future__ import annotations

from pydantic import BaseModel, Field


class UploadResultOut(BaseModel):
    key: str
    url: str


class ThumbnailUploadRequest(BaseModel):
    image: str = Field(..., min_length=1, description="Base64 image or base64 data URL")


class ExistsResponse(BaseModel):
    drawing_id: str
    exists: bool


class DeleteResponse(BaseModel):
    drawing_id: str
    deleted: list[str] = Field(default_factory=list)
    failed: dict[str, str] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: dict[str, str] = Field(default_factory=dict)

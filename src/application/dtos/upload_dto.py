from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CreateUploadRequest(BaseModel):
    file_name: str = Field(..., description="Client-side file name; its suffix decides the stored extension", example="shot.jpg")


class UploadResponse(BaseModel):
    id: str = Field(..., description="Unique identifier of the upload")
    file_name: str
    state: str = Field(..., description="pending until content is stored, then done", example="done")
    size: int | None = Field(None, description="Size of the stored content in bytes")
    created_at: datetime

from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from src.application.dtos.upload_dto import CreateUploadRequest, UploadResponse
from src.domain.entities.upload import UploadEntity
from src.domain.services.validation import require_text
from src.infrastructure.api.dependencies import get_current_user, get_upload_repo
from src.infrastructure.database.repositories.upload_repository import UploadRepository

router = APIRouter(
    prefix="/uploads",
    tags=["Uploads"],
    responses={401: {"description": "Unauthorized - Invalid or missing authentication token"}},
)


def _to_response(entity: UploadEntity) -> UploadResponse:
    return UploadResponse(
        id=entity.id,
        file_name=entity.file_name,
        state=entity.state.value,
        size=entity.size,
        created_at=entity.created_at,
    )


@router.post("", response_model=UploadResponse, status_code=status.HTTP_201_CREATED, summary="Start Upload")
def create_upload(
    body: CreateUploadRequest,
    user=Depends(get_current_user),
    uploads: UploadRepository = Depends(get_upload_repo),
):
    """Register a pending upload; its content is sent separately."""
    require_text("file_name", body.file_name)
    return _to_response(uploads.create(body.file_name))


@router.put("/{upload_id}/content", response_model=UploadResponse, summary="Store Upload Content")
def store_upload_content(
    upload_id: str,
    file: UploadFile = File(..., description="Binary content of the upload"),
    user=Depends(get_current_user),
    uploads: UploadRepository = Depends(get_upload_repo),
):
    """Store the bytes of a pending upload and mark it done."""
    existing = uploads.get(upload_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Upload not found")
    if existing.is_done:
        raise HTTPException(status_code=409, detail="Upload already has content")
    return _to_response(uploads.store_content(upload_id, file.file.read()))


@router.get("/{upload_id}", response_model=UploadResponse, summary="Get Upload")
def get_upload(
    upload_id: str,
    user=Depends(get_current_user),
    uploads: UploadRepository = Depends(get_upload_repo),
):
    entity = uploads.get(upload_id)
    if entity is None:
        raise HTTPException(status_code=404, detail="Upload not found")
    return _to_response(entity)

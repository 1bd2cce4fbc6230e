from __future__ import annotations

from dataclasses import asdict
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from src.application.context import PictureContext
from src.application.dtos.common_dto import ErrorResponse
from src.application.dtos.picture_dto import (
    CreateEmptyPictureRequest,
    CreatePictureRequest,
    CropPictureRequest,
    DeletePictureResponse,
    IngestFromUrlRequest,
    PictureEventItem,
    PictureHistoryResponse,
    PictureIdResponse,
    PictureResponse,
    ReconciliationResponse,
    UploadPictureRequest,
)
from src.application.use_cases.create_picture import CreateEmptyPictureUseCase, CreatePictureUseCase
from src.application.use_cases.crop_picture import CropPictureUseCase
from src.application.use_cases.delete_picture import DeletePictureUseCase
from src.application.use_cases.ingest_from_url import IngestFromUrlUseCase
from src.application.use_cases.reconcile_assets import ReconcileAssetsUseCase
from src.application.use_cases.upload_intake import OriginalUpload
from src.application.use_cases.upload_picture import UploadPictureUseCase
from src.infrastructure.api.dependencies import get_current_user, get_picture_context
from src.infrastructure.database.supabase_client import UserInfo

router = APIRouter(
    prefix="/pictures",
    tags=["Pictures"],
    responses={
        401: {"description": "Unauthorized - Invalid or missing authentication token"},
        404: {"model": ErrorResponse, "description": "Not Found - Picture or upload does not exist"},
        409: {"model": ErrorResponse, "description": "Conflict - Upload is not finished yet"},
    },
)


def _original(req) -> OriginalUpload:
    return OriginalUpload(width=req.width, height=req.height, upload_id=req.upload_id)


@router.post(
    "/empty",
    response_model=PictureIdResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Empty Picture",
)
def create_empty_picture(
    body: CreateEmptyPictureRequest,
    user: UserInfo = Depends(get_current_user),
    ctx: PictureContext = Depends(get_picture_context),
):
    picture_id = CreateEmptyPictureUseCase(ctx).execute(body.name, body.purpose, owner=user.id)
    return PictureIdResponse(id=picture_id)


@router.post(
    "",
    response_model=PictureIdResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Picture",
    description="Create a picture and attach a finished upload as its original. The upload is consumed.",
)
def create_picture(
    body: CreatePictureRequest,
    user: UserInfo = Depends(get_current_user),
    ctx: PictureContext = Depends(get_picture_context),
):
    picture_id = CreatePictureUseCase(ctx).execute(body.name, _original(body.original), body.purpose, owner=user.id)
    return PictureIdResponse(id=picture_id)


@router.post(
    "/from-url",
    response_model=PictureIdResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Picture From URL",
    responses={
        422: {"description": "The downloaded resource is not a readable image"},
        502: {"model": ErrorResponse, "description": "The resource could not be downloaded"},
    },
)
def ingest_from_url(
    body: IngestFromUrlRequest,
    user: UserInfo = Depends(get_current_user),
    ctx: PictureContext = Depends(get_picture_context),
):
    picture_id = IngestFromUrlUseCase(ctx).execute(
        body.name, body.purpose, body.url, owner=user.id, pre_cropped=body.cropped
    )
    return PictureIdResponse(id=picture_id)


@router.post(
    "/reconcile",
    response_model=ReconciliationResponse,
    summary="Reconcile Assets",
    description="Recreate missing asset directories and report missing or unreferenced files. Admin only.",
)
def reconcile(
    user: UserInfo = Depends(get_current_user),
    ctx: PictureContext = Depends(get_picture_context),
):
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    report = ReconcileAssetsUseCase(ctx).execute()
    return ReconciliationResponse(clean=report.clean, **asdict(report))


@router.post(
    "/{picture_id}/upload",
    response_model=PictureIdResponse,
    summary="Upload Original",
    description="""
    Attach an original to a picture that has none. If the picture already has
    an original, a new picture is created for the new one and its id returned.
    """,
)
def upload_picture(
    picture_id: str,
    body: UploadPictureRequest,
    user: UserInfo = Depends(get_current_user),
    ctx: PictureContext = Depends(get_picture_context),
):
    result_id = UploadPictureUseCase(ctx).execute(picture_id, _original(body.original), owner=user.id)
    return PictureIdResponse(id=result_id)


@router.post(
    "/{picture_id}/crop",
    response_model=PictureIdResponse,
    summary="Crop Picture",
    description="""
    Store a crop for a picture.

    - First crop: the picture is updated in place and the same id is returned.
    - Later crops: a new picture version is created (original copied, new crop
      attached) and its id is returned; the previous version is not modified.
    """,
)
def crop_picture(
    picture_id: str,
    body: CropPictureRequest,
    user: UserInfo = Depends(get_current_user),
    ctx: PictureContext = Depends(get_picture_context),
):
    result_id = CropPictureUseCase(ctx).execute(picture_id, body.crop.to_geometry(), body.upload_id, requester=user.id)
    return PictureIdResponse(id=result_id)


@router.get("/{picture_id}", response_model=PictureResponse, summary="Get Picture")
def get_picture(
    picture_id: str,
    user: UserInfo = Depends(get_current_user),
    ctx: PictureContext = Depends(get_picture_context),
):
    entity = ctx.events.get(picture_id)
    if entity is None:
        raise HTTPException(status_code=404, detail="Picture not found")
    return PictureResponse.from_entity(entity)


@router.get("/{picture_id}/history", response_model=PictureHistoryResponse, summary="Picture Event History")
def picture_history(
    picture_id: str,
    user: UserInfo = Depends(get_current_user),
    ctx: PictureContext = Depends(get_picture_context),
):
    events = ctx.events.dump(picture_id)
    if not events:
        raise HTTPException(status_code=404, detail="Picture not found")
    return PictureHistoryResponse(events=[PictureEventItem(**e) for e in events])


@router.delete(
    "/{picture_id}",
    response_model=DeletePictureResponse,
    summary="Delete Picture",
    description="Delete a picture and its asset directory. Requires the admin role.",
    responses={403: {"model": ErrorResponse, "description": "Forbidden - Admin role required"}},
)
def delete_picture(
    picture_id: str,
    user: UserInfo = Depends(get_current_user),
    ctx: PictureContext = Depends(get_picture_context),
):
    DeletePictureUseCase(ctx).execute(picture_id, user.roles)
    return DeletePictureResponse(ok=True)


@router.get(
    "/{picture_id}/files/{role}",
    summary="Download Picture File",
    description="Download the `original` or `crop` file of a picture.",
    response_description="Binary image file data",
    responses={200: {"content": {"image/*": {}}, "description": "Image file content"}},
)
def download_picture_file(
    picture_id: str,
    role: Literal["original", "crop"],
    user: UserInfo = Depends(get_current_user),
    ctx: PictureContext = Depends(get_picture_context),
):
    """Return the binary content of one of a picture's asset files."""
    if ctx.events.get(picture_id) is None:
        raise HTTPException(status_code=404, detail="Picture not found")
    path = ctx.assets.find_asset(picture_id, role)
    if path is None:
        raise HTTPException(status_code=404, detail=f"Picture has no {role} file")
    return FileResponse(path, media_type=f"image/{path.suffix.lstrip('.')}")

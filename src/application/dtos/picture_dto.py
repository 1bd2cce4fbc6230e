from __future__ import annotations

from dataclasses import asdict

from pydantic import BaseModel, Field

from src.domain.entities.picture import CropGeometry, PictureEntity


class OriginalUploadRequest(BaseModel):
    """Dimensions of an uploaded original and the upload holding its bytes."""
    width: int = Field(..., description="Width of the original in pixels", example=1920, gt=0)
    height: int = Field(..., description="Height of the original in pixels", example=1080, gt=0)
    upload_id: str = Field(..., description="ID of a finished upload", min_length=1)


class CropRequestData(BaseModel):
    x: int = Field(..., description="Left offset of the crop in pixels", example=0)
    y: int = Field(..., description="Top offset of the crop in pixels", example=0)
    width: int = Field(..., description="Crop width in pixels", example=400, gt=0)
    height: int = Field(..., description="Crop height in pixels", example=300, gt=0)
    zoom: float = Field(1.0, description="Zoom factor applied before cropping", gt=0)
    orientation: int = Field(0, description="Orientation (rotation) of the crop")

    def to_geometry(self) -> CropGeometry:
        return CropGeometry(
            x=self.x, y=self.y, width=self.width, height=self.height,
            zoom=self.zoom, orientation=self.orientation,
        )


class CreateEmptyPictureRequest(BaseModel):
    name: str = Field(..., description="Display name of the picture", example="Sunset")
    purpose: str = Field(..., description="What the picture is used for", example="banner")


class CreatePictureRequest(BaseModel):
    name: str = Field(..., description="Display name of the picture", example="Sunset")
    purpose: str = Field(..., description="What the picture is used for", example="banner")
    original: OriginalUploadRequest


class UploadPictureRequest(BaseModel):
    original: OriginalUploadRequest


class CropPictureRequest(BaseModel):
    crop: CropRequestData
    upload_id: str = Field(..., description="ID of a finished upload holding the cropped image", min_length=1)


class IngestFromUrlRequest(BaseModel):
    name: str = Field(..., description="Display name of the picture", example="Logo")
    purpose: str = Field(..., description="What the picture is used for", example="banner")
    url: str = Field(..., description="Location of the image to download", example="https://example.com/logo.png")
    cropped: bool = Field(True, description="Start with a full-frame crop")


class PictureIdResponse(BaseModel):
    """Id of the picture an operation produced (may differ from the input id)."""
    id: str = Field(..., description="Resulting picture id")


class OriginalData(BaseModel):
    width: int
    height: int
    extension: str


class PictureResponse(BaseModel):
    id: str
    name: str
    purpose: str
    owner: str | None = None
    file_name: str | None = None
    original: OriginalData | None = None
    crop: CropRequestData | None = None

    @classmethod
    def from_entity(cls, entity: PictureEntity) -> PictureResponse:
        return cls(
            id=entity.id,
            name=entity.name,
            purpose=entity.purpose,
            owner=entity.owner,
            file_name=entity.file_name,
            original=OriginalData(**asdict(entity.original)) if entity.original else None,
            crop=CropRequestData(**asdict(entity.crop)) if entity.crop else None,
        )


class PictureEventItem(BaseModel):
    type: str
    picture: str
    data: dict


class PictureHistoryResponse(BaseModel):
    events: list[PictureEventItem]


class DeletePictureResponse(BaseModel):
    ok: bool = Field(True, description="Indicates whether the deletion was successful")


class ReconciliationResponse(BaseModel):
    clean: bool
    recreated_directories: list[str]
    restored_originals: list[str]
    missing_originals: list[str]
    missing_crops: list[str]
    orphaned_directories: list[str]
    orphaned_uploads: list[str]
    orphaned_downloads: list[str]

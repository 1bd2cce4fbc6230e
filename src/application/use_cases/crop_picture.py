from __future__ import annotations

import logging
from dataclasses import dataclass

from src.application.context import PictureContext
from src.application.use_cases.upload_intake import UploadIntake
from src.domain.entities.picture import CropGeometry, PictureEntity
from src.domain.entities.picture_event import PictureCreated, PicturePatch, PictureUpdated
from src.domain.errors import PictureNotFound
from src.domain.services.validation import require_positive
from src.infrastructure.storage.asset_store import CROP, ORIGINAL

logger = logging.getLogger(__name__)


@dataclass
class CropPictureUseCase:
    """
    Apply a crop to a picture, versioning copy-on-write.

    The branch depends only on whether the picture read at the start of the
    command already has a crop:

    - uncropped: the crop file is stored in the picture's own directory and
      the picture is updated in place. Result id == input id.
    - cropped: a new picture id is created with its own directory, a copy of
      the original file and the new crop. The source picture, its fields and
      its files are left exactly as they were. Result id is the new id.

    The read and the resulting emit run under the event store's per-id
    command lock, so two crops of the same uncropped picture cannot both take
    the in-place branch.
    """

    ctx: PictureContext

    def execute(self, picture_id: str, crop: CropGeometry, upload_id: str, requester: str | None) -> str:
        require_positive("crop.width", crop.width)
        require_positive("crop.height", crop.height)
        intake = UploadIntake(self.ctx)

        with self.ctx.events.command(picture_id):
            picture = self.ctx.events.get(picture_id)
            if picture is None:
                raise PictureNotFound(picture_id)
            # preconditions only; nothing is touched until both reads succeed
            intake.resolve(upload_id)

            if not picture.is_cropped:
                return self._crop_in_place(intake, picture, crop, upload_id, requester)
            return self._fork(intake, picture, crop, upload_id, requester)

    def _crop_in_place(
        self,
        intake: UploadIntake,
        picture: PictureEntity,
        crop: CropGeometry,
        upload_id: str,
        requester: str | None,
    ) -> str:
        directory = self.ctx.assets.create_assets(picture.id)
        self.ctx.assets.remove_asset(picture.id, CROP)
        intake.consume(upload_id, directory, CROP)
        self.ctx.events.emit(
            PictureUpdated(picture=picture.id, patch=PicturePatch(crop=crop, owner=requester))
        )
        logger.info("First crop of picture %s stored in place", picture.id)
        return picture.id

    def _fork(
        self,
        intake: UploadIntake,
        picture: PictureEntity,
        crop: CropGeometry,
        upload_id: str,
        requester: str | None,
    ) -> str:
        new_id = self.ctx.new_id()
        with self.ctx.events.command(new_id):
            directory = self.ctx.assets.create_assets(new_id)
            if picture.original is not None:
                ext = picture.original.extension
                self.ctx.assets.copy_asset(
                    self.ctx.assets.asset_path(picture.id, ORIGINAL, ext),
                    self.ctx.assets.asset_path(new_id, ORIGINAL, ext),
                )
            intake.consume(upload_id, directory, CROP)
            self.ctx.events.emit(
                PictureCreated(
                    picture=new_id,
                    name=picture.name,
                    purpose=picture.purpose,
                    owner=requester,
                    file_name=picture.file_name,
                    original=picture.original,
                    crop=crop,
                )
            )
        logger.info("Picture %s already cropped; forked new version %s", picture.id, new_id)
        return new_id

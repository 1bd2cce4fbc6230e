from __future__ import annotations

import logging
from dataclasses import dataclass

from src.application.context import PictureContext
from src.application.use_cases.upload_intake import OriginalUpload, UploadIntake
from src.domain.entities.picture import OriginalInfo
from src.domain.entities.picture_event import PictureCreated, PicturePatch, PictureUpdated
from src.domain.errors import PictureNotFound
from src.domain.services.validation import require_positive
from src.infrastructure.storage.asset_store import CROP, ORIGINAL

logger = logging.getLogger(__name__)


@dataclass
class UploadPictureUseCase:
    ctx: PictureContext

    def execute(self, picture_id: str, original: OriginalUpload, owner: str | None = None) -> str:
        """
        Attach an uploaded original to a picture.

        An original is set once per picture id. A picture without one is
        updated in place (any crop is reset); a picture that already has one
        is left untouched and a new picture id carrying the new original is
        created instead.

        Returns:
            The id holding the new original.
        """
        require_positive("original.width", original.width)
        require_positive("original.height", original.height)
        intake = UploadIntake(self.ctx)

        with self.ctx.events.command(picture_id):
            picture = self.ctx.events.get(picture_id)
            if picture is None:
                raise PictureNotFound(picture_id)
            upload, extension = intake.resolve(original.upload_id)
            info = OriginalInfo(width=original.width, height=original.height, extension=extension)

            if picture.original is None:
                self.ctx.events.emit(
                    PictureUpdated(
                        picture=picture_id,
                        patch=PicturePatch(file_name=upload.file_name, original=info, crop=None),
                    )
                )
                directory = self.ctx.assets.create_assets(picture_id)
                self.ctx.assets.remove_asset(picture_id, CROP)
                intake.consume(upload.id, directory, ORIGINAL)
                logger.info("Attached original to picture %s", picture_id)
                return picture_id

            new_id = self.ctx.new_id()
            with self.ctx.events.command(new_id):
                self.ctx.events.emit(
                    PictureCreated(
                        picture=new_id,
                        name=picture.name,
                        purpose=picture.purpose,
                        owner=owner if owner is not None else picture.owner,
                        file_name=upload.file_name,
                        original=info,
                    )
                )
                directory = self.ctx.assets.create_assets(new_id)
                intake.consume(upload.id, directory, ORIGINAL)
            logger.info("Picture %s already had an original; new original stored as %s", picture_id, new_id)
            return new_id

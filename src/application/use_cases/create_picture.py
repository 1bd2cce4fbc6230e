from __future__ import annotations

import logging
from dataclasses import dataclass

from src.application.context import PictureContext
from src.application.use_cases.upload_intake import OriginalUpload, UploadIntake
from src.domain.entities.picture import OriginalInfo
from src.domain.entities.picture_event import PictureCreated
from src.domain.services.validation import require_positive, require_text
from src.infrastructure.storage.asset_store import ORIGINAL

logger = logging.getLogger(__name__)


@dataclass
class CreateEmptyPictureUseCase:
    ctx: PictureContext

    def execute(self, name: str, purpose: str, owner: str | None) -> str:
        """Create a picture with no assets yet; returns its new id."""
        require_text("name", name)
        require_text("purpose", purpose)
        picture_id = self.ctx.new_id()
        with self.ctx.events.command(picture_id):
            self.ctx.events.emit(
                PictureCreated(picture=picture_id, name=name, purpose=purpose, owner=owner)
            )
            self.ctx.assets.create_assets(picture_id)
        logger.info("Created empty picture %s", picture_id)
        return picture_id


@dataclass
class CreatePictureUseCase:
    ctx: PictureContext

    def execute(self, name: str, original: OriginalUpload, purpose: str, owner: str | None) -> str:
        """Create a picture and attach the uploaded original in one operation."""
        require_text("name", name)
        require_text("purpose", purpose)
        require_positive("original.width", original.width)
        require_positive("original.height", original.height)

        intake = UploadIntake(self.ctx)
        upload, extension = intake.resolve(original.upload_id)

        picture_id = self.ctx.new_id()
        with self.ctx.events.command(picture_id):
            self.ctx.events.emit(
                PictureCreated(
                    picture=picture_id,
                    name=name,
                    purpose=purpose,
                    owner=owner,
                    file_name=upload.file_name,
                    original=OriginalInfo(width=original.width, height=original.height, extension=extension),
                )
            )
            directory = self.ctx.assets.create_assets(picture_id)
            intake.consume(upload.id, directory, ORIGINAL)
        logger.info("Created picture %s from upload %s", picture_id, upload.id)
        return picture_id

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from src.application.context import PictureContext
from src.domain.entities.upload import UploadEntity
from src.domain.errors import UploadNotFound, UploadNotReady
from src.domain.services.file_naming import extension_from_filename

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OriginalUpload:
    width: int
    height: int
    upload_id: str


@dataclass
class UploadIntake:
    ctx: PictureContext

    def resolve(self, upload_id: str) -> tuple[UploadEntity, str]:
        """Check that an upload can be consumed, without side effects.

        Returns:
            The upload record and its normalized extension.

        Raises:
            UploadNotFound, UploadNotReady, InvalidFileName
        """
        upload = self.ctx.uploads.get(upload_id)
        if upload is None:
            raise UploadNotFound(upload_id)
        if not upload.is_done:
            raise UploadNotReady(upload_id, upload.state.value)
        return upload, extension_from_filename(upload.file_name)

    def consume(self, upload_id: str, destination_dir: Path | str, role: str) -> str:
        """Move the upload's blob to ``destination_dir/<role>.<ext>`` and drop the record.

        The record is deleted only after the move succeeded, so a failed move
        leaves the upload consumable.
        """
        upload, extension = self.resolve(upload_id)
        destination = Path(destination_dir) / f"{role}.{extension}"
        self.ctx.assets.move_asset(self.ctx.uploads.blob_path(upload.id), destination)
        self.ctx.uploads.delete(upload.id)
        logger.info("Consumed upload %s into %s", upload.id, destination)
        return extension

from __future__ import annotations

import logging
from dataclasses import dataclass

from src.application.context import PictureContext
from src.domain.entities.picture import CropGeometry, OriginalInfo
from src.domain.entities.picture_event import PictureCreated
from src.domain.errors import PictureError
from src.domain.services.file_naming import filename_from_url
from src.domain.services.validation import require_text
from src.infrastructure.storage.asset_store import CROP, ORIGINAL

logger = logging.getLogger(__name__)


@dataclass
class IngestFromUrlUseCase:
    ctx: PictureContext

    def execute(
        self,
        name: str,
        purpose: str,
        url: str,
        owner: str | None,
        pre_cropped: bool = True,
    ) -> str:
        """
        Download a picture from ``url`` and create it with its original attached.

        With ``pre_cropped`` the picture starts out cropped to the full frame,
        and the crop file is a byte copy of the original.

        Raises:
            ValidationError: Empty name, purpose or url.
            DownloadFailed: The resource could not be fetched.
            UnreadableImage: The downloaded bytes are not a readable image.
        """
        require_text("name", name)
        require_text("purpose", purpose)
        require_text("url", url)

        picture_id = self.ctx.new_id()
        staging = self.ctx.uploads.download_path(picture_id)
        self.ctx.downloader.download(url, staging)
        try:
            probe = self.ctx.probe(staging)
        except PictureError:
            staging.unlink(missing_ok=True)
            raise

        ext = probe.format
        crop = CropGeometry.full_frame(probe.width, probe.height) if pre_cropped else None
        with self.ctx.events.command(picture_id):
            self.ctx.events.emit(
                PictureCreated(
                    picture=picture_id,
                    name=name,
                    purpose=purpose,
                    owner=owner,
                    file_name=filename_from_url(url) or f"{picture_id}.{ext}",
                    original=OriginalInfo(width=probe.width, height=probe.height, extension=ext),
                    crop=crop,
                )
            )
            self.ctx.assets.create_assets(picture_id)
            original_path = self.ctx.assets.asset_path(picture_id, ORIGINAL, ext)
            self.ctx.assets.move_asset(staging, original_path)
            if pre_cropped:
                self.ctx.assets.copy_asset(original_path, self.ctx.assets.asset_path(picture_id, CROP, ext))
        logger.info("Ingested picture %s from %s (%dx%d %s)", picture_id, url, probe.width, probe.height, ext)
        return picture_id

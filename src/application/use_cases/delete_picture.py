from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass

from src.application.context import PictureContext
from src.domain.entities.picture_event import PictureDeleted
from src.domain.errors import AccessDenied, PictureNotFound
from src.infrastructure.database.supabase_client import ADMIN_ROLE

logger = logging.getLogger(__name__)


@dataclass
class DeletePictureUseCase:
    ctx: PictureContext

    def execute(self, picture_id: str, roles: Collection[str]) -> None:
        """Delete a picture and its asset directory. Admin only.

        A retry after a partial failure is safe: removing an already removed
        directory is a no-op.
        """
        if ADMIN_ROLE not in roles:
            raise AccessDenied("Deleting pictures requires the admin role")
        with self.ctx.events.command(picture_id):
            if self.ctx.events.get(picture_id) is None:
                raise PictureNotFound(picture_id)
            self.ctx.events.emit(PictureDeleted(picture=picture_id))
            self.ctx.assets.remove_assets(picture_id)
        logger.info("Deleted picture %s", picture_id)

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from src.application.context import PictureContext
from src.domain.entities.picture import PictureEntity
from src.infrastructure.storage.asset_store import CROP, ORIGINAL

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationReport:
    recreated_directories: list[str] = field(default_factory=list)
    restored_originals: list[str] = field(default_factory=list)
    missing_originals: list[str] = field(default_factory=list)
    missing_crops: list[str] = field(default_factory=list)
    orphaned_directories: list[str] = field(default_factory=list)
    orphaned_uploads: list[str] = field(default_factory=list)
    orphaned_downloads: list[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not any(
            (
                self.recreated_directories,
                self.restored_originals,
                self.missing_originals,
                self.missing_crops,
                self.orphaned_directories,
                self.orphaned_uploads,
                self.orphaned_downloads,
            )
        )


@dataclass
class ReconcileAssetsUseCase:
    """
    Compare committed picture state with the files on disk.

    Events are committed before (or, for crops, right after) the matching file
    transfers, and the two are not atomic. A crash in between leaves either a
    picture whose files are missing or files nobody references. This pass
    recreates missing directory trees and moves a URL ingestion's staged
    download into place when the original never arrived. Everything else is
    reported; it never deletes anything.
    """

    ctx: PictureContext

    def execute(self) -> ReconciliationReport:
        report = ReconciliationReport()
        live_ids = self.ctx.events.list_ids()

        for picture_id in live_ids:
            with self.ctx.events.command(picture_id):
                picture = self.ctx.events.get(picture_id)
                if picture is None:
                    continue
                if not self.ctx.assets.path_for(picture_id).is_dir():
                    self.ctx.assets.create_assets(picture_id)
                    report.recreated_directories.append(picture_id)
                original_file = picture.original_file()
                if original_file and not (self.ctx.assets.path_for(picture_id) / original_file).is_file():
                    if self._restore_download(picture):
                        report.restored_originals.append(picture_id)
                    else:
                        report.missing_originals.append(picture_id)
                if picture.is_cropped and self.ctx.assets.find_asset(picture_id, CROP) is None:
                    report.missing_crops.append(picture_id)

        known = set(live_ids)
        report.orphaned_directories = [i for i in self.ctx.assets.list_ids() if i not in known]
        report.orphaned_uploads = [p.name for p in self.ctx.uploads.orphaned_blobs()]
        report.orphaned_downloads = [
            path.name
            for picture_id, path in sorted(self.ctx.uploads.staged_downloads().items())
            if picture_id not in known
        ]

        for label, ids in (
            ("recreated directories", report.recreated_directories),
            ("restored originals", report.restored_originals),
            ("missing originals", report.missing_originals),
            ("missing crops", report.missing_crops),
            ("orphaned directories", report.orphaned_directories),
            ("orphaned uploads", report.orphaned_uploads),
            ("orphaned downloads", report.orphaned_downloads),
        ):
            if ids:
                logger.warning("Reconciliation found %d %s: %s", len(ids), label, ", ".join(ids))
        return report

    def _restore_download(self, picture: PictureEntity) -> bool:
        staged = self.ctx.uploads.download_path(picture.id)
        if not staged.is_file():
            return False
        extension = picture.original.extension
        original = self.ctx.assets.move_asset(
            staged, self.ctx.assets.asset_path(picture.id, ORIGINAL, extension)
        )
        if picture.is_cropped and self.ctx.assets.find_asset(picture.id, CROP) is None:
            self.ctx.assets.copy_asset(original, self.ctx.assets.asset_path(picture.id, CROP, extension))
        logger.info("Restored original of picture %s from %s", picture.id, staged.name)
        return True

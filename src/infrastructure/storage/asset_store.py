"""Filesystem layout for picture assets.

::

    <root>/<picture_id>/original.<ext>
    <root>/<picture_id>/crop.<ext>
    <root>/<picture_id>/originalCache/
    <root>/<picture_id>/cropCache/

Each picture id owns its directory exclusively; forks get their own tree and
their own copies of the files.
"""
from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from src.domain.errors import AssetIOError, DirectoryError

logger = logging.getLogger(__name__)

ORIGINAL = "original"
CROP = "crop"
CACHE_DIRS = ("originalCache", "cropCache")


class AssetDirectoryStore:
    def __init__(self, root: Path | str | None = None) -> None:
        if root is None:
            root = Path(os.getenv("PICTURES_STORAGE_DIR", "storage")) / "pictures"
        self.root = Path(root)

    def path_for(self, picture_id: str) -> Path:
        if not picture_id or "/" in picture_id or "\\" in picture_id or picture_id in (".", ".."):
            raise DirectoryError(f"Invalid picture id for asset path: {picture_id!r}")
        return self.root / picture_id

    def asset_path(self, picture_id: str, role: str, extension: str) -> Path:
        return self.path_for(picture_id) / f"{role}.{extension}"

    def find_asset(self, picture_id: str, role: str) -> Path | None:
        """Return the ``<role>.<ext>`` file of a picture, whatever its extension."""
        directory = self.path_for(picture_id)
        if not directory.is_dir():
            return None
        matches = sorted(p for p in directory.glob(f"{role}.*") if p.is_file())
        return matches[0] if matches else None

    def create_assets(self, picture_id: str) -> Path:
        """Create ``<id>/`` with its cache subdirectories. Safe to call again."""
        directory = self.path_for(picture_id)
        try:
            for sub in CACHE_DIRS:
                (directory / sub).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DirectoryError(f"Failed to create asset directory {directory}: {exc}") from exc
        logger.debug("Asset directory ready: %s", directory)
        return directory

    def move_asset(self, source: Path | str, destination: Path | str) -> Path:
        source, destination = Path(source), Path(destination)
        if not source.is_file():
            raise AssetIOError(f"Cannot move missing file {source}")
        try:
            shutil.move(str(source), str(destination))
        except OSError as exc:
            raise AssetIOError(f"Failed to move {source} to {destination}: {exc}") from exc
        logger.debug("Moved %s -> %s", source, destination)
        return destination

    def copy_asset(self, source: Path | str, destination: Path | str) -> Path:
        source, destination = Path(source), Path(destination)
        if not source.is_file():
            raise AssetIOError(f"Cannot copy missing file {source}")
        try:
            shutil.copyfile(source, destination)
        except OSError as exc:
            raise AssetIOError(f"Failed to copy {source} to {destination}: {exc}") from exc
        logger.debug("Copied %s -> %s", source, destination)
        return destination

    def remove_assets(self, picture_id: str) -> None:
        """Recursively delete the tree of ``picture_id``; a missing tree is a no-op."""
        directory = self.path_for(picture_id)
        if not directory.exists():
            logger.debug("Asset directory already absent: %s", directory)
            return
        try:
            shutil.rmtree(directory)
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise DirectoryError(f"Failed to remove asset directory {directory}: {exc}") from exc
        logger.debug("Removed asset directory %s", directory)

    def list_ids(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_dir())

    def remove_asset(self, picture_id: str, role: str) -> None:
        """Delete every ``<role>.*`` file of a picture, whatever its extension."""
        directory = self.path_for(picture_id)
        if not directory.is_dir():
            return
        for path in directory.glob(f"{role}.*"):
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                raise AssetIOError(f"Failed to remove {path}: {exc}") from exc
            logger.debug("Removed %s", path)

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from src.infrastructure.downloads.http_downloader import HttpDownloader
from src.infrastructure.events.event_store import PictureEventStore
from src.infrastructure.imaging.probe import ImageProbe, probe_image
from src.infrastructure.database.repositories.upload_repository import UploadRepository
from src.infrastructure.storage.asset_store import AssetDirectoryStore


def new_picture_id() -> str:
    return str(uuid.uuid4())


@dataclass
class PictureContext:
    """Collaborators shared by every picture use case."""

    assets: AssetDirectoryStore
    uploads: UploadRepository
    events: PictureEventStore
    downloader: HttpDownloader = field(default_factory=HttpDownloader)
    probe: Callable[[Path], ImageProbe] = probe_image
    new_id: Callable[[], str] = new_picture_id

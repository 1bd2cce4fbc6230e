from __future__ import annotations

import logging
import os
import threading
import uuid
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path

from src.domain.entities.upload import UploadEntity, UploadState
from src.domain.errors import AssetIOError, UploadNotFound
from src.infrastructure.database.postgres_client import PostgresClient, get_postgres_client

logger = logging.getLogger(__name__)

DOWNLOAD_PREFIX = "download_"


class UploadRepository:
    """Upload records plus their staged blobs under ``<uploads_dir>/<upload_id>``.

    Records live in PostgreSQL when a client is given, otherwise in memory.
    """

    def __init__(self, uploads_dir: Path | str | None = None, pg_client: PostgresClient | None = None) -> None:
        if uploads_dir is None:
            uploads_dir = Path(os.getenv("PICTURES_STORAGE_DIR", "storage")) / "uploads"
        self.uploads_dir = Path(uploads_dir)
        self.pg_client = pg_client
        self._mem: dict[str, UploadEntity] = {}
        self._lock = threading.Lock()

    def _row_to_entity(self, row: dict) -> UploadEntity:
        created_at = row["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return UploadEntity(
            id=row["id"],
            file_name=row["file_name"],
            state=UploadState(row["state"]),
            created_at=created_at,
            size=row.get("size"),
        )

    def blob_path(self, upload_id: str) -> Path:
        return self.uploads_dir / upload_id

    def download_path(self, picture_id: str) -> Path:
        """Staging file of a URL download for ``picture_id``."""
        return self.uploads_dir / f"{DOWNLOAD_PREFIX}{picture_id}"

    def create(self, file_name: str) -> UploadEntity:
        entity = UploadEntity(
            id=str(uuid.uuid4()),
            file_name=file_name,
            state=UploadState.PENDING,
            created_at=datetime.now(UTC),
        )
        if self.pg_client:
            self.pg_client.execute_update(
                "INSERT INTO uploads (id, file_name, state, size, created_at) VALUES (%s, %s, %s, %s, %s)",
                (entity.id, entity.file_name, entity.state.value, entity.size, entity.created_at),
            )
        else:
            with self._lock:
                self._mem[entity.id] = entity
        logger.info("Upload %s created for %s", entity.id, file_name)
        return entity

    def store_content(self, upload_id: str, content: bytes) -> UploadEntity:
        """Write the blob, then mark the upload done."""
        upload = self.get(upload_id)
        if upload is None:
            raise UploadNotFound(upload_id)
        path = self.blob_path(upload_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as exc:
            raise AssetIOError(f"Failed to stage upload {upload_id}: {exc}") from exc
        done = replace(upload, state=UploadState.DONE, size=len(content))
        if self.pg_client:
            self.pg_client.execute_update(
                "UPDATE uploads SET state = %s, size = %s WHERE id = %s",
                (done.state.value, done.size, upload_id),
            )
        else:
            with self._lock:
                self._mem[upload_id] = done
        logger.info("Upload %s done (%d bytes)", upload_id, len(content))
        return done

    def get(self, upload_id: str) -> UploadEntity | None:
        if self.pg_client:
            row = self.pg_client.execute_one("SELECT * FROM uploads WHERE id = %s", (upload_id,))
            return self._row_to_entity(row) if row else None
        return self._mem.get(upload_id)

    def delete(self, upload_id: str) -> bool:
        if self.pg_client:
            return self.pg_client.execute_update("DELETE FROM uploads WHERE id = %s", (upload_id,)) > 0
        with self._lock:
            return self._mem.pop(upload_id, None) is not None

    def list_ids(self) -> list[str]:
        if self.pg_client:
            return [row["id"] for row in self.pg_client.execute_many("SELECT id FROM uploads")]
        return list(self._mem)

    def orphaned_blobs(self) -> list[Path]:
        """Staged blobs whose upload record no longer exists.

        Download staging files (``download_*``) are excluded.
        """
        if not self.uploads_dir.is_dir():
            return []
        known = set(self.list_ids())
        return sorted(
            p
            for p in self.uploads_dir.iterdir()
            if p.is_file() and p.name not in known and not p.name.startswith(DOWNLOAD_PREFIX)
        )

    def staged_downloads(self) -> dict[str, Path]:
        """Download staging files still present, keyed by picture id."""
        if not self.uploads_dir.is_dir():
            return {}
        return {
            p.name[len(DOWNLOAD_PREFIX) :]: p
            for p in sorted(self.uploads_dir.glob(f"{DOWNLOAD_PREFIX}*"))
            if p.is_file()
        }


def create_upload_repository(uploads_dir: Path | str | None = None) -> UploadRepository:
    return UploadRepository(uploads_dir, pg_client=get_postgres_client())

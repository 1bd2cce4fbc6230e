from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.application.context import PictureContext
from src.infrastructure.database.postgres_client import close_postgres_client
from src.infrastructure.database.repositories.upload_repository import (
    UploadRepository,
    create_upload_repository,
)
from src.infrastructure.database.supabase_client import SupabaseAuthAdapter, UserInfo
from src.infrastructure.downloads.http_downloader import HttpDownloader
from src.infrastructure.events.event_store import PictureEventStore, create_event_store
from src.infrastructure.storage.asset_store import AssetDirectoryStore

_bearer_scheme = HTTPBearer(auto_error=False)

# process-wide collaborators; per-id command locks live in the event store
_EVENT_STORE: PictureEventStore | None = None
_UPLOAD_REPO: UploadRepository | None = None
_DOWNLOADER: HttpDownloader | None = None


def get_auth_adapter() -> SupabaseAuthAdapter:
    return SupabaseAuthAdapter()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(_bearer_scheme)] = None,
    auth: Annotated[SupabaseAuthAdapter, Depends(get_auth_adapter)] = None,
) -> UserInfo:
    if not credentials or not credentials.scheme or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    token = credentials.credentials
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    try:
        return auth.validate_token(token)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))


def get_event_store() -> PictureEventStore:
    global _EVENT_STORE
    if _EVENT_STORE is None:
        _EVENT_STORE = create_event_store()
    return _EVENT_STORE


def get_upload_repo() -> UploadRepository:
    global _UPLOAD_REPO
    if _UPLOAD_REPO is None:
        _UPLOAD_REPO = create_upload_repository()
    return _UPLOAD_REPO


def get_downloader() -> HttpDownloader:
    global _DOWNLOADER
    if _DOWNLOADER is None:
        _DOWNLOADER = HttpDownloader()
    return _DOWNLOADER


def get_asset_store() -> AssetDirectoryStore:
    return AssetDirectoryStore()


def get_picture_context(
    events: PictureEventStore = Depends(get_event_store),
    uploads: UploadRepository = Depends(get_upload_repo),
    assets: AssetDirectoryStore = Depends(get_asset_store),
    downloader: HttpDownloader = Depends(get_downloader),
) -> PictureContext:
    return PictureContext(assets=assets, uploads=uploads, events=events, downloader=downloader)


def shutdown_resources() -> None:
    """Release the HTTP session and the Postgres pool.

    Collaborators bound to the closed pool are dropped too; an in-memory event
    store is kept so its history survives within the process.
    """
    global _DOWNLOADER, _EVENT_STORE, _UPLOAD_REPO
    if _DOWNLOADER is not None:
        _DOWNLOADER.close()
        _DOWNLOADER = None
    if close_postgres_client():
        _EVENT_STORE = None
        _UPLOAD_REPO = None

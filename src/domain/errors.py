"""Errors raised by picture operations.

Every operation either returns a result id or raises exactly one of these.
Nothing is retried internally.
"""
from __future__ import annotations


class PictureError(Exception):
    """Base class for picture service errors."""


class NotFound(PictureError):
    pass


class PictureNotFound(NotFound):
    def __init__(self, picture_id: str) -> None:
        super().__init__(f"Picture not found: {picture_id}")
        self.picture_id = picture_id


class UploadNotFound(NotFound):
    def __init__(self, upload_id: str) -> None:
        super().__init__(f"Upload not found: {upload_id}")
        self.upload_id = upload_id


class NotReady(PictureError):
    pass


class UploadNotReady(NotReady):
    def __init__(self, upload_id: str, state: str) -> None:
        super().__init__(f"Upload {upload_id} is not done (state={state})")
        self.upload_id = upload_id
        self.state = state


class InvalidFileName(PictureError):
    def __init__(self, file_name: str | None) -> None:
        super().__init__(f"Cannot derive a file extension from {file_name!r}")
        self.file_name = file_name


class ValidationError(PictureError):
    def __init__(self, field: str, message: str = "must not be empty") -> None:
        super().__init__(f"{field} {message}")
        self.field = field


class AssetIOError(PictureError, OSError):
    """A file transfer into or out of an asset directory failed."""


class DirectoryError(AssetIOError):
    """Creating or removing an asset directory tree failed."""


class UnreadableImage(PictureError):
    pass


class DownloadFailed(PictureError):
    pass


class AccessDenied(PictureError):
    pass

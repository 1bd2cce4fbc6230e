from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from src.domain.errors import (
    AccessDenied,
    AssetIOError,
    DownloadFailed,
    InvalidFileName,
    NotFound,
    NotReady,
    PictureError,
    UnreadableImage,
    ValidationError,
)

logger = logging.getLogger(__name__)

# most specific first
_ERROR_STATUS: tuple[tuple[type[PictureError], int], ...] = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (NotReady, status.HTTP_409_CONFLICT),
    (InvalidFileName, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (UnreadableImage, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (AccessDenied, status.HTTP_403_FORBIDDEN),
    (DownloadFailed, status.HTTP_502_BAD_GATEWAY),
    (AssetIOError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: PictureError) -> int:
    for error_type, code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def picture_error_handler(request: Request, exc: PictureError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.info("%s %s rejected (%d): %s", request.method, request.url.path, code, exc)
    return JSONResponse(status_code=code, content={"detail": str(exc), "error": type(exc).__name__})


def add_default_middlewares(app: FastAPI) -> None:
    env = os.getenv("ENV", "development")

    if env in ("development", "staging"):
        allowed_origins = [
            "http://localhost:3000",
            "http://localhost:5173",  # Vite default
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ]
    else:
        allowed_origins = [o for o in os.getenv("CORS_ORIGINS", "").split(",") if o]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(PictureError, picture_error_handler)

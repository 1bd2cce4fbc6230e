from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.application.dtos.common_dto import HealthResponse, RootResponse
from src.infrastructure.api.dependencies import shutdown_resources
from src.infrastructure.api.middlewares import add_default_middlewares
from src.infrastructure.api.routes.auth_routes import router as auth_router
from src.infrastructure.api.routes.picture_routes import router as picture_router
from src.infrastructure.api.routes.upload_routes import router as upload_router


def configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    shutdown_resources()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Pictures Backend",
        version="0.1.0",
        lifespan=lifespan,
        description="""
        ## Pictures Backend API

        Versioned picture assets: a logical picture record (name, owner, crop
        geometry, original metadata) paired with files on disk.

        ### Features
        - **Uploads**: stage a blob, then attach it as an original or a crop
        - **Versioning**: the first crop updates a picture in place, every later
          crop creates a new picture version and leaves the previous one intact
        - **Remote ingestion**: create a picture from an image URL
        - **Event history**: every change is an event in a per-picture log

        ### Authentication
        All endpoints (except root and health) require a bearer token:
        ```
        Authorization: Bearer your-jwt-token
        ```

        ### Error Responses
        - **400 Bad Request**: Empty required field or unusable file name
        - **401 Unauthorized**: Missing or invalid authentication token
        - **403 Forbidden**: Admin role required
        - **404 Not Found**: Picture or upload does not exist
        - **409 Conflict**: Upload not finished
        - **422 Unprocessable Entity**: Invalid request body or unreadable image
        - **502 Bad Gateway**: Remote image could not be downloaded
        """,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )
    add_default_middlewares(app)

    @app.get("/", response_model=RootResponse, summary="API Root")
    def root():
        """Get API root information."""
        return RootResponse(status="ok", service="pictures-backend", version=app.version)

    @app.get("/health", response_model=HealthResponse, summary="Health Check")
    def health():
        """Check API health status."""
        return HealthResponse(status="healthy")

    app.include_router(auth_router)
    app.include_router(upload_router)
    app.include_router(picture_router)
    return app


app = create_app()

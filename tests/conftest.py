import io
import os
import sys
from pathlib import Path

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

# Ensure project root is on sys.path so 'src' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SUPABASE_DISABLED", "1")
os.environ.setdefault("USE_LOCAL_DB", "0")


@pytest.fixture(scope="session", autouse=True)
def storage_dir(tmp_path_factory):
    """Point the default asset and upload roots at a pytest-managed directory."""
    root = tmp_path_factory.mktemp("storage")
    with pytest.MonkeyPatch.context() as mp:
        mp.setenv("PICTURES_STORAGE_DIR", str(root))
        yield root


def _image_bytes(w: int, h: int, fmt: str, color=(128, 64, 32)) -> bytes:
    arr = np.zeros((h, w, 3), dtype=np.uint8)
    arr[:, :] = color
    buf = io.BytesIO()
    Image.fromarray(arr, mode="RGB").save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture()
def make_image():
    """Factory: make_image(w, h, fmt="PNG", color=...) -> encoded bytes."""
    def _make(w: int = 4, h: int = 4, fmt: str = "PNG", color=(128, 64, 32)) -> bytes:
        return _image_bytes(w, h, fmt, color)

    return _make


@pytest.fixture()
def ctx(tmp_path):
    from unittest.mock import Mock

    from src.application.context import PictureContext
    from src.infrastructure.database.repositories.upload_repository import UploadRepository
    from src.infrastructure.events.event_store import PictureEventStore
    from src.infrastructure.storage.asset_store import AssetDirectoryStore

    return PictureContext(
        assets=AssetDirectoryStore(tmp_path / "pictures"),
        uploads=UploadRepository(tmp_path / "uploads"),
        events=PictureEventStore(),
        downloader=Mock(),
    )


@pytest.fixture()
def stage_upload(ctx):
    """Factory: stage_upload(file_name, content=b"...", done=True) -> upload id."""
    def _stage(file_name: str, content: bytes = b"crop-bytes", done: bool = True) -> str:
        upload = ctx.uploads.create(file_name)
        if done:
            ctx.uploads.store_content(upload.id, content)
        return upload.id

    return _stage


@pytest.fixture(scope="session")
def client() -> TestClient:
    # lazy import after env configured
    from src.main import create_app

    app = create_app()
    return TestClient(app)


@pytest.fixture()
def auth_header() -> dict[str, str]:
    # any token is accepted in disabled mode
    return {"Authorization": "Bearer test-token"}


@pytest.fixture()
def admin_header() -> dict[str, str]:
    return {"Authorization": "Bearer admin-test-token"}

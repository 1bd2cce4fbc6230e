from unittest.mock import Mock

import pytest

from src.application.use_cases.create_picture import CreateEmptyPictureUseCase, CreatePictureUseCase
from src.application.use_cases.crop_picture import CropPictureUseCase
from src.application.use_cases.delete_picture import DeletePictureUseCase
from src.application.use_cases.ingest_from_url import IngestFromUrlUseCase
from src.application.use_cases.reconcile_assets import ReconcileAssetsUseCase
from src.application.use_cases.upload_intake import OriginalUpload
from src.domain.entities.picture import CropGeometry
from src.domain.errors import AccessDenied, DirectoryError, PictureNotFound


def test_delete_requires_admin(ctx):
    picture_id = CreateEmptyPictureUseCase(ctx).execute("Sunset", "banner", owner="u1")
    with pytest.raises(AccessDenied):
        DeletePictureUseCase(ctx).execute(picture_id, roles=set())
    assert ctx.events.get(picture_id) is not None
    assert ctx.assets.path_for(picture_id).is_dir()


def test_delete_removes_only_that_picture(ctx):
    keep = CreateEmptyPictureUseCase(ctx).execute("Keep", "banner", owner="u1")
    drop = CreateEmptyPictureUseCase(ctx).execute("Drop", "banner", owner="u1")

    DeletePictureUseCase(ctx).execute(drop, roles={"admin"})

    assert ctx.events.get(drop) is None
    assert not ctx.assets.path_for(drop).exists()
    assert ctx.assets.path_for(keep).is_dir()


def test_delete_unknown_picture(ctx):
    with pytest.raises(PictureNotFound):
        DeletePictureUseCase(ctx).execute("ghost", roles={"admin"})


def test_reconcile_clean_store(ctx, stage_upload):
    picture_id = CreatePictureUseCase(ctx).execute("S", OriginalUpload(4, 4, stage_upload("a.png")), "banner", "u1")
    CropPictureUseCase(ctx).execute(picture_id, CropGeometry(0, 0, 2, 2), stage_upload("c.png"), "u1")
    assert ReconcileAssetsUseCase(ctx).execute().clean


def test_reconcile_reports_drift(ctx, stage_upload):
    picture_id = CreatePictureUseCase(ctx).execute("S", OriginalUpload(4, 4, stage_upload("a.png")), "banner", "u1")
    CropPictureUseCase(ctx).execute(picture_id, CropGeometry(0, 0, 2, 2), stage_upload("c.png"), "u1")
    # simulate a crash that lost the whole directory after the events were committed
    ctx.assets.remove_assets(picture_id)
    ctx.assets.create_assets("stray")
    ctx.uploads.uploads_dir.mkdir(parents=True, exist_ok=True)
    (ctx.uploads.uploads_dir / "leftover").write_bytes(b"x")

    report = ReconcileAssetsUseCase(ctx).execute()

    assert report.recreated_directories == [picture_id]
    assert report.missing_originals == [picture_id]
    assert report.missing_crops == [picture_id]
    assert report.orphaned_directories == ["stray"]
    assert report.orphaned_uploads == ["leftover"]
    assert ctx.assets.path_for(picture_id).is_dir()
    assert not report.clean


def test_reconcile_restores_staged_download(ctx, make_image, monkeypatch):
    content = make_image(40, 30, "PNG")

    def download(url, destination):
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(content)
        return destination

    ctx.downloader.download.side_effect = download
    # the event is committed, then the process dies before any file is moved
    monkeypatch.setattr(ctx.assets, "create_assets", Mock(side_effect=DirectoryError("disk gone")))
    with pytest.raises(DirectoryError):
        IngestFromUrlUseCase(ctx).execute("Logo", "banner", "http://x/logo.png", owner="u1")
    monkeypatch.undo()

    [picture_id] = ctx.events.list_ids()
    assert ctx.uploads.download_path(picture_id).is_file()
    ctx.uploads.download_path("ghost").write_bytes(b"x")

    report = ReconcileAssetsUseCase(ctx).execute()

    assert report.restored_originals == [picture_id]
    assert report.missing_originals == []
    assert report.missing_crops == []
    assert report.orphaned_downloads == ["download_ghost"]
    assert report.orphaned_uploads == []
    directory = ctx.assets.path_for(picture_id)
    assert (directory / "original.png").read_bytes() == content
    assert (directory / "crop.png").read_bytes() == content
    assert not ctx.uploads.download_path(picture_id).exists()

    # a second pass only sees the unrelated leftover
    again = ReconcileAssetsUseCase(ctx).execute()
    assert again.restored_originals == []
    assert again.orphaned_downloads == ["download_ghost"]

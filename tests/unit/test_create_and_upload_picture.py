import pytest

from src.application.use_cases.create_picture import CreateEmptyPictureUseCase, CreatePictureUseCase
from src.application.use_cases.crop_picture import CropPictureUseCase
from src.application.use_cases.upload_intake import OriginalUpload
from src.application.use_cases.upload_picture import UploadPictureUseCase
from src.domain.entities.picture import CropGeometry, OriginalInfo
from src.domain.errors import PictureNotFound, UploadNotReady, ValidationError


def test_create_empty_picture(ctx):
    picture_id = CreateEmptyPictureUseCase(ctx).execute("Sunset", "banner", owner="u1")
    picture = ctx.events.get(picture_id)
    assert (picture.name, picture.purpose, picture.owner) == ("Sunset", "banner", "u1")
    assert picture.file_name is None
    assert (ctx.assets.path_for(picture_id) / "cropCache").is_dir()


@pytest.mark.parametrize("name,purpose", [("", "banner"), ("Sunset", "   ")])
def test_create_rejects_empty_text(ctx, name, purpose):
    with pytest.raises(ValidationError):
        CreateEmptyPictureUseCase(ctx).execute(name, purpose, owner="u1")
    assert ctx.events.list_ids() == []


def test_create_picture_with_original(ctx, stage_upload):
    upload_id = stage_upload("Holiday.JPG", b"jpeg")
    picture_id = CreatePictureUseCase(ctx).execute("Sunset", OriginalUpload(800, 600, upload_id), "banner", "u1")

    picture = ctx.events.get(picture_id)
    assert picture.file_name == "Holiday.JPG"
    assert picture.original == OriginalInfo(800, 600, "jpeg")
    assert (ctx.assets.path_for(picture_id) / "original.jpeg").read_bytes() == b"jpeg"
    assert ctx.uploads.get(upload_id) is None


def test_create_picture_with_pending_upload_emits_nothing(ctx, stage_upload):
    upload_id = stage_upload("a.png", done=False)
    with pytest.raises(UploadNotReady):
        CreatePictureUseCase(ctx).execute("Sunset", OriginalUpload(8, 6, upload_id), "banner", "u1")
    assert ctx.events.list_ids() == []
    assert ctx.assets.list_ids() == []


def test_create_picture_rejects_non_positive_size(ctx, stage_upload):
    with pytest.raises(ValidationError):
        CreatePictureUseCase(ctx).execute("Sunset", OriginalUpload(0, 6, stage_upload("a.png")), "banner", "u1")


def test_upload_attaches_original_in_place_and_resets_crop(ctx, stage_upload):
    picture_id = CreateEmptyPictureUseCase(ctx).execute("Sunset", "banner", owner="u1")
    CropPictureUseCase(ctx).execute(picture_id, CropGeometry(0, 0, 5, 5), stage_upload("c.png"), "u1")

    result = UploadPictureUseCase(ctx).execute(picture_id, OriginalUpload(50, 40, stage_upload("o.png", b"orig")))

    assert result == picture_id
    picture = ctx.events.get(picture_id)
    assert picture.original == OriginalInfo(50, 40, "png")
    assert picture.crop is None
    assert picture.file_name == "o.png"
    assert (ctx.assets.path_for(picture_id) / "original.png").read_bytes() == b"orig"
    assert ctx.assets.find_asset(picture_id, "crop") is None


def test_upload_on_picture_with_original_creates_new_id(ctx, stage_upload):
    first = CreatePictureUseCase(ctx).execute("Sunset", OriginalUpload(8, 6, stage_upload("a.png", b"one")), "banner", "u1")
    before = ctx.events.get(first)

    second = UploadPictureUseCase(ctx).execute(first, OriginalUpload(9, 7, stage_upload("b.jpg", b"two")), owner="u2")

    assert second != first
    assert ctx.events.get(first) == before
    assert (ctx.assets.path_for(first) / "original.png").read_bytes() == b"one"
    new = ctx.events.get(second)
    assert new.original == OriginalInfo(9, 7, "jpeg")
    assert (new.name, new.purpose, new.owner) == ("Sunset", "banner", "u2")
    assert (ctx.assets.path_for(second) / "original.jpeg").read_bytes() == b"two"


def test_upload_to_missing_picture(ctx, stage_upload):
    with pytest.raises(PictureNotFound):
        UploadPictureUseCase(ctx).execute("ghost", OriginalUpload(8, 6, stage_upload("a.png")))

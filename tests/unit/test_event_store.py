import pytest

from src.domain.entities.picture import CropGeometry, OriginalInfo
from src.domain.entities.picture_event import (
    PictureCreated,
    PictureDeleted,
    PicturePatch,
    PictureUpdated,
    event_from_dict,
    event_to_dict,
)
from src.domain.errors import PictureError, PictureNotFound
from src.infrastructure.events.event_store import PictureEventStore


@pytest.fixture()
def store():
    return PictureEventStore()


def _created(picture_id="p1", **kwargs):
    return PictureCreated(picture=picture_id, name="Sunset", purpose="banner", owner="u1", **kwargs)


def test_created_picture_is_materialized(store):
    store.emit(_created(original=OriginalInfo(10, 20, "png")))
    picture = store.get("p1")
    assert picture.name == "Sunset"
    assert picture.original == OriginalInfo(10, 20, "png")
    assert picture.crop is None
    assert store.list_ids() == ["p1"]


def test_update_only_touches_assigned_fields(store):
    store.emit(_created(file_name="a.png"))
    crop = CropGeometry(x=1, y=2, width=3, height=4)
    store.emit(PictureUpdated(picture="p1", patch=PicturePatch(crop=crop, owner="u2")))

    picture = store.get("p1")
    assert picture.crop == crop
    assert picture.owner == "u2"
    assert picture.file_name == "a.png"
    assert picture.name == "Sunset"


def test_patch_can_clear_a_field(store):
    store.emit(_created(crop=CropGeometry(0, 0, 5, 5)))
    store.emit(PictureUpdated(picture="p1", patch=PicturePatch(crop=None)))
    assert store.get("p1").crop is None


def test_update_of_unknown_picture_fails(store):
    with pytest.raises(PictureNotFound):
        store.emit(PictureUpdated(picture="ghost", patch=PicturePatch(name="x")))
    assert store.history("ghost") == []


def test_id_cannot_be_created_twice(store):
    store.emit(_created())
    with pytest.raises(PictureError):
        store.emit(_created())


def test_deleted_picture_disappears_but_keeps_history(store):
    store.emit(_created())
    store.emit(PictureDeleted(picture="p1"))
    assert store.get("p1") is None
    assert store.list_ids() == []
    assert [e.type for e in store.history("p1")] == ["PictureCreated", "PictureDeleted"]
    with pytest.raises(PictureError):
        store.emit(_created())


def test_event_serialization_keeps_partial_payload():
    event = PictureUpdated(picture="p1", patch=PicturePatch(crop=CropGeometry(1, 2, 3, 4, zoom=1.5, orientation=90)))
    payload = event_to_dict(event)
    assert payload == {
        "type": "PictureUpdated",
        "picture": "p1",
        "data": {"crop": {"x": 1, "y": 2, "width": 3, "height": 4, "zoom": 1.5, "orientation": 90}},
    }
    assert event_from_dict(payload) == event


def test_command_lock_is_dropped_after_last_holder(store):
    with store.command("p1"):
        with store.command("p1"):
            store.emit(_created())
        assert "p1" in store._locks
    assert store._locks == {}

    with pytest.raises(PictureNotFound):
        with store.command("ghost"):
            store.emit(PictureUpdated(picture="ghost", patch=PicturePatch(name="x")))
    assert store._locks == {}

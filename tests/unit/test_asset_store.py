import pytest

from src.domain.errors import AssetIOError, DirectoryError
from src.infrastructure.storage.asset_store import AssetDirectoryStore


@pytest.fixture()
def store(tmp_path):
    return AssetDirectoryStore(tmp_path / "pictures")


def test_create_assets_builds_tree(store):
    directory = store.create_assets("p1")
    assert directory == store.root / "p1"
    assert (directory / "originalCache").is_dir()
    assert (directory / "cropCache").is_dir()


def test_create_assets_twice_is_idempotent(store):
    store.create_assets("p1")
    (store.root / "p1" / "original.png").write_bytes(b"data")
    store.create_assets("p1")
    assert store.list_ids() == ["p1"]
    assert (store.root / "p1" / "original.png").read_bytes() == b"data"


def test_remove_assets_missing_is_noop(store):
    store.remove_assets("never-created")
    assert not (store.root / "never-created").exists()


def test_remove_assets_only_touches_given_id(store):
    store.create_assets("keep")
    store.create_assets("drop")
    store.remove_assets("drop")
    assert store.list_ids() == ["keep"]


def test_move_asset_transfers_file(store, tmp_path):
    src = tmp_path / "blob"
    src.write_bytes(b"abc")
    dest = store.create_assets("p1") / "original.png"
    store.move_asset(src, dest)
    assert not src.exists()
    assert dest.read_bytes() == b"abc"


def test_move_missing_source_fails(store, tmp_path):
    with pytest.raises(AssetIOError):
        store.move_asset(tmp_path / "missing", store.create_assets("p1") / "crop.png")


def test_move_into_missing_directory_fails(store, tmp_path):
    src = tmp_path / "blob"
    src.write_bytes(b"abc")
    with pytest.raises(AssetIOError):
        store.move_asset(src, store.root / "nope" / "original.png")
    assert src.exists()


def test_copy_asset_keeps_source(store, tmp_path):
    src = store.create_assets("p1") / "original.png"
    src.write_bytes(b"abc")
    dest = store.create_assets("p2") / "original.png"
    store.copy_asset(src, dest)
    assert src.read_bytes() == b"abc"
    assert dest.read_bytes() == b"abc"


def test_remove_asset_clears_role_files(store):
    directory = store.create_assets("p1")
    (directory / "crop.png").write_bytes(b"1")
    (directory / "original.png").write_bytes(b"2")
    store.remove_asset("p1", "crop")
    assert store.find_asset("p1", "crop") is None
    assert store.find_asset("p1", "original") == directory / "original.png"


@pytest.mark.parametrize("bad_id", ["", "..", "a/b"])
def test_invalid_ids_are_rejected(store, bad_id):
    with pytest.raises(DirectoryError):
        store.create_assets(bad_id)

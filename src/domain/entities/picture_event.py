"""Tagged event variants persisted by the picture event store.

``PictureCreated`` carries the complete initial field set, ``PictureUpdated``
carries a :class:`PicturePatch` in which only explicitly assigned fields are
applied, and ``PictureDeleted`` retires the id.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, ClassVar, Union

from src.domain.entities.picture import CropGeometry, OriginalInfo, PictureEntity


class _Unset:
    _instance: ClassVar[_Unset | None] = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def _original_from_dict(data: dict[str, Any] | None) -> OriginalInfo | None:
    return OriginalInfo(**data) if data else None


def _crop_from_dict(data: dict[str, Any] | None) -> CropGeometry | None:
    return CropGeometry(**data) if data else None


@dataclass(frozen=True)
class PicturePatch:
    """Partial field set; fields left as ``UNSET`` are not touched."""

    name: str = UNSET
    purpose: str = UNSET
    owner: str | None = UNSET
    file_name: str | None = UNSET
    original: OriginalInfo | None = UNSET
    crop: CropGeometry | None = UNSET

    def changes(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}

    def apply(self, picture: PictureEntity) -> PictureEntity:
        return replace(picture, **self.changes())

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key, value in self.changes().items():
            if isinstance(value, (OriginalInfo, CropGeometry)):
                value = asdict(value)
            out[key] = value
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PicturePatch:
        kwargs = dict(data)
        if "original" in kwargs:
            kwargs["original"] = _original_from_dict(kwargs["original"])
        if "crop" in kwargs:
            kwargs["crop"] = _crop_from_dict(kwargs["crop"])
        return cls(**kwargs)


@dataclass(frozen=True)
class PictureCreated:
    type: ClassVar[str] = "PictureCreated"

    picture: str
    name: str
    purpose: str
    owner: str | None
    file_name: str | None = None
    original: OriginalInfo | None = None
    crop: CropGeometry | None = None

    def to_entity(self) -> PictureEntity:
        return PictureEntity(
            id=self.picture,
            name=self.name,
            purpose=self.purpose,
            owner=self.owner,
            file_name=self.file_name,
            original=self.original,
            crop=self.crop,
        )

    def data(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "purpose": self.purpose,
            "owner": self.owner,
            "file_name": self.file_name,
            "original": asdict(self.original) if self.original else None,
            "crop": asdict(self.crop) if self.crop else None,
        }


@dataclass(frozen=True)
class PictureUpdated:
    type: ClassVar[str] = "PictureUpdated"

    picture: str
    patch: PicturePatch

    def data(self) -> dict[str, Any]:
        return self.patch.to_dict()


@dataclass(frozen=True)
class PictureDeleted:
    type: ClassVar[str] = "PictureDeleted"

    picture: str

    def data(self) -> dict[str, Any]:
        return {}


PictureEvent = Union[PictureCreated, PictureUpdated, PictureDeleted]


def event_to_dict(event: PictureEvent) -> dict[str, Any]:
    return {"type": event.type, "picture": event.picture, "data": event.data()}


def event_from_dict(payload: dict[str, Any]) -> PictureEvent:
    kind = payload["type"]
    picture = payload["picture"]
    data = payload.get("data") or {}
    if kind == PictureCreated.type:
        return PictureCreated(
            picture=picture,
            name=data["name"],
            purpose=data["purpose"],
            owner=data.get("owner"),
            file_name=data.get("file_name"),
            original=_original_from_dict(data.get("original")),
            crop=_crop_from_dict(data.get("crop")),
        )
    if kind == PictureUpdated.type:
        return PictureUpdated(picture=picture, patch=PicturePatch.from_dict(data))
    if kind == PictureDeleted.type:
        return PictureDeleted(picture=picture)
    raise ValueError(f"Unknown picture event type: {kind}")

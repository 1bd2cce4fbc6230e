from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OriginalInfo:
    width: int
    height: int
    extension: str  # normalized, e.g. "jpeg", "png"


@dataclass(frozen=True)
class CropGeometry:
    x: int
    y: int
    width: int
    height: int
    zoom: float = 1.0
    orientation: int = 0

    @classmethod
    def full_frame(cls, width: int, height: int) -> CropGeometry:
        return cls(x=0, y=0, width=width, height=height, zoom=1.0, orientation=0)


@dataclass(frozen=True)
class PictureEntity:
    id: str
    name: str
    purpose: str
    owner: str | None
    file_name: str | None = None
    original: OriginalInfo | None = None
    # absent crop == "uncropped"; drives the in-place vs. fork decision
    crop: CropGeometry | None = None

    @property
    def is_cropped(self) -> bool:
        return self.crop is not None

    def original_file(self) -> str | None:
        if self.original is None:
            return None
        return f"original.{self.original.extension}"

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from src.domain.errors import UnreadableImage
from src.domain.services.file_naming import normalize_extension


@dataclass(frozen=True)
class ImageProbe:
    width: int
    height: int
    format: str  # lowercase, e.g. "png", "jpeg", "webp"


def probe_image(path: Path | str) -> ImageProbe:
    """Read dimensions and format from the header of the file at ``path``."""
    try:
        with Image.open(path) as img:
            width, height = img.size
            fmt = img.format
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise UnreadableImage(f"Cannot read image metadata from {path}: {exc}") from exc
    if not fmt or width <= 0 or height <= 0:
        raise UnreadableImage(f"Image at {path} has no usable format or size")
    return ImageProbe(width=width, height=height, format=normalize_extension(fmt))

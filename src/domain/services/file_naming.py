from __future__ import annotations

import re
from urllib.parse import unquote, urlparse

from src.domain.errors import InvalidFileName

_EXTENSION_RE = re.compile(r"\.([A-Z0-9]+)$", re.IGNORECASE)

# aliases collapsed onto one canonical extension
_EXTENSION_ALIASES = {"jpg": "jpeg"}


def normalize_extension(extension: str) -> str:
    ext = extension.lower().lstrip(".")
    return _EXTENSION_ALIASES.get(ext, ext)


def extension_from_filename(file_name: str | None) -> str:
    """Return the normalized extension of ``file_name``.

    The trailing dot-suffix is matched case-insensitively and lowercased, and
    ``jpg`` is rewritten to ``jpeg`` ("shot.JPG" -> "jpeg", "a.png" -> "png").

    Raises:
        InvalidFileName: If the name has no alphanumeric suffix.
    """
    match = _EXTENSION_RE.search(file_name or "")
    if match is None:
        raise InvalidFileName(file_name)
    return normalize_extension(match.group(1))


def filename_from_url(url: str) -> str:
    """Last path segment of ``url``, ignoring query string and fragment."""
    path = urlparse(url).path
    return unquote(path.rstrip("/").split("/")[-1]) if path else ""

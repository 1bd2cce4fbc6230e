from __future__ import annotations

import logging
import os
from pathlib import Path

import requests

from src.domain.errors import AssetIOError, DownloadFailed

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class HttpDownloader:
    """Streams a remote resource to a local staging file."""

    def __init__(self, timeout: float | None = None, session: requests.Session | None = None) -> None:
        if timeout is None:
            timeout = float(os.getenv("DOWNLOAD_TIMEOUT_SECONDS", "30"))
        self.timeout = timeout
        self.session = session or requests.Session()

    def download(self, url: str, destination: Path) -> Path:
        destination = Path(destination)
        logger.debug("Downloading %s -> %s", url, destination)
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                destination.parent.mkdir(parents=True, exist_ok=True)
                with destination.open("wb") as fh:
                    for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                        fh.write(chunk)
        except requests.RequestException as exc:
            destination.unlink(missing_ok=True)
            raise DownloadFailed(f"Failed to download {url}: {exc}") from exc
        except OSError as exc:
            destination.unlink(missing_ok=True)
            raise AssetIOError(f"Failed to stage download of {url}: {exc}") from exc
        return destination

    def close(self) -> None:
        self.session.close()

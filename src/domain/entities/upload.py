from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class UploadState(str, Enum):
    PENDING = "pending"
    DONE = "done"


@dataclass(frozen=True)
class UploadEntity:
    id: str
    file_name: str
    state: UploadState
    created_at: datetime
    size: int | None = None  # bytes, known once content is stored

    @property
    def is_done(self) -> bool:
        return self.state == UploadState.DONE

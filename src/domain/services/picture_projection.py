from __future__ import annotations

from src.domain.entities.picture import PictureEntity
from src.domain.entities.picture_event import (
    PictureCreated,
    PictureDeleted,
    PictureEvent,
    PictureUpdated,
)
from src.domain.errors import PictureError, PictureNotFound


def apply_event(state: PictureEntity | None, event: PictureEvent) -> PictureEntity | None:
    """Fold one event into the current state of its picture.

    ``None`` means the picture does not exist (never created, or deleted).
    """
    if isinstance(event, PictureCreated):
        if state is not None:
            raise PictureError(f"Picture already exists: {event.picture}")
        return event.to_entity()
    if state is None:
        raise PictureNotFound(event.picture)
    if isinstance(event, PictureUpdated):
        return event.patch.apply(state)
    if isinstance(event, PictureDeleted):
        return None
    raise TypeError(f"Unsupported event: {event!r}")


def replay(events: list[PictureEvent]) -> PictureEntity | None:
    state: PictureEntity | None = None
    for event in events:
        state = apply_event(state, event)
    return state

"""Append-only picture event log with a materialized current-state view.

Commands addressed to one picture id must run one at a time: callers wrap
their read-decide-emit sequence in :meth:`PictureEventStore.command`. The
mutex is per process, so a multi-process deployment needs a store that
serializes per id itself.
"""
from __future__ import annotations

import json
import logging
import threading
from collections import defaultdict
from contextlib import contextmanager
from typing import Generator

from src.domain.entities.picture import PictureEntity
from src.domain.entities.picture_event import (
    PictureCreated,
    PictureEvent,
    event_from_dict,
    event_to_dict,
)
from src.domain.errors import PictureError
from src.domain.services.picture_projection import apply_event, replay
from src.infrastructure.database.postgres_client import PostgresClient, get_postgres_client

logger = logging.getLogger(__name__)


class _CommandLock:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.holders = 0


class PictureEventStore:
    def __init__(self, pg_client: PostgresClient | None = None) -> None:
        self.pg_client = pg_client
        self._events: dict[str, list[PictureEvent]] = defaultdict(list)
        self._view: dict[str, PictureEntity] = {}
        self._guard = threading.Lock()
        self._locks: dict[str, _CommandLock] = {}

    @contextmanager
    def command(self, picture_id: str) -> Generator[None, None, None]:
        """Hold the per-id mutex for the duration of one command.

        The mutex is dropped from the lock map once its last holder or waiter
        leaves, so ids that are never addressed again cost nothing.
        """
        with self._guard:
            entry = self._locks.get(picture_id)
            if entry is None:
                entry = self._locks[picture_id] = _CommandLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._locks[picture_id]

    def emit(self, event: PictureEvent) -> None:
        """Append ``event`` to its picture's log and refresh the view.

        Raises:
            PictureNotFound: Update or delete of an absent picture.
            PictureError: Creation on an id that already has a history.
        """
        with self._guard:
            history = self.history(event.picture)
            if isinstance(event, PictureCreated) and history:
                raise PictureError(f"Picture id already used: {event.picture}")
            state = apply_event(self._current(event.picture, history), event)
            if self.pg_client:
                self.pg_client.execute_update(
                    "INSERT INTO picture_events (picture_id, type, data) VALUES (%s, %s, %s)",
                    (event.picture, event.type, json.dumps(event.data())),
                )
            else:
                self._events[event.picture].append(event)
                if state is None:
                    self._view.pop(event.picture, None)
                else:
                    self._view[event.picture] = state
        logger.info("Committed %s for picture %s", event.type, event.picture)

    def _current(self, picture_id: str, history: list[PictureEvent]) -> PictureEntity | None:
        if self.pg_client:
            return replay(history)
        return self._view.get(picture_id)

    def get(self, picture_id: str) -> PictureEntity | None:
        if self.pg_client:
            return replay(self.history(picture_id))
        return self._view.get(picture_id)

    def history(self, picture_id: str) -> list[PictureEvent]:
        if self.pg_client:
            rows = self.pg_client.execute_many(
                "SELECT type, picture_id, data FROM picture_events WHERE picture_id = %s ORDER BY seq",
                (picture_id,),
            )
            return [
                event_from_dict({"type": row["type"], "picture": row["picture_id"], "data": row["data"]})
                for row in rows
            ]
        return list(self._events.get(picture_id, ()))

    def list_ids(self) -> list[str]:
        """Ids of pictures that currently exist."""
        if self.pg_client:
            rows = self.pg_client.execute_many("SELECT DISTINCT picture_id FROM picture_events")
            return sorted(row["picture_id"] for row in rows if self.get(row["picture_id"]) is not None)
        return sorted(self._view)

    def dump(self, picture_id: str) -> list[dict]:
        return [event_to_dict(event) for event in self.history(picture_id)]


def create_event_store() -> PictureEventStore:
    return PictureEventStore(pg_client=get_postgres_client())

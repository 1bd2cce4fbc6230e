"""PostgreSQL access for the picture event log and upload records.

Enabled with ``USE_LOCAL_DB=1``; otherwise the repositories keep their state
in process memory.
"""
from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Any, Generator

import psycopg2
from psycopg2 import pool
from psycopg2.extras import RealDictCursor

SCHEMA = """
CREATE TABLE IF NOT EXISTS picture_events (
    seq BIGSERIAL PRIMARY KEY,
    picture_id TEXT NOT NULL,
    type TEXT NOT NULL,
    data JSONB NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
CREATE INDEX IF NOT EXISTS picture_events_picture_idx ON picture_events (picture_id, seq);
CREATE TABLE IF NOT EXISTS uploads (
    id TEXT PRIMARY KEY,
    file_name TEXT NOT NULL,
    state TEXT NOT NULL,
    size BIGINT,
    created_at TIMESTAMPTZ NOT NULL
);
"""


class PostgresClient:
    """Pooled psycopg2 connections with commit/rollback scoping."""

    def __init__(self) -> None:
        try:
            self._pool = pool.SimpleConnectionPool(
                minconn=1,
                maxconn=int(os.getenv("POSTGRES_MAX_CONNECTIONS", "10")),
                host=os.getenv("POSTGRES_HOST", "localhost"),
                port=int(os.getenv("POSTGRES_PORT", "5432")),
                database=os.getenv("POSTGRES_DB", "pictures"),
                user=os.getenv("POSTGRES_USER", "pictures"),
                password=os.getenv("POSTGRES_PASSWORD", "pictures_dev_password"),
            )
        except psycopg2.Error as exc:  # pragma: no cover - needs a server
            raise RuntimeError(f"Failed to initialize PostgreSQL connection pool: {exc}") from exc

    @contextmanager
    def get_connection(self) -> Generator[Any, None, None]:
        """Borrow a connection; commits on success, rolls back on error."""
        conn = self._pool.getconn()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._pool.putconn(conn)

    @contextmanager
    def get_cursor(self, dict_cursor: bool = True) -> Generator[Any, None, None]:
        with self.get_connection() as conn:
            cursor = conn.cursor(cursor_factory=RealDictCursor if dict_cursor else None)
            try:
                yield cursor
            finally:
                cursor.close()

    def ensure_schema(self) -> None:
        with self.get_cursor(dict_cursor=False) as cursor:
            cursor.execute(SCHEMA)

    def execute_one(self, query: str, params: tuple = ()) -> dict[str, Any] | None:
        with self.get_cursor() as cursor:
            cursor.execute(query, params)
            row = cursor.fetchone()
            return dict(row) if row else None

    def execute_many(self, query: str, params: tuple = ()) -> list[dict[str, Any]]:
        with self.get_cursor() as cursor:
            cursor.execute(query, params)
            return [dict(row) for row in cursor.fetchall()]

    def execute_update(self, query: str, params: tuple = ()) -> int:
        """Run an INSERT/UPDATE/DELETE and return the affected row count."""
        with self.get_cursor(dict_cursor=False) as cursor:
            cursor.execute(query, params)
            return cursor.rowcount

    def close(self) -> None:
        self._pool.closeall()


_POSTGRES_CLIENT: PostgresClient | None = None


def get_postgres_client() -> PostgresClient | None:
    """Shared client when ``USE_LOCAL_DB=1``, else ``None``."""
    global _POSTGRES_CLIENT
    if os.getenv("USE_LOCAL_DB", "0") != "1":
        return None
    if _POSTGRES_CLIENT is None:
        _POSTGRES_CLIENT = PostgresClient()
        _POSTGRES_CLIENT.ensure_schema()
    return _POSTGRES_CLIENT


def close_postgres_client() -> bool:
    """Close the shared pool. Returns whether there was one to close."""
    global _POSTGRES_CLIENT
    if _POSTGRES_CLIENT is None:
        return False
    _POSTGRES_CLIENT.close()
    _POSTGRES_CLIENT = None
    return True

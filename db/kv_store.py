"""
db/kv_store.py
--------------
Key-value access on top of PostgreSQL.
Each namespace is a table of (key, value, expires_at) rows; expired
rows are invisible to readers.
"""

from typing import Iterator, Optional, Protocol

import psycopg2
from psycopg2 import sql

from db.connection import connection
from utils.errors import StorageError
from utils.logger import get_logger

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    """Durable string store keyed by string, with optional expiry."""

    def get(self, key: str) -> Optional[str]:
        ...

    def put(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def list_keys(self, prefix: str, page_size: int = 1000) -> Iterator[str]:
        ...


class PostgresKeyValueStore:
    """KeyValueStore backed by one PostgreSQL table."""

    _NOT_EXPIRED = "(expires_at IS NULL OR expires_at > NOW())"

    def __init__(self, table: str):
        self.table = table
        self._table = sql.Identifier(table)

    # ── READ ──────────────────────────────────────────────

    def get(self, key: str) -> Optional[str]:
        """Return the live value stored at `key`, or None."""
        query = sql.SQL(
            "SELECT value FROM {table} WHERE key = %s AND " + self._NOT_EXPIRED + ";"
        ).format(table=self._table)
        row = self._fetch_one(query, (key,), f"get {key}")
        return row[0] if row else None

    def list_keys(self, prefix: str, page_size: int = 1000) -> Iterator[str]:
        """
        Yield every live key starting with `prefix`, in key order.

        Pages are fetched lazily with keyset pagination, so the caller sees
        one sequence regardless of how many rows exist.
        """
        query = sql.SQL(
            "SELECT key FROM {table} "
            "WHERE starts_with(key, %s) AND key > %s AND " + self._NOT_EXPIRED + " "
            "ORDER BY key LIMIT %s;"
        ).format(table=self._table)
        last_key = ""
        while True:
            rows = self._fetch_all(query, (prefix, last_key, page_size), f"list {prefix}*")
            for (key,) in rows:
                yield key
            if len(rows) < page_size:
                return
            last_key = rows[-1][0]

    # ── WRITE ─────────────────────────────────────────────

    def put(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        """
        Insert or overwrite `key` in a single statement.

        Args:
            ttl_seconds: Row lifetime; None keeps the row until deleted.
        """
        query = sql.SQL("""
            INSERT INTO {table} (key, value, expires_at, updated_at)
            VALUES (%s, %s, CASE WHEN %s::int IS NULL THEN NULL
                                 ELSE NOW() + make_interval(secs => %s::int) END, NOW())
            ON CONFLICT (key) DO UPDATE
                SET value = EXCLUDED.value,
                    expires_at = EXCLUDED.expires_at,
                    updated_at = EXCLUDED.updated_at;
        """).format(table=self._table)
        self._execute(query, (key, value, ttl_seconds, ttl_seconds), f"put {key}")

    def delete(self, key: str) -> None:
        """Remove `key`; deleting a missing key is not an error."""
        query = sql.SQL("DELETE FROM {table} WHERE key = %s;").format(table=self._table)
        self._execute(query, (key,), f"delete {key}")

    # ── HELPERS ───────────────────────────────────────────

    def _execute(self, query: sql.Composable, params: tuple, action: str) -> None:
        with connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                conn.commit()
            except psycopg2.Error as e:
                conn.rollback()
                logger.error(f"[{self.table}] Failed to {action}: {e}")
                raise StorageError(f"{self.table}: failed to {action}") from e

    def _fetch_one(self, query: sql.Composable, params: tuple, action: str) -> Optional[tuple]:
        with connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    return cur.fetchone()
            except psycopg2.Error as e:
                conn.rollback()
                logger.error(f"[{self.table}] Failed to {action}: {e}")
                raise StorageError(f"{self.table}: failed to {action}") from e

    def _fetch_all(self, query: sql.Composable, params: tuple, action: str) -> list[tuple]:
        with connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    return cur.fetchall()
            except psycopg2.Error as e:
                conn.rollback()
                logger.error(f"[{self.table}] Failed to {action}: {e}")
                raise StorageError(f"{self.table}: failed to {action}") from e

from __future__ import annotations

import json
from typing import Any, Optional, Sequence

import mysql.connector

from ..core.exceptions import StoreUnavailable
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .repository import KeyValueStore


class MySQLKeyValueStore(KeyValueStore):
    """Values are stored as JSON text in the `kv_store` table."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("SELECT store_value FROM kv_store WHERE store_key=%s", (key,))
                r = fetchone(cur)
        except mysql.connector.Error as e:
            raise StoreUnavailable(f"Cannot read {key!r}: {e}") from e
        if not r:
            return default
        return json.loads(r["store_value"])

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False, default=str)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO kv_store (store_key, store_value)
                    VALUES (%s, %s)
                    ON DUPLICATE KEY UPDATE store_value=VALUES(store_value)
                    """,
                    (key, payload),
                )
        except mysql.connector.Error as e:
            raise StoreUnavailable(f"Cannot write {key!r}: {e}") from e

    def delete(self, key: str) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM kv_store WHERE store_key=%s", (key,))
                return cur.rowcount > 0
        except mysql.connector.Error as e:
            raise StoreUnavailable(f"Cannot delete {key!r}: {e}") from e

    def keys(self, prefix: str = "") -> Sequence[str]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "SELECT store_key FROM kv_store WHERE store_key LIKE %s ORDER BY store_key",
                    (prefix.replace("%", r"\%").replace("_", r"\_") + "%",),
                )
                return [r["store_key"] for r in fetchall(cur)]
        except mysql.connector.Error as e:
            raise StoreUnavailable(f"Cannot list keys: {e}") from e

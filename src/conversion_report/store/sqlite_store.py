"""SQLite-backed watermark store for local runs."""

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from conversion_report.store.base import BaseWatermarkStore, store_error


class SqliteWatermarkStore(BaseWatermarkStore):
    """
    Same contract as the Firebase store, one row per root.
    The document is stored as JSON text and replaced on every write.
    """

    def __init__(self, db_path: str | Path = "conversion_report.db"):
        self._db_path = Path(db_path)
        self._ensure_schema()

    def _connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        schema_path = Path(__file__).parent / "schema.sql"
        with self._connection() as conn:
            conn.executescript(schema_path.read_text())

    def read(self, root: str) -> Optional[dict[str, Any]]:
        try:
            with self._connection() as conn:
                row = conn.execute(
                    "SELECT data FROM watermark_documents WHERE root = ?", (root,)
                ).fetchone()
            return json.loads(row["data"]) if row else None
        except (sqlite3.Error, ValueError) as e:
            raise store_error("read", root, e) from e

    def write(self, root: str, document: dict[str, Any]) -> None:
        now = datetime.now(timezone.utc).isoformat()
        try:
            with self._connection() as conn:
                conn.execute(
                    """
                    INSERT INTO watermark_documents (root, data, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(root) DO UPDATE SET
                        data = excluded.data,
                        updated_at = excluded.updated_at
                    """,
                    (root, json.dumps(document), now),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise store_error("write", root, e) from e

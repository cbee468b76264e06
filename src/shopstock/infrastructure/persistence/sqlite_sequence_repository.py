"""SQLite-backed implementation of SequenceRepository."""

from __future__ import annotations

import sqlite3

from shopstock.domain.repository.sequence_repository import SequenceRepository


class SqliteSequenceRepository(SequenceRepository):

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def advance(self, key: str) -> int:
        self._conn.execute(
            """
            INSERT INTO document_sequences (key, last_value) VALUES (?, 1)
            ON CONFLICT (key) DO UPDATE SET last_value = last_value + 1
            """,
            (key,),
        )
        row = self._conn.execute(
            "SELECT last_value FROM document_sequences WHERE key = ?", (key,)
        ).fetchone()
        return row["last_value"]

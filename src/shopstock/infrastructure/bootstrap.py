"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from shopstock.infrastructure.config import Settings, load_settings
from shopstock.infrastructure.persistence.schema import connect, init_schema
from shopstock.infrastructure.persistence.sqlite_unit_of_work import SqliteUnitOfWork


def unit_of_work(settings: Settings | None = None) -> SqliteUnitOfWork:
    settings = settings or load_settings()
    conn = connect(settings.db_path)
    init_schema(conn)
    return SqliteUnitOfWork(conn)

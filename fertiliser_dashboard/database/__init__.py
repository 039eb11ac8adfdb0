# database/__init__.py
from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from ..config import DB_PATH
from ..constants import SCHEMA_VERSION
from . import schema as schema_module
from .seeders.default_data import seed as seed_default_data
from .versioning import get_current_version, set_current_version

_log = logging.getLogger(__name__)


def get_connection(db_path: Path | str | None = None) -> sqlite3.Connection:
    """
    Returns a sqlite3.Connection with:
      - WAL mode
      - foreign_keys ON
      - row_factory = sqlite3.Row (so rows behave like dicts and tuples)
    Ensures schema & seed data are applied idempotently.

    `db_path` defaults to the configured application database; tests pass a
    temporary file instead.
    """
    path = Path(db_path) if db_path is not None else DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    # Always apply the schema (idempotent: uses CREATE IF NOT EXISTS / DROP TRIGGER IF EXISTS)
    schema_module.init_schema(path)

    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.execute("PRAGMA journal_mode = WAL;")

    if get_current_version(conn) is None:
        set_current_version(conn, SCHEMA_VERSION)
        _log.info("Initialised database %s at schema %s", path, SCHEMA_VERSION)

    # Seeders should be safe to run repeatedly (idempotent).
    seed_default_data(conn)

    conn.commit()
    return conn


__all__ = [
    "get_connection",
]

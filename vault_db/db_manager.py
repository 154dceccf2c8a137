"""
db_manager.py — SQLite access for encrypted secret blobs.

One row per secret name. This module only moves bytes in and out; it never
sees plaintext. All sqlite3/OS failures surface as StorageError.
"""

import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from vault_core.errors import StorageError
from vault_core.log import get_logger

from .setup_database import setup_database

logger = get_logger("db")


@contextmanager
def get_db_connection(db_path: str, *, create: bool = False) -> Iterator[sqlite3.Connection]:
    """Open the vault database, creating the schema first when ``create`` is set."""
    try:
        if create:
            setup_database(db_path)
        conn = sqlite3.connect(db_path)
    except (sqlite3.Error, OSError) as e:
        raise StorageError(f"cannot open secret database: {e}", context={"path": db_path}) from e
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    except sqlite3.Error as e:
        conn.rollback()
        raise StorageError(f"secret database error: {e}", context={"path": db_path}) from e
    finally:
        conn.close()


def database_exists(db_path: str) -> bool:
    return os.path.exists(db_path)


def upsert_secret(db_path: str, name: str, ciphertext: bytes) -> None:
    """Insert or overwrite the blob stored under ``name``."""
    now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
    with get_db_connection(db_path, create=True) as conn:
        conn.execute(
            """INSERT INTO secrets (name, ciphertext, created_at, updated_at)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(name) DO UPDATE SET
                   ciphertext = excluded.ciphertext,
                   updated_at = excluded.updated_at""",
            (name, sqlite3.Binary(ciphertext), now, now),
        )
        conn.commit()
    logger.debug("stored blob for %r in %s", name, db_path)


def fetch_secret(db_path: str, name: str) -> Optional[bytes]:
    """Return the blob stored under ``name``, or None."""
    if not database_exists(db_path):
        return None
    with get_db_connection(db_path) as conn:
        row = conn.execute("SELECT ciphertext FROM secrets WHERE name = ?", (name,)).fetchone()
    if row is None:
        return None
    return bytes(row["ciphertext"])


def list_secret_names(db_path: str) -> List[str]:
    if not database_exists(db_path):
        return []
    with get_db_connection(db_path) as conn:
        rows = conn.execute("SELECT name FROM secrets ORDER BY name").fetchall()
    return [row["name"] for row in rows]

import os
import sqlite3

from vault_core.log import get_logger

logger = get_logger("db")

SCHEMA = """
CREATE TABLE IF NOT EXISTS secrets (
    name TEXT PRIMARY KEY,
    ciphertext BLOB NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""


def setup_database(db_path: str) -> None:
    """Create the vault database and its ``secrets`` table if missing.

    Raises sqlite3.Error / OSError; callers wrap them as StorageError.
    """

    directory = os.path.dirname(os.path.abspath(db_path))
    os.makedirs(directory, mode=0o700, exist_ok=True)

    conn = sqlite3.connect(db_path)
    try:
        conn.execute(SCHEMA)
        conn.commit()
    finally:
        conn.close()
    try:
        os.chmod(db_path, 0o600)
    except OSError as e:
        # some filesystems (FAT, network shares) refuse chmod
        logger.debug("could not restrict permissions on %s: %s", db_path, e)

"""
secret_store.py — Named secrets, encrypted at rest, one row per name.

    store = open_store()
    store.save("github", "JBSWY3DPEHPK3PXP")
    store.load("github")  # -> "JBSWY3DPEHPK3PXP"

The store treats secret values as opaque text; it does not check Base32.
"""

import threading
from typing import List, Optional

from vault_core.config import VaultSettings
from vault_core.errors import InvalidArgumentError, SecretNotFoundError
from vault_core.log import get_logger

from . import db_manager
from .crypto import SecretProtector, select_key_provider

logger = get_logger("store")


def _require_text(value, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidArgumentError(f"{what} must be a non-empty string")
    return value


class SecretStore:
    def __init__(self, db_path: str, protector: SecretProtector) -> None:
        self.db_path = db_path
        self.protector = protector
        self._write_lock = threading.Lock()

    def save(self, name: str, secret: str) -> None:
        """Encrypt ``secret`` and store it under ``name``, replacing any previous value."""
        _require_text(name, "name")
        _require_text(secret, "secret")
        with self._write_lock:
            # first save may create the master key; keep that inside the lock too
            blob = self.protector.encrypt(name, secret)
            db_manager.upsert_secret(self.db_path, name, blob)
        logger.info("saved secret %r", name)

    def load(self, name: str) -> str:
        """Return the plaintext stored under ``name``.

        Raises SecretNotFoundError, DecryptionError or StorageError.
        """
        _require_text(name, "name")
        blob = db_manager.fetch_secret(self.db_path, name)
        if blob is None:
            raise SecretNotFoundError(f"no secret named {name!r}", context={"name": name})
        return self.protector.decrypt(name, blob)

    def names(self) -> List[str]:
        return db_manager.list_secret_names(self.db_path)


def open_store(settings: Optional[VaultSettings] = None) -> SecretStore:
    """Build a store from ``settings`` (default: environment)."""
    settings = settings or VaultSettings.from_env()
    protector = SecretProtector(select_key_provider(settings))
    logger.debug("opening secret store at %s", settings.db_path)
    return SecretStore(settings.db_path, protector)

"""
vault_db package
================

Secret Store: named secrets persisted in SQLite, encrypted with AES-256-GCM
under a master key bound to the local user (OS keychain or 0600 key file).
"""

from .crypto import FileKeyProvider, KeyringKeyProvider, SecretProtector, select_key_provider
from .secret_store import SecretStore, open_store

__all__ = [
    "FileKeyProvider",
    "KeyringKeyProvider",
    "SecretProtector",
    "SecretStore",
    "open_store",
    "select_key_provider",
]

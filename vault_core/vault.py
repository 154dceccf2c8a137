"""
vault.py — Name-based surface: save_secret / load_secret / generate_otp.

Each call opens the store from the environment unless a ``store`` is given,
so nothing is cached between calls.
"""

from typing import List, Optional

from . import otp_core
from .config import DEFAULT_DIGITS, DEFAULT_TIME_STEP


def _store(store=None):
    if store is not None:
        return store
    # vault_db imports vault_core modules; resolve at call time
    from vault_db import open_store

    return open_store()


def save_secret(name: str, secret: str, store=None) -> None:
    _store(store).save(name, secret)


def load_secret(name: str, store=None) -> str:
    return _store(store).load(name)


def list_secrets(store=None) -> List[str]:
    return _store(store).names()


def generate_otp(
    name: str,
    length: int = DEFAULT_DIGITS,
    window: int = DEFAULT_TIME_STEP,
    timestamp: Optional[float] = None,
    store=None,
) -> str:
    """Load the secret stored under ``name`` and return its current TOTP code."""
    secret = load_secret(name, store)
    return otp_core.generate(secret, length, window, timestamp)


def verify_otp(
    name: str,
    code: str,
    length: int = DEFAULT_DIGITS,
    window: int = DEFAULT_TIME_STEP,
    timestamp: Optional[float] = None,
    store=None,
) -> bool:
    secret = load_secret(name, store)
    return otp_core.verify(secret, code, length, window, timestamp)

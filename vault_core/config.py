"""
config.py — Constants and environment-driven settings.

Environment variables:
- OTPVAULT_HOME         vault directory (default ~/.otp_vault)
- OTPVAULT_DB           SQLite database path (default $OTPVAULT_HOME/secrets.db)
- OTPVAULT_KEY_BACKEND  auto | keyring | file
- OTPVAULT_KEY_FILE     master key file for the file backend
- OTPVAULT_LOG_LEVEL    logging level name (default WARNING)
"""

import os
from dataclasses import dataclass
from typing import Optional

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6          # RFC 6238 recommends 6 digits
DEFAULT_TIME_STEP = 30      # TOTP step (seconds)
MAX_DIGITS = 10             # a 31-bit truncated value has at most 10 digits
SECRET_BYTES = 20           # 160-bit secret (common practice)

DEFAULT_HOME = os.path.join("~", ".otp_vault")
DB_FILENAME = "secrets.db"
KEY_FILENAME = "master.key"
KEY_BACKENDS = ("auto", "keyring", "file")
KEYRING_SERVICE = "otp-vault"


def getenv(key: str, default: Optional[str] = None, *aliases: str) -> Optional[str]:
    """Return first non-empty env var among key and aliases."""

    for k in (key, *aliases):
        v = os.getenv(k)
        if v not in (None, ""):
            return v
    return default


@dataclass(frozen=True)
class VaultSettings:
    home: str
    db_path: str
    key_backend: str
    key_file: str

    @classmethod
    def from_env(cls) -> "VaultSettings":
        home = os.path.expanduser(getenv("OTPVAULT_HOME", DEFAULT_HOME))
        backend = getenv("OTPVAULT_KEY_BACKEND", "auto").strip().lower()
        if backend not in KEY_BACKENDS:
            # imported here: errors must stay importable without config
            from .errors import InvalidArgumentError

            raise InvalidArgumentError(
                f"OTPVAULT_KEY_BACKEND must be one of {', '.join(KEY_BACKENDS)}",
                context={"value": backend},
            )
        return cls(
            home=home,
            db_path=os.path.expanduser(getenv("OTPVAULT_DB", os.path.join(home, DB_FILENAME))),
            key_backend=backend,
            key_file=os.path.expanduser(getenv("OTPVAULT_KEY_FILE", os.path.join(home, KEY_FILENAME))),
        )

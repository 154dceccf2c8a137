import sys
from pathlib import Path

import keyring
import pytest
from keyring.backend import KeyringBackend
from keyring.errors import PasswordDeleteError

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from vault_db.crypto import FileKeyProvider, SecretProtector  # noqa: E402
from vault_db.secret_store import SecretStore  # noqa: E402

# RFC 6238 Appendix B seed "12345678901234567890" in Base32
RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


class MemoryKeyring(KeyringBackend):
    """In-process keychain for tests."""

    priority = 1

    def __init__(self):
        super().__init__()
        self.passwords = {}

    def get_password(self, service, username):
        return self.passwords.get((service, username))

    def set_password(self, service, username, password):
        self.passwords[(service, username)] = password

    def delete_password(self, service, username):
        try:
            del self.passwords[(service, username)]
        except KeyError:
            raise PasswordDeleteError(username) from None


@pytest.fixture
def memory_keyring():
    previous = keyring.get_keyring()
    backend = MemoryKeyring()
    keyring.set_keyring(backend)
    yield backend
    keyring.set_keyring(previous)


@pytest.fixture
def vault_env(tmp_path, monkeypatch):
    """Point the environment-configured vault at a temporary directory."""
    home = tmp_path / "vault"
    monkeypatch.setenv("OTPVAULT_HOME", str(home))
    monkeypatch.setenv("OTPVAULT_KEY_BACKEND", "file")
    monkeypatch.delenv("OTPVAULT_DB", raising=False)
    monkeypatch.delenv("OTPVAULT_KEY_FILE", raising=False)
    return home


@pytest.fixture
def key_path(tmp_path):
    return str(tmp_path / "master.key")


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "secrets.db")


@pytest.fixture
def store(db_path, key_path):
    return SecretStore(db_path, SecretProtector(FileKeyProvider(key_path), principal="alice@workstation"))

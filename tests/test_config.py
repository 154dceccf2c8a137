import os

import pytest

from vault_core.config import VaultSettings
from vault_core.errors import InvalidArgumentError


def test_defaults(monkeypatch):
    for key in ("OTPVAULT_HOME", "OTPVAULT_DB", "OTPVAULT_KEY_BACKEND", "OTPVAULT_KEY_FILE"):
        monkeypatch.delenv(key, raising=False)
    settings = VaultSettings.from_env()
    home = os.path.expanduser(os.path.join("~", ".otp_vault"))
    assert settings.home == home
    assert settings.db_path == os.path.join(home, "secrets.db")
    assert settings.key_file == os.path.join(home, "master.key")
    assert settings.key_backend == "auto"


def test_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("OTPVAULT_HOME", str(tmp_path))
    monkeypatch.setenv("OTPVAULT_DB", str(tmp_path / "other.db"))
    monkeypatch.setenv("OTPVAULT_KEY_BACKEND", " File ")
    monkeypatch.delenv("OTPVAULT_KEY_FILE", raising=False)
    settings = VaultSettings.from_env()
    assert settings.db_path == str(tmp_path / "other.db")
    assert settings.key_file == os.path.join(str(tmp_path), "master.key")
    assert settings.key_backend == "file"


def test_unknown_backend(monkeypatch):
    monkeypatch.setenv("OTPVAULT_KEY_BACKEND", "dpapi")
    with pytest.raises(InvalidArgumentError):
        VaultSettings.from_env()

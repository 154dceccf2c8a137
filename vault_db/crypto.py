"""
crypto.py — Encrypt-at-rest bound to the local user.

Capability: "encrypt bytes recoverable only by the same local principal" and
"decrypt bytes previously produced by that principal".

- Cipher: AES-256-GCM from ``cryptography`` with a fresh 12-byte nonce.
- Key material: a 32-byte master key held in the OS keychain through
  ``keyring`` or, when no keychain backend is usable, in a 0600 key file
  inside the vault home.
- Associated data binds each blob to ``user@host`` and to the secret name,
  so a copied database fails to open for another user, machine or name.

Blob layout: version (1 byte) | nonce (12 bytes) | ciphertext + GCM tag.
"""

import base64
import getpass
import os
import socket
import tempfile
from typing import Optional

import keyring
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from keyring.backends import fail, null
from keyring.errors import KeyringError

from vault_core.config import KEYRING_SERVICE, VaultSettings
from vault_core.errors import DecryptionError, StorageError
from vault_core.log import get_logger

logger = get_logger("crypto")

BLOB_VERSION = 1
NONCE_SIZE = 12
TAG_SIZE = 16
KEY_SIZE = 32
KEYRING_USERNAME = "master-key"


def local_principal() -> str:
    """Identity the blobs are bound to: ``user@host``."""
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        # no login name available (containers, services): fall back to home dir
        user = os.path.expanduser("~")
    return f"{user}@{socket.gethostname()}"


def _encode_key(key: bytes) -> str:
    return base64.urlsafe_b64encode(key).decode("ascii")


def _decode_key(raw: str) -> bytes:
    key = base64.urlsafe_b64decode(raw.strip())
    if len(key) != KEY_SIZE:
        raise ValueError("AES-256-GCM key must be 32 bytes")
    return key


# --- Key providers -----------------------------------------------------------
class KeyringKeyProvider:
    """Master key stored in the OS keychain (Keychain, Credential Manager, Secret Service)."""

    name = "keyring"

    def __init__(self, service: str = KEYRING_SERVICE, username: str = KEYRING_USERNAME) -> None:
        self.service = service
        self.username = username

    def get_key(self, create: bool = False) -> Optional[bytes]:
        raw = keyring.get_password(self.service, self.username)
        if raw:
            return _decode_key(raw)
        if not create:
            return None
        key = AESGCM.generate_key(bit_length=KEY_SIZE * 8)
        keyring.set_password(self.service, self.username, _encode_key(key))
        logger.info("created master key in keyring service %r", self.service)
        return key


class FileKeyProvider:
    """Master key stored in a file readable only by its owner."""

    name = "file"

    def __init__(self, path: str) -> None:
        self.path = path

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def _read(self) -> bytes:
        with open(self.path, "r", encoding="ascii") as f:
            return _decode_key(f.read())

    def get_key(self, create: bool = False) -> Optional[bytes]:
        if self.exists():
            return self._read()
        if not create:
            return None
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), mode=0o700, exist_ok=True)
        key = AESGCM.generate_key(bit_length=KEY_SIZE * 8)
        # written in full to a private temp file, then published with a
        # hard link: the key file never exists half-written and is never replaced
        fd, tmp_path = tempfile.mkstemp(prefix=".master-", dir=os.path.dirname(os.path.abspath(self.path)))
        try:
            with os.fdopen(fd, "w", encoding="ascii") as f:
                f.write(_encode_key(key) + "\n")
                f.flush()
                os.fsync(f.fileno())
            try:
                os.link(tmp_path, self.path)
            except FileExistsError:
                # another process published its key first
                return self._read()
        finally:
            os.unlink(tmp_path)
        logger.info("created master key file %s", self.path)
        return key


def keyring_available() -> bool:
    """True when keyring resolved to a real backend rather than fail/null."""
    backend = keyring.get_keyring()
    return not isinstance(backend, (fail.Keyring, null.Keyring))


def select_key_provider(settings: VaultSettings):
    """
    Pick the key provider for ``settings.key_backend``.

    ``auto`` keeps using an existing key file, otherwise prefers the OS
    keychain and falls back to a new key file when none is usable.
    """
    file_provider = FileKeyProvider(settings.key_file)
    if settings.key_backend == "file":
        provider = file_provider
    elif settings.key_backend == "keyring":
        provider = KeyringKeyProvider()
    elif file_provider.exists() or not keyring_available():
        provider = file_provider
    else:
        provider = KeyringKeyProvider()
    logger.debug("key backend %r selected (configured %r)", provider.name, settings.key_backend)
    return provider


# --- Protector ---------------------------------------------------------------
class SecretProtector:
    def __init__(self, key_provider, principal: Optional[str] = None) -> None:
        self.key_provider = key_provider
        self.principal = principal or local_principal()

    def _aad(self, name: str) -> bytes:
        return f"otp-vault/v{BLOB_VERSION}\0{self.principal}\0{name}".encode("utf-8")

    def encrypt(self, name: str, plaintext: str) -> bytes:
        """Encrypt ``plaintext`` for ``name``; raises StorageError if no key can be obtained."""
        try:
            key = self.key_provider.get_key(create=True)
        except (KeyringError, OSError, ValueError) as e:
            raise StorageError(f"cannot obtain encryption key: {e}", context={"backend": self.key_provider.name}) from e
        nonce = os.urandom(NONCE_SIZE)
        ct = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), self._aad(name))
        return bytes([BLOB_VERSION]) + nonce + ct

    def decrypt(self, name: str, blob: bytes) -> str:
        """Decrypt a blob produced by :meth:`encrypt` under the same principal and name."""
        if len(blob) < 1 + NONCE_SIZE + TAG_SIZE or blob[0] != BLOB_VERSION:
            raise DecryptionError("stored secret is corrupt or has an unknown format", context={"name": name})
        try:
            key = self.key_provider.get_key(create=False)
        except (KeyringError, OSError, ValueError) as e:
            raise DecryptionError(f"cannot read decryption key: {e}", context={"backend": self.key_provider.name}) from e
        if key is None:
            raise DecryptionError(
                "no key material for this user on this machine",
                context={"name": name, "backend": self.key_provider.name},
            )
        nonce, ct = blob[1:1 + NONCE_SIZE], blob[1 + NONCE_SIZE:]
        try:
            plaintext = AESGCM(key).decrypt(nonce, ct, self._aad(name))
        except InvalidTag as e:
            raise DecryptionError(
                "stored secret cannot be decrypted by the current user on this machine",
                context={"name": name, "principal": self.principal},
            ) from e
        return plaintext.decode("utf-8")

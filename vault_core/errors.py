"""
errors.py — Error taxonomy for the vault and the OTP engine.

Every failure is terminal for the current call: nothing here is retried and
no degraded code is ever returned. Messages are shown to the user as-is, so
they must never carry a secret value.
"""

from typing import Any, Optional


class OtpVaultError(Exception):
    """Base error for otp-vault."""

    exit_code = 1
    http_status = 500

    def __init__(self, message: str, *, context: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}


class SecretNotFoundError(OtpVaultError):
    """No secret is stored under the requested name."""

    exit_code = 3
    http_status = 404


class InvalidSecretError(OtpVaultError):
    """Secret text is not valid Base32."""

    exit_code = 4
    http_status = 400


class InvalidArgumentError(OtpVaultError):
    """Length, window, counter or name out of range."""

    exit_code = 5
    http_status = 400


class DecryptionError(OtpVaultError):
    """Stored ciphertext cannot be opened by the current user/machine."""

    exit_code = 6
    http_status = 409


class StorageError(OtpVaultError):
    """Persistence medium unavailable or not writable."""

    exit_code = 7
    http_status = 500

"""
vault_core package
==================

TOTP (RFC 6238) / HOTP (RFC 4226) generation with secrets kept in an
encrypted, user-bound store.

Core algorithm
--------------
- HOTP: code = Truncate(HMAC-SHA1(key=secret, msg=counter)) mod 10^digits
- TOTP: HOTP with counter = floor(unix_time / window), window = 30s by default
- Dynamic truncation: 4 bytes taken at offset (last byte & 0x0F), MSB cleared

Quick usage
-----------
>>> from vault_core import save_secret, generate_otp
>>> save_secret("github", "JBSWY3DPEHPK3PXP")
>>> code = generate_otp("github")  # 6 digits, changes every 30s

Pure engine (no storage):
>>> from vault_core import generate
>>> generate("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ", length=8, timestamp=59)
'94287082'
"""

from .errors import (
    DecryptionError,
    InvalidArgumentError,
    InvalidSecretError,
    OtpVaultError,
    SecretNotFoundError,
    StorageError,
)
from .otp_core import decode_base32, generate, generate_base32_secret, hotp, totp, verify
from .vault import generate_otp, list_secrets, load_secret, save_secret, verify_otp

__all__ = [
    "DecryptionError",
    "InvalidArgumentError",
    "InvalidSecretError",
    "OtpVaultError",
    "SecretNotFoundError",
    "StorageError",
    "decode_base32",
    "generate",
    "generate_base32_secret",
    "generate_otp",
    "hotp",
    "list_secrets",
    "load_secret",
    "save_secret",
    "totp",
    "verify",
    "verify_otp",
]

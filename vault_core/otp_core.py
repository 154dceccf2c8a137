"""
otp_core.py — Core library for TOTP / HOTP (RFC 6238 / RFC 4226).

Goals:
- Pure functions only: secret text + time (or counter) in, decimal code out.
- No file, keychain or database access here; the vault layer feeds secrets in.
- Every invalid input raises a typed error from ``vault_core.errors``;
  a partial or best-effort code is never returned.

Security notes:
- Secret values and key bytes are never logged or put in error messages.
- HMAC-SHA1 per RFC 4226/6238 (the algorithm Google Authenticator uses).
"""

import base64
import hashlib
import hmac
import math
import os
import struct
import time
from typing import Optional, Tuple

from .config import DEFAULT_DIGITS, DEFAULT_TIME_STEP, SECRET_BYTES
from .errors import InvalidArgumentError, InvalidSecretError
from .log import get_logger

logger = get_logger("otp")

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_BASE32_VALUES = {ch: i for i, ch in enumerate(BASE32_ALPHABET)}
_MAX_COUNTER = 2 ** 64 - 1


# --- Argument checks ---------------------------------------------------------
def _require_positive_int(value, what: str) -> int:
    # bool is an int subclass; True must not pass as 1
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError(f"{what} must be a positive integer", context={what: value})
    return value


# --- Base32 ------------------------------------------------------------------
def decode_base32(secret: str) -> bytes:
    """
    Decode an RFC 4648 Base32 secret into raw key bytes.

    - Input is case-insensitive (uppercased first).
    - Trailing '=' padding is tolerated and stripped; the input length does
      not need to be a multiple of 8.
    - Each character contributes 5 bits; the bit stream is re-sliced into
      bytes and an incomplete trailing byte is dropped.

    Raises:
        InvalidSecretError: if a character is outside A-Z2-7, or if nothing
            is left to use as a key.
    """
    if not isinstance(secret, str):
        raise InvalidSecretError("secret must be Base32 text")
    text = secret.upper().rstrip("=")

    out = bytearray()
    buffer = 0
    bits = 0
    for position, ch in enumerate(text):
        value = _BASE32_VALUES.get(ch)
        if value is None:
            # report the position, never the character
            raise InvalidSecretError(
                "secret contains a character outside the Base32 alphabet (A-Z, 2-7)",
                context={"position": position},
            )
        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1

    if not out:
        raise InvalidSecretError("secret decodes to an empty key")
    return bytes(out)


def generate_base32_secret(num_bytes: int = SECRET_BYTES) -> str:
    """
    Generate a random secret and return it as Base32 without padding.

    - ``num_bytes`` bytes come from os.urandom (CSPRNG); 20 bytes = 160 bits.
    - Output is uppercase, ready for Google Authenticator / Authy.
    """
    _require_positive_int(num_bytes, "num_bytes")
    raw = os.urandom(num_bytes)
    return base64.b32encode(raw).decode("ascii").rstrip("=")


# --- RFC helpers -------------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """
    Encode a counter as the 8-byte big-endian message RFC 4226 expects.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    if isinstance(i, bool) or not isinstance(i, int) or not 0 <= i <= _MAX_COUNTER:
        raise InvalidArgumentError("counter must be an unsigned 64-bit integer", context={"counter": i})
    return struct.pack(">Q", i)


def time_counter(timestamp: float, window_seconds: int = DEFAULT_TIME_STEP) -> int:
    """Return floor(timestamp / window_seconds), the TOTP moving factor."""
    _require_positive_int(window_seconds, "window_seconds")
    if not math.isfinite(timestamp):
        raise InvalidArgumentError("timestamp must be a finite number", context={"timestamp": timestamp})
    if timestamp < 0:
        raise InvalidArgumentError("timestamp must not be negative", context={"timestamp": timestamp})
    return int(timestamp // window_seconds)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    Apply RFC 4226 §5.3 dynamic truncation.

    - offset = low nibble of the last byte
    - take 4 bytes from offset, clear the MSB of the first one (& 0x7F)
    - return them as a big-endian unsigned 31-bit integer
    """
    offset = hmac_digest[-1] & 0x0F
    return (
        ((hmac_digest[offset] & 0x7F) << 24)
        | ((hmac_digest[offset + 1] & 0xFF) << 16)
        | ((hmac_digest[offset + 2] & 0xFF) << 8)
        | (hmac_digest[offset + 3] & 0xFF)
    )


def code_from_digest(hmac_digest: bytes, length: int = DEFAULT_DIGITS) -> str:
    """Truncate a digest and render it as exactly ``length`` decimal digits."""
    _require_positive_int(length, "length")
    otp_val = dynamic_truncate(hmac_digest) % (10 ** length)
    return str(otp_val).zfill(length)


# --- OTP -------------------------------------------------------------------
def hotp(secret_b32: str, counter: int, length: int = DEFAULT_DIGITS) -> str:
    """
    Generate an HOTP code (RFC 4226).

    Steps:
    1. Base32-decode secret -> raw key bytes
    2. Message = 8-byte counter (big-endian)
    3. HMAC-SHA1(key, message) -> 20 bytes
    4. Dynamic truncation -> 31-bit integer
    5. otp = value % 10^length, zero-padded to ``length`` digits

    Raises:
        InvalidSecretError: secret is not Base32
        InvalidArgumentError: length or counter out of range
    """
    _require_positive_int(length, "length")
    key = decode_base32(secret_b32)
    msg = int_to_bytes(counter)
    digest = hmac.new(key, msg, hashlib.sha1).digest()
    return code_from_digest(digest, length)


def generate(
    secret_b32: str,
    length: int = DEFAULT_DIGITS,
    window_seconds: int = DEFAULT_TIME_STEP,
    timestamp: Optional[float] = None,
) -> str:
    """
    Generate the TOTP code (RFC 6238) for ``timestamp`` (default: now).

    The counter is recomputed on every call from the wall clock; nothing is
    cached, so concurrent callers need no coordination.
    """
    _require_positive_int(length, "length")
    _require_positive_int(window_seconds, "window_seconds")
    if timestamp is None:
        timestamp = time.time()
    counter = time_counter(timestamp, window_seconds)
    logger.debug("TOTP counter=%d window=%ds length=%d", counter, window_seconds, length)
    return hotp(secret_b32, counter, length)


def totp(
    secret_b32: str,
    timestamp: Optional[float] = None,
    window_seconds: int = DEFAULT_TIME_STEP,
    length: int = DEFAULT_DIGITS,
) -> Tuple[str, int]:
    """
    Generate a TOTP code together with how long it stays valid.

    Returns:
        (code, remaining_seconds)
    """
    if timestamp is None:
        timestamp = time.time()
    code = generate(secret_b32, length, window_seconds, timestamp)
    remaining = window_seconds - int(timestamp % window_seconds)
    return code, remaining


def verify(
    secret_b32: str,
    code: str,
    length: int = DEFAULT_DIGITS,
    window_seconds: int = DEFAULT_TIME_STEP,
    timestamp: Optional[float] = None,
) -> bool:
    """
    Check ``code`` against the code of the current window only.

    Uses a constant-time comparison. Adjacent windows are not accepted.
    """
    expected = generate(secret_b32, length, window_seconds, timestamp)
    return hmac.compare_digest(expected.encode("ascii"), str(code).strip().encode("utf-8"))

"""
OTP vault API routes (Flask blueprint).

No route returns a plaintext secret: secrets go in, codes come out.

Examples:
curl -X PUT http://localhost:5000/api/secrets/github -H "Content-Type: application/json" -d '{"secret": "JBSWY3DPEHPK3PXP"}'
curl http://localhost:5000/api/otp/github
curl "http://localhost:5000/api/otp/github?length=8&window=60"
curl -X POST http://localhost:5000/api/verify/github -H "Content-Type: application/json" -d '{"code": "492039"}'
"""

import time

from flask import Blueprint, current_app, jsonify, request

from vault_core import otp_core
from vault_core.config import DEFAULT_DIGITS, DEFAULT_TIME_STEP, MAX_DIGITS
from vault_core.errors import InvalidArgumentError

otp_bp = Blueprint("otp_vault", __name__, url_prefix="/api")


def _store():
    return current_app.extensions["otp_vault"]


def _int_arg(source, key: str, default: int) -> int:
    raw = source.get(key, default)
    # JSON floats and booleans are rejected, not truncated
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw)
        except ValueError:
            pass
    raise InvalidArgumentError(f"{key} must be an integer", context={key: raw})


def _length_arg(source) -> int:
    length = _int_arg(source, "length", DEFAULT_DIGITS)
    if length > MAX_DIGITS:
        raise InvalidArgumentError(f"length must be at most {MAX_DIGITS}", context={"length": length})
    return length


@otp_bp.route("/secrets", methods=["GET"])
def list_secrets_route():
    return jsonify({"names": _store().names()})


@otp_bp.route("/secrets/<name>", methods=["PUT"])
def save_secret_route(name):
    data = request.get_json(silent=True) or {}
    secret = data.get("secret")
    if not isinstance(secret, str):
        raise InvalidArgumentError("JSON body must contain a 'secret' string")
    _store().save(name, secret)
    return jsonify({"saved": name}), 201


@otp_bp.route("/otp/<name>", methods=["GET"])
def otp_route(name):
    length = _length_arg(request.args)
    window = _int_arg(request.args, "window", DEFAULT_TIME_STEP)
    secret = _store().load(name)
    code, remaining = otp_core.totp(secret, time.time(), window, length)
    return jsonify({"name": name, "code": code, "valid_for": remaining})


@otp_bp.route("/verify/<name>", methods=["POST"])
def verify_route(name):
    data = request.get_json(silent=True) or {}
    code = data.get("code")
    if not isinstance(code, str):
        raise InvalidArgumentError("JSON body must contain a 'code' string")
    length = _length_arg(data)
    window = _int_arg(data, "window", DEFAULT_TIME_STEP)
    secret = _store().load(name)
    return jsonify({"valid": otp_core.verify(secret, code, length, window)})

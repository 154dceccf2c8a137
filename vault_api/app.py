"""
app.py — Flask application factory for the vault HTTP API.

The store lives in ``app.extensions["otp_vault"]`` so every request shares
the same write lock. Run with ``otp-vault serve`` or ``flask --app
vault_api.app:create_app run``.
"""

from flask import Flask, jsonify
from flask_cors import CORS

from vault_core.errors import OtpVaultError
from vault_core.log import get_logger
from vault_db import open_store

from .routes import otp_bp

logger = get_logger("api")


def create_app(store=None) -> Flask:
    app = Flask(__name__)
    # browser front-ends on another origin may call the API
    CORS(app)

    app.extensions["otp_vault"] = store if store is not None else open_store()
    app.register_blueprint(otp_bp)

    @app.errorhandler(OtpVaultError)
    def handle_vault_error(e: OtpVaultError):
        logger.debug("request failed: %s %s", type(e).__name__, e.context)
        return jsonify({"error": e.message, "type": type(e).__name__}), e.http_status

    @app.route("/", methods=["GET"])
    def index():
        return jsonify({
            "service": "otp-vault",
            "endpoints": [
                "GET /api/secrets",
                "PUT /api/secrets/<name>",
                "GET /api/otp/<name>?length=&window=",
                "POST /api/verify/<name>",
            ],
        })

    return app

from collections.abc import Mapping
from typing import Any

from flask import Flask, jsonify

from examples.hmac_demo.app_config import load_config
from tokenauth import TokenAuth, current_claims


def create_app(config: Mapping[str, Any] | None = None) -> Flask:
    """
    Create the demo API with every route behind token authentication.

    Args:
        config: Settings to load into ``app.config``. Defaults to the
            environment (see app_config.load_config).

    Returns:
        Flask: Configured Flask application instance

    Raises:
        ConfigMissing / KeyParseError: If the verification key is not configured.
    """
    app = Flask(__name__)
    app.config.update(config if config is not None else load_config())

    # Key and options come from app.config; fails here if misconfigured
    auth = TokenAuth(config=app.config)
    auth.init_app(app, protect_all=True)

    @app.get("/api/health")
    @auth.exempt
    def health():
        return jsonify({"status": "ok"}), 200

    @app.get("/api/me")
    def me():
        """Echo the caller's subject from the verified claims."""
        claims = current_claims()
        return jsonify({"status": "success", "sub": claims.get("sub")}), 200

    @app.errorhandler(401)
    def unauthorized(error):
        """Handle unauthorized access errors."""
        return jsonify(
            {
                "status": "denied",
                "message": error.description,
                "authenticated": False,
            }
        ), 401

    return app

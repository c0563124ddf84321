from __future__ import annotations

from typing import Any, Mapping, Optional, TYPE_CHECKING

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_sqlalchemy import SQLAlchemy

from .config import load_config
from .errors import DomainError

if TYPE_CHECKING:
    from .store import Store

db = SQLAlchemy()
limiter = Limiter(key_func=get_remote_address)


def get_store() -> "Store":
    """Store handle owned by the running app (built once in create_app)."""
    return current_app.extensions["store"]


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.update(load_config(config))
    app.json.ensure_ascii = False
    app.logger.setLevel(app.config["LOG_LEVEL"])

    from . import models  # noqa: F401  (registers tables on db.metadata)
    from .rpc import register_rpcs
    from .store import Store

    db.init_app(app)
    limiter.init_app(app)
    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    with app.app_context():
        db.create_all()
        store = Store(db.engine, db.metadata)
    register_rpcs(store)
    app.extensions["store"] = store

    from .routes_board import board_bp
    from .routes_moderation import moderation_bp
    from .routes_trends import trends_bp

    app.register_blueprint(board_bp, url_prefix="/api")
    app.register_blueprint(moderation_bp, url_prefix="/api")
    app.register_blueprint(trends_bp, url_prefix="/api")

    @app.get("/api/health")
    def health():
        return jsonify(ok=True, service="anonboard")

    _register_error_handlers(app)

    from .tasks import register_cli
    register_cli(app)

    app.logger.info("anonboard ready (db=%s)", app.config["SQLALCHEMY_DATABASE_URI"].split(":", 1)[0])
    return app


def _register_error_handlers(app: Flask) -> None:
    # --- JSON error bodies for /api/* ---
    @app.errorhandler(DomainError)
    def _domain_error(err: DomainError):
        if err.status >= 500:
            app.logger.error("[%s] %s %s: %s", err.slug, request.method, request.path, err.message)
        body = {"ok": False, "error": err.slug, "message": err.message}
        if err.code:
            body["code"] = err.code
        return jsonify(body), err.status

    @app.errorhandler(404)
    def _json_404(err):
        if request.path.startswith("/api/"):
            return jsonify(ok=False, error="not_found"), 404
        return "Not Found", 404

    @app.errorhandler(400)
    def _json_400(err):
        if request.path.startswith("/api/"):
            return jsonify(ok=False, error="bad_request"), 400
        return "Bad Request", 400

    @app.errorhandler(405)
    def _json_405(err):
        if request.path.startswith("/api/"):
            resp = jsonify(ok=False, error="method_not_allowed")
            allow = getattr(err, "valid_methods", None)
            if allow:
                resp.headers["Allow"] = ", ".join(allow)
            return resp, 405
        return "Method Not Allowed", 405

    @app.errorhandler(429)
    def _json_429(err):
        return jsonify(ok=False, error="too_many_requests", message=str(getattr(err, "description", ""))), 429

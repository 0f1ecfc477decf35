import logging
import os

from flask import Flask, jsonify

from app.cache import TTLCache
from app.db import close_db, init_db
from app.logging_config import setup_logging
from app.routes.admin import admin_bp
from app.routes.api import api_bp
from app.routes.auth import auth_bp
from utils.parsing import parse_bool, parse_int

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SEC = 1800


def _default_db_path():
    root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    return os.path.join(root, "data", "db", "catalog.db")


def _config_from_env():
    return {
        "DATABASE": os.environ.get("CATALOG_DB_PATH") or _default_db_path(),
        "SECRET_KEY": os.environ.get("FLASK_SECRET_KEY", "dev-change-me"),
        "DEBUG": parse_bool(os.environ.get("FLASK_DEBUG"), default=False),
        "RECOMMENDATION_CACHE_TTL_SEC": parse_int(
            os.environ.get("RECOMMENDATION_CACHE_TTL_SEC"), DEFAULT_CACHE_TTL_SEC
        ),
        "BOOTSTRAP_ADMIN": os.environ.get("CATALOG_BOOTSTRAP_ADMIN"),
        "LOG_LEVEL": os.environ.get("LOG_LEVEL"),
    }


def create_app(config=None):
    app = Flask(__name__)
    app.config.update(_config_from_env())
    if config:
        app.config.update(config)

    if not app.config.get("TESTING"):
        setup_logging(debug=app.config["DEBUG"], level=app.config["LOG_LEVEL"])

    db_dir = os.path.dirname(os.path.abspath(app.config["DATABASE"]))
    os.makedirs(db_dir, exist_ok=True)
    init_db(app.config["DATABASE"])

    app.extensions["catalog_cache"] = TTLCache(default_ttl=app.config["RECOMMENDATION_CACHE_TTL_SEC"])
    app.teardown_appcontext(close_db)
    app.register_blueprint(auth_bp)
    app.register_blueprint(api_bp)
    app.register_blueprint(admin_bp)

    @app.errorhandler(404)
    def not_found(_error):
        return jsonify({"error": "not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_error):
        return jsonify({"error": "method not allowed"}), 405

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    logger.info("Catalog app ready (db=%s)", app.config["DATABASE"])
    return app

import logging
import os

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from app.config import Config, validate_config
from app.db import db
from app.extensions.cors import init_cors
from app.extensions.extensions import ma
from app.routes.comment_routes import comment_bp
from app.routes.main_routes import main_bp
from app.routes.post_routes import post_bp
from app.services.asset_sink import build_asset_sink

logger = logging.getLogger(__name__)


def _configure_logging(app):
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _register_error_handlers(app):
    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(err):
        return jsonify({"error": "File too large"}), 413

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        return jsonify({"error": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected_exception(err):
        logger.exception("Unhandled exception: %s", err)
        return jsonify({"error": "Something went wrong!"}), 500


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    _configure_logging(app)
    validate_config(app.config)

    if not app.config.get("UPLOAD_FOLDER"):
        app.config["UPLOAD_FOLDER"] = os.path.join(app.instance_path, "uploads")

    db.init_app(app)
    ma.init_app(app)
    init_cors(app)

    app.extensions["asset_sink"] = build_asset_sink(app.config)
    logger.info("Using %s asset sink", app.extensions["asset_sink"].name)

    app.register_blueprint(post_bp, url_prefix="/api")
    app.register_blueprint(comment_bp, url_prefix="/api")
    app.register_blueprint(main_bp, url_prefix=app.config["UPLOADS_URL_PREFIX"])

    _register_error_handlers(app)

    with app.app_context():
        db.create_all()

    return app

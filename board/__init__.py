import logging

from flask import Flask, jsonify

from board.config import Config
from board.db import db
from board.extensions.blob_store import EXTENSION_NAME, init_blob_store
from board.extensions.extensions import cors, jwt, ma, socketio
from board.feed_events import register_feed_events


def _configure_logging(app):
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _engine_options(app):
    timeout = app.config["DATABASE_TIMEOUT"]
    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite"):
        return {"connect_args": {"timeout": timeout}}
    return {"pool_timeout": timeout, "pool_pre_ping": True}


def _register_jwt_handlers():
    def please_log_in(reason):
        return jsonify({"error": "Please log in"}), 401

    jwt.unauthorized_loader(please_log_in)
    jwt.invalid_token_loader(please_log_in)
    jwt.expired_token_loader(lambda header, payload: please_log_in("expired"))


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)
    app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", _engine_options(app))

    _configure_logging(app)

    db.init_app(app)
    ma.init_app(app)
    jwt.init_app(app)
    _register_jwt_handlers()
    cors.init_app(
        app,
        origins=app.config["CORS_ALLOWED_ORIGINS"],
        supports_credentials=True,
    )
    # Socket handlers must exist before init_app so every app picks them up.
    register_feed_events()
    socketio.init_app(app, cors_allowed_origins=app.config["CORS_ALLOWED_ORIGINS"])
    init_blob_store(app)

    from board.routes.auth_routes import auth_bp
    from board.routes.post_routes import post_bp
    from board.routes.upload_routes import upload_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(post_bp, url_prefix="/api")
    app.register_blueprint(upload_bp, url_prefix="/api")

    @app.errorhandler(413)
    def request_too_large(error):
        return jsonify({"error": "File too large"}), 413

    with app.app_context():
        from board.models import attachment_model, post_model, user_model  # noqa: F401

        db.create_all()

    return app


def close_app(app):
    """Release the database pool and blob-store connections."""
    with app.app_context():
        db.session.remove()
        db.engine.dispose()
    app.extensions[EXTENSION_NAME].close()

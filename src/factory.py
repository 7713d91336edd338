# -*- coding: utf-8 -*-
import os
from flask import Flask
from flask_cors import CORS
from src.config import Config
from src.database import db

# Observability imports
from src.services.metrics import init_metrics
from src.services.request_context import init_request_context
from src.services.structured_logging import init_logging

from src.middleware.error_handlers import register_error_handlers


def _normalize_db_url(url: str) -> str:
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://") and "+psycopg://" not in url:
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def _migrate_db(app):
    """Run Alembic migrations to head using the app's DB URL."""
    from pathlib import Path
    from alembic import command
    from alembic.config import Config as AlembicConfig

    BASE_DIR = Path(__file__).resolve().parent.parent
    cfg = AlembicConfig()  # in-memory config, avoid alembic.ini dependency
    cfg.set_main_option("script_location", str(BASE_DIR / "migrations"))
    cfg.set_main_option("sqlalchemy.url", app.config["SQLALCHEMY_DATABASE_URI"])

    try:
        command.upgrade(cfg, "head")
        app.logger.info("Database migrations applied successfully")
    except Exception as e:
        app.logger.error(f"Migration failed: {e}")
        raise


def create_app() -> Flask:
    app = Flask(__name__)
    app.url_map.strict_slashes = False
    app.config.from_object(Config)
    app.json.sort_keys = False

    # --- DB config ---
    db_url = os.environ.get("DATABASE_URL")
    if not db_url:
        db_path = os.path.join(
            os.path.dirname(__file__),
            "..",
            "instance",
            "landivo.db")
        os.makedirs(os.path.dirname(db_path), exist_ok=True)
        db_url = f"sqlite:///{db_path}"
    else:
        db_url = _normalize_db_url(db_url)

    app.config["SQLALCHEMY_DATABASE_URI"] = db_url
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    db.init_app(app)

    # --- CORS ---
    cors_origins_str = os.environ.get("CORS_ALLOWED_ORIGINS", app.config["CORS_ALLOWED_ORIGINS"])
    cors_origins = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]

    CORS(app, resources={
        r"/api/*": {
            "origins": cors_origins,
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization", "X-Request-ID"],
            "supports_credentials": True,
            "max_age": 600,
        }}
    )

    # --- Initialize observability ---
    init_request_context(app)
    init_logging(app)
    init_metrics(app)

    register_error_handlers(app)

    # --- Mount blueprints ---
    with app.app_context():
        from src.routes import health, buyers, buyer_activity, email_lists, users
        app.register_blueprint(health.health_bp, url_prefix="/")
        app.register_blueprint(buyers.buyers_bp, url_prefix="/api/buyer")
        app.register_blueprint(buyer_activity.buyer_activity_bp, url_prefix="/api/buyer")
        app.register_blueprint(email_lists.email_lists_bp, url_prefix="/api/email-lists")
        app.register_blueprint(users.users_bp, url_prefix="/api/user")

    # --- DB init ---
    with app.app_context():
        # Only auto-create tables in testing or if explicitly enabled
        is_testing = app.config.get("TESTING") or os.getenv("TESTING", "false").lower() == "true"
        if is_testing or os.getenv("LANDIVO_DB_AUTOCREATE", "false").lower() == "true":
            db.create_all()

        # Skip migrations in test mode since db.create_all() already creates correct schema
        if not is_testing and os.getenv("LANDIVO_DB_MIGRATE_ON_START", "true").lower() == "true":
            _migrate_db(app)

        driver = app.config["SQLALCHEMY_DATABASE_URI"].split("://", 1)[0]
        app.logger.info(f"DB ready (driver={driver})")

    return app

"""
Engineering Project Tracker
Flask Application Factory.

Usage:
    from tracker import create_app
    app = create_app()           # defaults to "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

import click
from flask import Flask, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from tracker.auth import init_auth
from tracker.blueprints import all_blueprints
from tracker.config import config
from tracker.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    RowStoreError,
    ValidationError,
)
from tracker.middleware.logging_config import configure_logging
from tracker.middleware.rate_limiter import init_rate_limits
from tracker.middleware.timing import init_request_timing
from tracker.store import SHEET_HEADERS, init_store
from tracker.utils.errors import E, api_error

logger = logging.getLogger(__name__)

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # no global limit, applied per blueprint
    storage_uri=os.getenv("REDIS_URL", "memory://"),
)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config[config_name]())
    app.json.ensure_ascii = False
    # stage count dicts follow STAGES order
    app.json.sort_keys = False

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    init_store(app)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(
            app,
            origins=[o.strip() for o in cors_origins.split(",") if o.strip()],
            supports_credentials=True,
        )
    else:
        CORS(app)

    # ── Session gate ─────────────────────────────────────────────────────
    init_auth(app)

    # ── Request timing middleware ────────────────────────────────────────
    init_request_timing(app)

    # ── Blueprints ───────────────────────────────────────────────────────
    for bp in all_blueprints():
        app.register_blueprint(bp)

    if app.config.get("SETUP_ENABLED"):
        from tracker.blueprints.setup_bp import setup_bp

        app.register_blueprint(setup_bp)
        logger.warning("Setup endpoints enabled under /api/setup")

    _register_error_handlers(app)
    _register_cli(app)

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    logger.info("App created (env=%s, store=%s)", config_name, app.config.get("ROW_STORE_BACKEND"))
    return app


def _register_error_handlers(app):
    """Map domain exceptions and HTTP errors onto the JSON envelope."""

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        return api_error(E.NOT_FOUND, str(e))

    @app.errorhandler(ValidationError)
    def handle_validation(e):
        return api_error(E.VALIDATION_ERROR, str(e), details=e.details)

    @app.errorhandler(ConflictError)
    def handle_conflict(e):
        return api_error(E.DUPLICATE_ENTRY, str(e))

    @app.errorhandler(AuthenticationError)
    def handle_unauthenticated(e):
        return api_error(E.UNAUTHORIZED, str(e))

    @app.errorhandler(PermissionDeniedError)
    def handle_forbidden(e):
        logger.warning("Forbidden %s %s: %s", request.method, request.path, e)
        return api_error(E.FORBIDDEN, str(e))

    @app.errorhandler(RowStoreError)
    def handle_row_store(e):
        logger.error("Row store failure on %s %s: %s", request.method, request.path, e)
        return api_error(E.SHEETS_API_ERROR, str(e))

    @app.errorhandler(404)
    def not_found(e):
        return api_error(E.NOT_FOUND, f"Not found: {request.path}")

    @app.errorhandler(405)
    def method_not_allowed(e):
        return api_error(E.VALIDATION_ERROR, "Method not allowed", status=405)

    @app.errorhandler(429)
    def rate_limited(e):
        return api_error(
            E.VALIDATION_ERROR, "Too many requests", status=429,
            details={"retryAfter": e.description},
        )

    @app.errorhandler(500)
    def server_error(e):
        original = getattr(e, "original_exception", None) or e
        logger.error("500 error on %s %s: %s", request.method, request.path, original, exc_info=original)
        return api_error(E.INTERNAL_ERROR, str(original) or "Internal server error")


def _register_cli(app):

    @app.cli.command("init-sheets")
    def init_sheets_cmd():
        """Create any missing worksheets with their header rows."""
        store = app.extensions["row_store"]
        if not hasattr(store, "ensure_sheets"):
            click.echo(f"Backend '{store.backend}' needs no sheet setup.")
            return
        created = store.ensure_sheets(SHEET_HEADERS)
        click.echo(f"Created {len(created)} worksheet(s): {', '.join(created) or '-'}")

    @app.cli.command("seed-master")
    @click.option("--force", is_flag=True, help="Clear the customer/model sheets first.")
    def seed_master_cmd(force):
        """Seed the initial customer and model lists."""
        from tracker.services.master_service import seed_initial

        inserted = seed_initial(force=force)
        click.echo(f"Seeded customers={inserted['customers']} models={inserted['models']}")

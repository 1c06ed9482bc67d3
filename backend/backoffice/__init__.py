# backend/backoffice/__init__.py
import os

from flask import Flask, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .config import Config
from .errors import ApiError, InternalError, MethodNotAllowedError
from .extensions import db, migrate


def create_app(config_overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    # File stores default to the instance folder
    if not app.config.get("AVATAR_UPLOAD_DIR"):
        app.config["AVATAR_UPLOAD_DIR"] = os.path.join(app.instance_path, "avatars")
    if not app.config.get("USER_PROFILES_FILE"):
        app.config["USER_PROFILES_FILE"] = os.path.join(app.instance_path, "user-profiles.json")

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.users import users_bp
    from .routes.products import products_bp
    from .routes.invoices import invoices_bp
    from .routes.expenses import expenses_bp
    from .routes.categories import categories_bp
    from .routes.transactions import transactions_bp
    from .routes.avatars import avatars_bp
    from .routes.profiles import profiles_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(invoices_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(transactions_bp)
    app.register_blueprint(avatars_bp)
    app.register_blueprint(profiles_bp)

    register_error_handlers(app)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin in app.config["CORS_ALLOWED_ORIGINS"]:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app


def register_error_handlers(app: Flask) -> None:
    """Every failure leaves the API as {"success": false, "error": <message>}."""

    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(err: SQLAlchemyError):
        db.session.rollback()
        app.logger.exception("Database error on %s %s", request.method, request.path)
        error = InternalError("Database error")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        if err.code == 405:
            error = MethodNotAllowedError()
            response = jsonify(error.to_dict())
            valid_methods = getattr(err, "valid_methods", None)
            if valid_methods:
                response.headers["Allow"] = ", ".join(valid_methods)
            return response, 405
        return jsonify({"success": False, "error": err.description or err.name}), err.code

"""Initialize the Flask app and its blueprints."""

import os

import click
from flask import Flask

from .core.constants import API_VERSION, DEFAULT_DOCUMENT_TYPES, DEFAULT_ENVIRONMENT

TRUE_STRINGS = ["true", "1", "t"]


def _document_types():
    raw = os.environ.get("STORMCLOUD_DOCUMENT_TYPES")
    if not raw:
        return list(DEFAULT_DOCUMENT_TYPES)
    return [t.strip().lower() for t in raw.split(",") if t.strip()]


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    secret_key = os.environ.get("SECRET_KEY") or "dev"
    app.config.from_mapping(
        SECRET_KEY=secret_key,
        MONGO_URI=os.environ.get("MONGO_URI") or "mongodb://localhost:27017",
        MONGO_DBNAME=os.environ.get("MONGO_DBNAME") or "stormcloud",
        STORMCLOUD_ENVIRONMENT=os.environ.get("STORMCLOUD_ENVIRONMENT")
        or DEFAULT_ENVIRONMENT,
        DOCUMENT_TYPES=_document_types(),
        SUBMIT_REQUIRES_AUTH=(
            os.environ.get("SUBMIT_REQUIRES_AUTH") or "false"
        ).lower()
        in TRUE_STRINGS,
        TOKEN_COOKIE=os.environ.get("TOKEN_COOKIE") or "token",
        JWT_SECRET_KEY=os.environ.get("JWT_SECRET_KEY") or secret_key,
        JWT_EXPIRATION_SECONDS=int(os.environ.get("JWT_EXPIRATION_SECONDS") or 86400),
        API_VERSION=os.environ.get("APP_VERSION") or API_VERSION,
    )

    if test_config:
        app.config.update(test_config)

    # Register blueprints
    from . import main as main_bp

    app.register_blueprint(main_bp.bp)

    from . import auth as auth_bp

    app.register_blueprint(auth_bp.bp)

    from . import environment as environment_bp

    app.register_blueprint(environment_bp.bp)

    from . import schema as schema_bp

    app.register_blueprint(schema_bp.bp)

    from . import match as match_bp

    app.register_blueprint(match_bp.bp)

    from . import document as document_bp

    app.register_blueprint(document_bp.bp)

    from . import submit as submit_bp

    app.register_blueprint(submit_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    @app.cli.command("init-environment")
    @click.argument("name")
    def init_environment_command(name):
        """Create the environment NAME in the document store."""
        from .environment.services import EnvironmentService
        from .errors import ValidationError
        from .store import get_store

        try:
            EnvironmentService.create(get_store(), name)
        except ValidationError as e:
            raise click.ClickException(e.message) from e
        click.echo(f"Environment {name} created.")

    return app

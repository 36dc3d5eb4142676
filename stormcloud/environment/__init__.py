"""The environment blueprint: environment setup, grants and settings."""

from flask import Blueprint

bp = Blueprint("environment", __name__, url_prefix="/api")

from . import routes  # noqa: E402

__all__ = ["routes"]

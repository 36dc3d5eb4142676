"""The schema blueprint."""

from flask import Blueprint

bp = Blueprint("schema", __name__, url_prefix="/api")

from . import routes  # noqa: E402

__all__ = ["routes"]

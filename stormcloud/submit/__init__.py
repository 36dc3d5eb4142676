"""The submit blueprint: bulk uploads from scouting devices."""

from flask import Blueprint

bp = Blueprint("submit", __name__, url_prefix="/api/submit")

from . import routes  # noqa: E402

__all__ = ["routes"]

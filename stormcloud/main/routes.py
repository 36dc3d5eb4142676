"""Routes for the main blueprint."""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import current_app, jsonify

from . import bp

if TYPE_CHECKING:
    from flask import Response


@bp.route("/")
def index() -> Response:
    """Describe the API."""
    return jsonify(
        {
            "message": "Welcome to the StormCloud API!",
            "account": False,
            "version": current_app.config["API_VERSION"],
        }
    )

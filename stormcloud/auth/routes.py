"""Routes for the auth blueprint."""

from flask import current_app, jsonify

from stormcloud.errors import UnauthorizedError
from stormcloud.utils import request_payload, require_strings

from . import bp
from .services import get_authorizer


@bp.route("/login", methods=["POST"])
def login():
    """Exchange a user id and password for a bearer token.

    The token is returned in the body and set as the token cookie.
    """
    payload = request_payload()
    require_strings(payload, "username", "password")

    authorizer = get_authorizer()
    if not authorizer.check_credentials(payload["username"], payload["password"]):
        current_app.logger.warning(f"Failed login for {payload['username']}.")
        raise UnauthorizedError()

    token = authorizer.issue_token(payload["username"])
    response = jsonify({"message": "Logged in!", "token": token})
    response.set_cookie(
        current_app.config["TOKEN_COOKIE"],
        token,
        max_age=current_app.config["JWT_EXPIRATION_SECONDS"],
        httponly=True,
        samesite="Lax",
    )
    return response


@bp.route("/logout", methods=["POST"])
def logout():
    """Clear the token cookie."""
    response = jsonify({"message": "Logged out!"})
    response.delete_cookie(current_app.config["TOKEN_COOKIE"])
    return response

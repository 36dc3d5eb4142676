"""Routes for the environment blueprint."""

from flask import current_app, jsonify, request

from stormcloud.auth.services import get_authorizer
from stormcloud.errors import (
    NotFoundError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)
from stormcloud.schema.services import SchemaService
from stormcloud.store import get_store
from stormcloud.utils import optional_string, request_payload, require_strings

from . import bp
from .services import EnvironmentService, current_environment


@bp.route("/environment")
def get_environment():
    """Describe the current environment and whether it still needs setup."""
    environment = current_environment()
    return jsonify(
        {
            "environment": EnvironmentService.public_view(environment),
            "needsSetup": not EnvironmentService.is_setup(environment),
            "schemas": SchemaService.list_schemas(get_store()),
        }
    )


@bp.route("/environment/setup", methods=["POST"])
def setup_environment():
    """Set the master password, or change it when the old one is supplied."""
    environment = current_environment()
    payload = request_payload()

    if not EnvironmentService.set_master_password(
        get_store(),
        environment,
        optional_string(payload, "oldPassword", ""),
        optional_string(payload, "password"),
    ):
        raise ServerError("Failed to set password!")
    return jsonify({"message": "Password set!"})


@bp.route("/environment/permissions", methods=["POST"])
def grant_permissions():
    """Grant a user permissions in this environment, gated by the master password."""
    environment = current_environment()
    payload = request_payload()

    if not EnvironmentService.check_master_password(
        environment, optional_string(payload, "password")
    ):
        raise UnauthorizedError()

    require_strings(payload, "username")
    permissions = payload.get("permissions")
    if not isinstance(permissions, list):
        raise ValidationError("permissions must be a list of permission names.")

    granted = get_authorizer().grant(
        payload["username"],
        permissions,
        environment,
        password=optional_string(payload, "userPassword"),
    )
    return jsonify({"message": "Permissions granted!", "permissions": granted})


@bp.route("/settings", methods=["GET"])
def get_settings():
    """Return every setting of the current environment."""
    return jsonify({"settings": current_environment().get("settings") or {}})


@bp.route("/settings", methods=["POST"])
def update_settings():
    """Merge several settings at once."""
    environment = current_environment()
    changes = request_payload().get("settings")
    if not isinstance(changes, dict):
        raise ValidationError("settings must be an object.")

    settings = EnvironmentService.update_settings(get_store(), environment, changes)
    current_app.logger.info(f"Settings {sorted(changes)} updated.")
    return jsonify({"message": "Settings updated!", "settings": settings})


@bp.route("/setting", methods=["GET"])
def get_setting():
    """Return a single setting named by the ``key`` query parameter."""
    key = request.args.get("key")
    settings = current_environment().get("settings") or {}
    if not key or key not in settings:
        raise NotFoundError("Setting not found!")
    return jsonify({"key": key, "value": settings[key]})


@bp.route("/setting", methods=["POST"])
def update_setting():
    """Set the value of one setting."""
    environment = current_environment()
    payload = request_payload()
    require_strings(payload, "key")

    key = payload["key"]
    EnvironmentService.update_settings(
        get_store(), environment, {key: payload.get("value")}
    )
    current_app.logger.info(f"Setting {key} updated.")
    return jsonify({"message": "Setting updated!"})


@bp.route("/setup")
def get_setup():
    """Return the configuration a new scouting device needs."""
    environment = current_environment()
    return jsonify(EnvironmentService.get_setup(get_store(), environment))

"""Routes for the schema blueprint."""

from flask import jsonify, request

from stormcloud.errors import NotFoundError
from stormcloud.store import get_store
from stormcloud.utils import request_payload, require_strings

from . import bp
from .services import SchemaService


@bp.route("/schema", methods=["POST"])
def save_schema():
    """Create a schema, or replace the parts of an existing one."""
    payload = request_payload()
    require_strings(payload, "name")

    created = SchemaService.save_schema(
        get_store(), payload["name"], payload.get("data")
    )
    if created:
        return jsonify({"message": "Schema created!"}), 200
    return jsonify({"message": "Schema updated!"}), 200


@bp.route("/schemas")
def list_schemas():
    """List every schema."""
    return jsonify({"schemas": SchemaService.list_schemas(get_store())})


@bp.route("/schema", methods=["GET"])
@bp.route("/schema/<path:name>", methods=["GET"])
def get_schema(name=None):
    """Get a schema by name, from the path or the ``name`` query parameter."""
    name = name or request.args.get("name")
    schema = SchemaService.get_schema(get_store(), name) if name else None
    if schema is None:
        raise NotFoundError("Schema not found!")
    return jsonify({"schema": schema})

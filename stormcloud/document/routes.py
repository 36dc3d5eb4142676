"""Routes for the document blueprint."""

from flask import current_app, jsonify

from stormcloud.auth.decorators import permission_required
from stormcloud.auth.permissions import (
    DELETE_ALL,
    EDIT_ALL,
    WRITE,
    document_permission,
)
from stormcloud.environment.services import current_environment
from stormcloud.store import get_store
from stormcloud.utils import request_payload, require_strings

from . import bp
from .services import DocumentService


def write_permission_for(payload):
    """The permission needed to store a document of the submitted data type."""
    return document_permission(
        WRITE, payload.get("dataType"), current_app.config["DOCUMENT_TYPES"]
    )


@bp.route("/document", methods=["POST"])
@permission_required(write_permission_for)
def create_document():
    """Create a new document of any configured data type."""
    payload = request_payload()
    require_strings(payload, "dataType")

    document = DocumentService.create_document(
        get_store(),
        current_environment(),
        payload["dataType"],
        payload.get("json"),
        image=payload.get("image"),
    )
    return jsonify({"message": "Document created!", "document": document}), 200


@bp.route("/document", methods=["DELETE"])
@permission_required(DELETE_ALL)
def delete_document():
    """Delete a document regardless of the matches it is attached to."""
    payload = request_payload()
    require_strings(payload, "docId")

    DocumentService.delete_document(
        get_store(), current_environment(), payload["docId"]
    )
    return jsonify({"message": "Document deleted!"}), 200


@bp.route("/document", methods=["PUT"])
@permission_required(EDIT_ALL)
def edit_document():
    """Edit a document's json and image. Its dataType cannot be changed."""
    payload = request_payload()
    require_strings(payload, "docId")

    document = DocumentService.edit_document(
        get_store(),
        current_environment(),
        payload["docId"],
        json_data=payload.get("json"),
        image=payload.get("image"),
    )
    return jsonify({"message": "Document updated!", "document": document}), 200

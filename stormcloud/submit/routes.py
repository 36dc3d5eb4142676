"""Routes for the submit blueprint."""

from flask import current_app, jsonify

from stormcloud.auth.permissions import WRITE, document_permission
from stormcloud.auth.services import get_authorizer
from stormcloud.core.constants import SUBMITTED_DATA_TYPE
from stormcloud.environment.services import current_environment
from stormcloud.errors import UnauthorizedError
from stormcloud.store import get_store
from stormcloud.utils import request_payload, request_token, require_fields

from . import bp
from .models import parse_fragments
from .services import SubmissionService


@bp.route("/data", methods=["POST"])
def submit_data():
    """Store a batch of scouting entries uploaded by a device.

    Open by default; with SUBMIT_REQUIRES_AUTH the caller needs WRITE_DATA.
    """
    environment = current_environment()
    if current_app.config["SUBMIT_REQUIRES_AUTH"]:
        permission = document_permission(
            WRITE, SUBMITTED_DATA_TYPE, current_app.config["DOCUMENT_TYPES"]
        )
        if not get_authorizer().authorize(request_token(), permission, environment):
            raise UnauthorizedError()

    payload = request_payload()
    require_fields(payload, "documents")
    fragments = parse_fragments(payload["documents"])

    result = SubmissionService.submit_data(get_store(), environment, fragments)
    return jsonify({"message": "Data submitted!", **result}), 200

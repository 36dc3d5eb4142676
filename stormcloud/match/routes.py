"""Routes for the match blueprint."""

from flask import jsonify, request

from stormcloud.auth.decorators import permission_required
from stormcloud.auth.permissions import ASSOCIATE, DELETE_ALL, READ_ALL, WRITE_ALL
from stormcloud.core.constants import MATCH_DATA_TYPE
from stormcloud.environment.services import current_environment
from stormcloud.store import get_store
from stormcloud.utils import request_payload, require_fields, require_strings

from . import bp
from .models import MatchSubmission
from .services import MatchService


@bp.route("/matches")
@bp.route("/matches/<path:subpath>")
@permission_required(READ_ALL)
def list_matches(subpath=None):
    """List matches with their documents, plus documents no match references.

    Only ``match`` documents are listed unless ``dataType`` names another
    type. An empty ``dataType`` lists every type.
    """
    result = MatchService.list_matches(
        get_store(),
        current_environment(),
        competition=request.args.get("competition"),
        data_type=request.args.get("dataType", MATCH_DATA_TYPE),
    )
    return jsonify(result)


@bp.route("/match/document", methods=["POST"])
@permission_required(ASSOCIATE)
def add_match_document():
    """Attach a document to a match."""
    payload = request_payload()
    require_strings(payload, "matchId", "docId")

    MatchService.add_document(
        get_store(), current_environment(), payload["matchId"], payload["docId"]
    )
    return jsonify({"message": "Document added!"}), 200


@bp.route("/match/document", methods=["DELETE"])
@permission_required(ASSOCIATE)
def remove_match_document():
    """Detach a document from a match."""
    payload = request_payload()
    require_strings(payload, "matchId", "docId")

    MatchService.remove_document(
        get_store(), current_environment(), payload["matchId"], payload["docId"]
    )
    return jsonify({"message": "Document removed!"}), 200


@bp.route("/match", methods=["POST"])
@permission_required(WRITE_ALL)
def create_match():
    """Create a new match with no documents."""
    payload = request_payload()
    require_fields(payload, "competition", "matchNumber")

    match = MatchService.create_match(
        get_store(), current_environment(), MatchSubmission.from_payload(payload)
    )
    return jsonify({"message": "Match created!", "match": match}), 200


@bp.route("/match", methods=["DELETE"])
@permission_required(DELETE_ALL)
def delete_match():
    """Delete a match."""
    payload = request_payload()
    require_strings(payload, "matchId")

    MatchService.delete_match(get_store(), current_environment(), payload["matchId"])
    return jsonify({"message": "Match deleted!"}), 200

"""Service layer for matches and their document associations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, cast

from stormcloud.core.constants import DOCUMENTS, ID_FIELD, MATCHES
from stormcloud.errors import NotFoundError

from .models import MatchSubmission

if TYPE_CHECKING:
    from stormcloud.core.types import Document, Environment, Match
    from stormcloud.store import DocumentStore

logger = logging.getLogger(__name__)

# Fields returned for each match, in addition to the expanded documents.
MATCH_FIELDS = (
    "environment",
    "competition",
    "matchNumber",
    "teams",
    "locked",
    "date",
)


class MatchService:
    """Service class for match-related operations."""

    @staticmethod
    def list_matches(
        store: DocumentStore,
        environment: Environment,
        competition: Optional[str] = None,
        data_type: Optional[str] = None,
    ) -> dict[str, list[Any]]:
        """Return the environment's matches with their documents expanded.

        Each match's ``documents`` holds the referenced documents themselves.
        References to documents that no longer exist are skipped. Documents
        that no match references are returned as ``unassignedDocuments``.
        """
        match_filters: dict[str, Any] = {"environment": environment["friendlyId"]}
        if competition:
            match_filters["competition"] = competition
        document_filters: dict[str, Any] = {"environment": environment["friendlyId"]}
        if data_type:
            document_filters["dataType"] = data_type

        matches = store.get_docs(MATCHES, match_filters)
        documents = store.get_docs(DOCUMENTS, document_filters)
        documents_by_id = {doc[ID_FIELD]: doc for doc in documents}

        assigned: set[str] = set()
        expanded = []
        for match in matches:
            match_data = {key: match.get(key) for key in MATCH_FIELDS}
            match_data[ID_FIELD] = match[ID_FIELD]
            match_data["documents"] = []
            for doc_id in match.get("documents") or []:
                doc = documents_by_id.get(str(doc_id))
                if doc is not None:
                    match_data["documents"].append(doc)
                    assigned.add(doc[ID_FIELD])
            expanded.append(match_data)

        unassigned = [doc for doc in documents if doc[ID_FIELD] not in assigned]
        return {"matches": expanded, "unassignedDocuments": unassigned}

    @staticmethod
    def get_match(
        store: DocumentStore, environment: Environment, match_id: Optional[str]
    ) -> Match:
        """Load one match of the environment.

        Raises:
            NotFoundError: If the match does not exist in this environment.
        """
        match = None
        if match_id:
            match = store.get_doc(
                MATCHES, {ID_FIELD: match_id, "environment": environment["friendlyId"]}
            )
        if match is None:
            raise NotFoundError("Match not found!")
        return cast("Match", match)

    @staticmethod
    def find_by_number(
        store: DocumentStore, environment: Environment, match_number: Any
    ) -> Optional[Match]:
        """Return the environment's match with this number, if any."""
        return cast(
            "Optional[Match]",
            store.get_doc(
                MATCHES,
                {"environment": environment["friendlyId"], "matchNumber": match_number},
            ),
        )

    @staticmethod
    def create_match(
        store: DocumentStore, environment: Environment, submission: MatchSubmission
    ) -> Match:
        """Validate and store a new match with no documents."""
        submission.validate()
        match = store.create_doc(
            MATCHES, submission.to_document(environment["friendlyId"])
        )
        logger.info(
            f"Match {submission.match_number} of {submission.competition} created."
        )
        return cast("Match", match)

    @staticmethod
    def delete_match(
        store: DocumentStore, environment: Environment, match_id: Optional[str]
    ) -> None:
        """Delete a match. Its documents are left in place."""
        match = MatchService.get_match(store, environment, match_id)
        store.delete_doc(MATCHES, {ID_FIELD: match[ID_FIELD]})
        logger.info(f"Match {match[ID_FIELD]} deleted.")

    @staticmethod
    def add_document(
        store: DocumentStore,
        environment: Environment,
        match_id: Optional[str],
        doc_id: Optional[str],
    ) -> list[str]:
        """Attach a document of the environment to a match.

        Attaching a document that is already attached leaves the list as is.

        Raises:
            NotFoundError: If the match or the document does not exist.
        """
        match = MatchService.get_match(store, environment, match_id)
        document = None
        if doc_id:
            document = store.get_doc(
                DOCUMENTS, {ID_FIELD: doc_id, "environment": environment["friendlyId"]}
            )
        if document is None:
            raise NotFoundError("Document not found!")

        return MatchService.attach(store, match, cast("Document", document))

    @staticmethod
    def attach(store: DocumentStore, match: Match, document: Document) -> list[str]:
        """Add a document id to a loaded match's list, at most once."""
        store.update_doc(
            MATCHES,
            {ID_FIELD: match[ID_FIELD]},
            {"$addToSet": {"documents": document[ID_FIELD]}},
        )
        documents = list(match.get("documents") or [])
        if document[ID_FIELD] not in documents:
            documents.append(document[ID_FIELD])
        match["documents"] = documents
        return documents

    @staticmethod
    def remove_document(
        store: DocumentStore,
        environment: Environment,
        match_id: Optional[str],
        doc_id: Optional[str],
    ) -> list[str]:
        """Detach a document id from a match. Unknown ids are ignored."""
        match = MatchService.get_match(store, environment, match_id)
        store.update_doc(
            MATCHES, {ID_FIELD: match[ID_FIELD]}, {"$pull": {"documents": doc_id}}
        )
        return [d for d in match.get("documents") or [] if d != doc_id]

    @staticmethod
    def detach_everywhere(
        store: DocumentStore, environment: Environment, doc_id: str
    ) -> int:
        """Remove a document id from every match of the environment that lists it."""
        return store.update_doc(
            MATCHES,
            {"environment": environment["friendlyId"], "documents": doc_id},
            {"$pull": {"documents": doc_id}},
        )

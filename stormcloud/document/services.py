"""Service layer for generic typed documents."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Any, Optional, cast

from stormcloud.core.constants import DOCUMENTS, ID_FIELD
from stormcloud.errors import NotFoundError, ValidationError
from stormcloud.match.services import MatchService
from stormcloud.utils import utcnow

if TYPE_CHECKING:
    from stormcloud.core.types import Document, Environment
    from stormcloud.store import DocumentStore

logger = logging.getLogger(__name__)


class DocumentService:
    """Service class for document-related operations."""

    @staticmethod
    def create_document(
        store: DocumentStore,
        environment: Environment,
        data_type: str,
        json_data: Any,
        image: Optional[str] = None,
        created: Optional[datetime.datetime] = None,
    ) -> Document:
        """Store a new document. ``image`` is only stored when given.

        The data type is stored lower-cased, the form permissions and
        filters use.
        """
        data_type = (data_type or "").strip().lower()
        if not data_type:
            raise ValidationError("A dataType is required.")
        document: dict[str, Any] = {
            "environment": environment["friendlyId"],
            "dataType": data_type,
            "json": json_data,
            "datetime": created or utcnow(),
        }
        if image is not None:
            document["image"] = image
        stored = store.create_doc(DOCUMENTS, document)
        logger.info(f"Document {stored[ID_FIELD]} of type {data_type} created.")
        return cast("Document", stored)

    @staticmethod
    def get_document(
        store: DocumentStore, environment: Environment, doc_id: Optional[str]
    ) -> Document:
        """Load one document of the environment.

        Raises:
            NotFoundError: If the document does not exist in this environment.
        """
        document = None
        if doc_id:
            document = store.get_doc(
                DOCUMENTS, {ID_FIELD: doc_id, "environment": environment["friendlyId"]}
            )
        if document is None:
            raise NotFoundError("Document not found!")
        return cast("Document", document)

    @staticmethod
    def delete_document(
        store: DocumentStore, environment: Environment, doc_id: Optional[str]
    ) -> None:
        """Delete a document and drop it from every match that references it."""
        document = DocumentService.get_document(store, environment, doc_id)
        store.delete_doc(DOCUMENTS, {ID_FIELD: document[ID_FIELD]})
        detached = MatchService.detach_everywhere(
            store, environment, document[ID_FIELD]
        )
        logger.info(
            f"Document {document[ID_FIELD]} deleted and detached from "
            f"{detached} match(es)."
        )

    @staticmethod
    def edit_document(
        store: DocumentStore,
        environment: Environment,
        doc_id: Optional[str],
        json_data: Any = None,
        image: Optional[str] = None,
    ) -> Document:
        """Replace a document's content. The data type cannot change.

        Omitted (None) fields keep their previous values; ``datetime`` is
        always refreshed.
        """
        document = DocumentService.get_document(store, environment, doc_id)
        patch: dict[str, Any] = {
            "json": document.get("json") if json_data is None else json_data,
            "datetime": utcnow(),
        }
        if image is not None or "image" in document:
            patch["image"] = document.get("image") if image is None else image
        store.update_doc(DOCUMENTS, {ID_FIELD: document[ID_FIELD]}, patch)
        document.update(patch)  # type: ignore[typeddict-item]
        return document

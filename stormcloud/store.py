"""Key-filtered document store backed by MongoDB."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from bson import ObjectId
from flask import current_app, g
from pymongo import MongoClient

from .core.constants import ID_FIELD
from .errors import ValidationError

if TYPE_CHECKING:
    from pymongo.database import Database


def flatten_document(doc: dict[str, Any]) -> dict[str, Any]:
    """Convert a stored record into a JSON-friendly dict with a string ``_id``."""
    doc = dict(doc)
    if isinstance(doc.get(ID_FIELD), ObjectId):
        doc[ID_FIELD] = str(doc[ID_FIELD])
    return doc


def _id_query(value: Any) -> Any:
    # Generated ids are ObjectIds; ids chosen by callers stay strings.
    if isinstance(value, str) and ObjectId.is_valid(value):
        return {"$in": [ObjectId(value), value]}
    return value


class DocumentStore:
    """Generic CRUD over MongoDB collections addressed by equality filters.

    Filters are plain mappings of field name to expected value; matching a
    value against an array field matches any element. The key ``_id`` takes
    the string form of an id. Records returned by the store carry their id
    as a string under ``_id``.
    """

    def __init__(self, db: Database) -> None:
        """Wrap a MongoDB database."""
        self.db = db

    @staticmethod
    def _query(filters: Optional[dict[str, Any]]) -> dict[str, Any]:
        query = dict(filters or {})
        for key, value in query.items():
            # Filters are equality only; operators never come from callers.
            if key.startswith("$") or isinstance(value, dict):
                raise ValidationError(f"Invalid filter on {key!r}.")
        if ID_FIELD in query:
            query[ID_FIELD] = _id_query(query[ID_FIELD])
        return query

    def get_docs(
        self, collection: str, filters: Optional[dict[str, Any]] = None
    ) -> list[dict[str, Any]]:
        """Return every record in ``collection`` matching the filters."""
        cursor = self.db[collection].find(self._query(filters))
        return [flatten_document(doc) for doc in cursor]

    def get_doc(
        self, collection: str, filters: Optional[dict[str, Any]] = None
    ) -> Optional[dict[str, Any]]:
        """Return the first matching record, or None."""
        doc = self.db[collection].find_one(self._query(filters))
        return flatten_document(doc) if doc is not None else None

    def create_doc(self, collection: str, doc: dict[str, Any]) -> dict[str, Any]:
        """Insert ``doc`` under a generated id and return the stored record."""
        data = {k: v for k, v in doc.items() if k != ID_FIELD}
        result = self.db[collection].insert_one(data)
        return flatten_document({**data, ID_FIELD: result.inserted_id})

    def set_doc(
        self, collection: str, doc_id: str, doc: dict[str, Any]
    ) -> dict[str, Any]:
        """Create or replace the record with a caller-chosen id."""
        data = {k: v for k, v in doc.items() if k != ID_FIELD}
        self.db[collection].replace_one({ID_FIELD: doc_id}, data, upsert=True)
        return {**data, ID_FIELD: doc_id}

    def update_doc(
        self, collection: str, filters: dict[str, Any], patch: dict[str, Any]
    ) -> int:
        """Apply ``patch`` to every matching record. Returns the match count.

        A plain mapping sets those fields. A mapping of update operators
        (``$addToSet``, ``$pull``...) is applied as is, which keeps array
        edits atomic.
        """
        if not any(key.startswith("$") for key in patch):
            patch = {"$set": patch}
        result = self.db[collection].update_many(self._query(filters), patch)
        return result.matched_count

    def delete_doc(self, collection: str, filters: dict[str, Any]) -> int:
        """Delete every matching record. Returns the number deleted."""
        result = self.db[collection].delete_many(self._query(filters))
        return result.deleted_count


def get_db() -> Database:
    """Return the configured database, connecting on first use."""
    client = current_app.extensions.get("mongo_client")
    if client is None:
        client = MongoClient(current_app.config["MONGO_URI"], tz_aware=True)
        current_app.extensions["mongo_client"] = client
    return client[current_app.config["MONGO_DBNAME"]]


def get_store() -> DocumentStore:
    """Return the document store bound to the current request."""
    if "store" not in g:
        g.store = DocumentStore(get_db())
    return g.store

"""Service layer for schema definitions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, cast

from stormcloud.core.constants import SCHEMAS
from stormcloud.utils import utcnow

if TYPE_CHECKING:
    from stormcloud.core.types import Schema
    from stormcloud.store import DocumentStore

logger = logging.getLogger(__name__)


class SchemaService:
    """Service class for schema-related operations."""

    @staticmethod
    def list_schemas(store: DocumentStore) -> list[Schema]:
        """Return every stored schema."""
        return cast("list[Schema]", store.get_docs(SCHEMAS, {}))

    @staticmethod
    def get_schema(store: DocumentStore, name: str) -> Optional[Schema]:
        """Return the schema with this name, or None."""
        return cast("Optional[Schema]", store.get_doc(SCHEMAS, {"Name": name}))

    @staticmethod
    def save_schema(store: DocumentStore, name: str, parts: Any) -> bool:
        """Update the named schema's parts, creating it when absent.

        Returns True when a new schema was created.
        """
        now = utcnow()
        if store.update_doc(SCHEMAS, {"Name": name}, {"Parts": parts, "Updated": now}):
            logger.info(f"Schema {name} updated.")
            return False
        store.create_doc(SCHEMAS, {"Name": name, "Parts": parts, "Updated": now})
        logger.info(f"Schema {name} created.")
        return True

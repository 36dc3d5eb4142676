"""Service layer for bulk data submission."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from stormcloud.core.constants import SUBMITTED_DATA_TYPE
from stormcloud.document.services import DocumentService
from stormcloud.match.services import MatchService

if TYPE_CHECKING:
    from stormcloud.core.types import Environment
    from stormcloud.store import DocumentStore

    from .models import DataFragment

logger = logging.getLogger(__name__)


class SubmissionService:
    """Service class for device uploads."""

    @staticmethod
    def submit_data(
        store: DocumentStore, environment: Environment, fragments: list[DataFragment]
    ) -> dict[str, int]:
        """Store each fragment as a document and attach it to its match.

        Fragments are written one after another and the call returns once all
        of them are stored. There is no transaction across fragments. A
        fragment whose ``Number`` matches no match of the environment is
        stored unattached.
        """
        associated = 0
        for fragment in fragments:
            document = DocumentService.create_document(
                store,
                environment,
                SUBMITTED_DATA_TYPE,
                fragment.to_json(),
                created=fragment.created,
            )
            if fragment.match_number is None:
                continue

            match = MatchService.find_by_number(
                store, environment, fragment.match_number
            )
            if match is not None:
                MatchService.attach(store, match, document)
                associated += 1

        logger.info(
            f"Stored {len(fragments)} submitted document(s), "
            f"{associated} attached to matches."
        )
        return {"documents": len(fragments), "associated": associated}

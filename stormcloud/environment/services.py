"""Service layer for environment resolution, master passwords and settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, cast

from flask import current_app, g
from werkzeug.security import check_password_hash, generate_password_hash

from stormcloud.core.constants import ENVIRONMENTS
from stormcloud.errors import (
    EnvironmentNotFoundError,
    ServerError,
    ValidationError,
)
from stormcloud.schema.services import SchemaService
from stormcloud.store import get_store

if TYPE_CHECKING:
    from stormcloud.core.types import Environment
    from stormcloud.store import DocumentStore

logger = logging.getLogger(__name__)

SELECTED_SCHEMA_SETTING = "selectedSchema"


class EnvironmentService:
    """Service class for environment-related operations."""

    @staticmethod
    def resolve(store: DocumentStore, name: str) -> Environment:
        """Load the environment whose friendly id is ``name``.

        Raises:
            EnvironmentNotFoundError: If no such environment is configured.
        """
        environment = store.get_doc(ENVIRONMENTS, {"friendlyId": name})
        if environment is None:
            raise EnvironmentNotFoundError(name)
        environment.setdefault("settings", {})
        return cast("Environment", environment)

    @staticmethod
    def create(store: DocumentStore, friendly_id: str) -> Environment:
        """Create an empty environment record."""
        if store.get_doc(ENVIRONMENTS, {"friendlyId": friendly_id}) is not None:
            raise ValidationError(f"Environment {friendly_id!r} already exists.")
        environment = store.create_doc(
            ENVIRONMENTS,
            {"friendlyId": friendly_id, "settings": {}, "masterPasswordHash": None},
        )
        logger.info(f"Environment {friendly_id} created.")
        return cast("Environment", environment)

    @staticmethod
    def is_setup(environment: Environment) -> bool:
        """An environment is set up once it has a master password."""
        return bool(environment.get("masterPasswordHash"))

    @staticmethod
    def public_view(environment: Environment) -> dict[str, Any]:
        """The environment as returned to clients, without the password hash."""
        return {k: v for k, v in environment.items() if k != "masterPasswordHash"}

    @staticmethod
    def check_master_password(
        environment: Environment, password: Optional[str]
    ) -> bool:
        """Verify ``password`` against the environment's master password."""
        password_hash = environment.get("masterPasswordHash")
        if not password_hash or not password:
            return False
        return check_password_hash(password_hash, password)

    @staticmethod
    def set_master_password(
        store: DocumentStore,
        environment: Environment,
        old_password: Optional[str],
        new_password: Optional[str],
    ) -> bool:
        """Set the master password.

        While no password is set any ``old_password`` is accepted; afterwards
        it must match the current one. Returns False when the password was
        not changed.
        """
        if not new_password:
            return False
        if EnvironmentService.is_setup(environment) and not (
            EnvironmentService.check_master_password(environment, old_password)
        ):
            logger.warning(
                f"Master password change refused for {environment['friendlyId']}."
            )
            return False

        password_hash = generate_password_hash(new_password)
        updated = store.update_doc(
            ENVIRONMENTS,
            {"friendlyId": environment["friendlyId"]},
            {"masterPasswordHash": password_hash},
        )
        if not updated:
            return False
        environment["masterPasswordHash"] = password_hash
        logger.info(f"Master password set for {environment['friendlyId']}.")
        return True

    @staticmethod
    def update_settings(
        store: DocumentStore, environment: Environment, changes: dict[str, Any]
    ) -> dict[str, Any]:
        """Merge ``changes`` into the environment's settings and persist them."""
        settings = dict(environment.get("settings") or {})
        settings.update(changes)
        store.update_doc(
            ENVIRONMENTS,
            {"friendlyId": environment["friendlyId"]},
            {"settings": settings},
        )
        environment["settings"] = settings
        return settings

    @staticmethod
    def get_setup(store: DocumentStore, environment: Environment) -> dict[str, Any]:
        """Return the settings and selected schema a new device needs.

        Raises:
            ServerError: If no schema is selected or it no longer exists.
        """
        settings = environment.get("settings") or {}
        schema_name = settings.get(SELECTED_SCHEMA_SETTING)
        if schema_name is None:
            raise ServerError("No schema selected!")

        schema = SchemaService.get_schema(store, schema_name)
        if schema is None:
            raise ServerError("Selected schema not found!")
        return {"settings": settings, "schema": schema}


def current_environment() -> Environment:
    """Resolve the configured environment once per request."""
    if "environment" not in g:
        g.environment = EnvironmentService.resolve(
            get_store(), current_app.config["STORMCLOUD_ENVIRONMENT"]
        )
    return g.environment

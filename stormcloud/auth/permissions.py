"""Permissions as (action, resource) capabilities.

A permission is rendered as ``<ACTION>_<RESOURCE>`` (``WRITE_PIT``,
``READ_ALL``) or as the bare action when it takes no resource
(``ASSOCIATE``). Those names are what gets stored in user grants.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from stormcloud.errors import UnknownResourceTypeError, ValidationError

READ = "READ"
WRITE = "WRITE"
DELETE = "DELETE"
EDIT = "EDIT"
ASSOCIATE_ACTION = "ASSOCIATE"

ACTIONS = (READ, WRITE, DELETE, EDIT, ASSOCIATE_ACTION)
RESOURCELESS_ACTIONS = (ASSOCIATE_ACTION,)
ALL = "ALL"


@dataclass(frozen=True)
class Permission:
    """A grantable capability."""

    action: str
    resource: Optional[str] = ALL

    def __post_init__(self) -> None:
        if self.action not in ACTIONS:
            raise ValidationError(f"Unknown permission action: {self.action!r}.")
        if self.action in RESOURCELESS_ACTIONS:
            if self.resource is not None:
                raise ValidationError(f"{self.action} does not take a resource.")
        elif not self.resource:
            raise ValidationError(f"{self.action} requires a resource.")

    @property
    def name(self) -> str:
        """The string form stored in grants."""
        if self.resource is None:
            return self.action
        return f"{self.action}_{self.resource}"

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, name: str) -> Permission:
        """Parse a stored permission name."""
        if not isinstance(name, str) or not name.strip():
            raise ValidationError(f"Invalid permission: {name!r}.")
        action, _, resource = name.strip().upper().partition("_")
        if action in RESOURCELESS_ACTIONS:
            return cls(action, resource or None)
        return cls(action, resource)

    def is_granted_by(self, granted: Iterable[str]) -> bool:
        """Whether a set of granted names covers this permission.

        ``<ACTION>_ALL`` covers every resource of that action.
        """
        names = {n.strip().upper() for n in granted if isinstance(n, str)}
        if self.name in names:
            return True
        return self.resource not in (None, ALL) and f"{self.action}_{ALL}" in names


READ_ALL = Permission(READ)
WRITE_ALL = Permission(WRITE)
DELETE_ALL = Permission(DELETE)
EDIT_ALL = Permission(EDIT)
ASSOCIATE = Permission(ASSOCIATE_ACTION, None)


def document_permission(
    action: str, data_type: Optional[str], known_types: Iterable[str]
) -> Permission:
    """Build the permission scoped to one document type.

    Raises:
        UnknownResourceTypeError: If ``data_type`` is not a configured type.
    """
    if not isinstance(data_type, str):
        raise UnknownResourceTypeError(data_type)
    normalized = data_type.strip().lower()
    if not normalized or normalized not in {t.strip().lower() for t in known_types}:
        raise UnknownResourceTypeError(data_type)
    return Permission(action, normalized.upper())

"""Core data types for the StormCloud API."""

from typing import Any, Dict, List, Optional, TypedDict  # noqa: UP035


class StoredDocument(TypedDict):
    """A record read back from the document store."""

    _id: str


class Environment(TypedDict, total=False):
    """A deployment context with its own settings and master password."""

    _id: str
    friendlyId: str
    settings: Dict[str, Any]  # noqa: UP006
    masterPasswordHash: Optional[str]


class Match(StoredDocument, total=False):
    """A competition event referencing zero or more documents."""

    environment: str
    competition: str
    matchNumber: int
    teams: List[Any]  # noqa: UP006
    locked: bool
    documents: List[str]  # noqa: UP006
    date: Any


class Document(StoredDocument, total=False):
    """A generic typed payload."""

    environment: str
    dataType: str
    json: Any
    image: Optional[str]
    datetime: Any


class Schema(StoredDocument, total=False):
    """A named description of the data shape of a data type."""

    Name: str
    Parts: Any
    Updated: Any

"""Data models for bulk submissions."""

from __future__ import annotations

import datetime
import json
from dataclasses import dataclass
from typing import Any, Optional

from stormcloud.errors import ValidationError
from stormcloud.utils import INTEGER_PATTERN, parse_datetime


def parse_fragment_number(value: Any) -> Optional[int]:
    """Read a fragment's match number. Values that are not whole numbers give None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and INTEGER_PATTERN.fullmatch(value.strip()):
        return int(value.strip())
    return None


@dataclass
class DataFragment:
    """One scouting entry from a device upload."""

    data: dict[str, Any]
    created: datetime.datetime
    match_number: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Any) -> DataFragment:
        """Build a fragment, reading its ``Created`` time and match ``Number``."""
        if not isinstance(data, dict):
            raise ValidationError("Each submitted document must be an object.")

        return cls(
            data=data,
            created=parse_datetime(data.get("Created")),
            match_number=parse_fragment_number(data.get("Number")),
        )

    def to_json(self) -> str:
        """The fragment as stored in the document's ``json`` field."""
        return json.dumps(self.data)


def parse_fragments(documents: Any) -> list[DataFragment]:
    """Parse a JSON-encoded (or already decoded) array of fragments.

    Every fragment is validated before any of them is returned, so a bad
    upload is rejected as a whole.
    """
    if isinstance(documents, str):
        try:
            documents = json.loads(documents)
        except json.JSONDecodeError as e:
            raise ValidationError("documents is not valid JSON.") from e
    if not isinstance(documents, list):
        raise ValidationError("documents must be a JSON array.")
    return [DataFragment.from_dict(item) for item in documents]

"""Data models for the match blueprint."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Any, Optional

from stormcloud.errors import ValidationError
from stormcloud.utils import parse_datetime

TRUE_STRINGS = ("true", "1", "t", "yes", "on")


def parse_match_number(value: Any) -> int:
    """Coerce a match number to an int."""
    if isinstance(value, bool):
        raise ValidationError(f"Invalid match number: {value!r}.")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid match number: {value!r}.") from e


@dataclass
class MatchSubmission:
    """Dataclass for a new match."""

    competition: str
    match_number: int
    teams: list[Any] = field(default_factory=list)
    locked: bool = False
    date: Optional[datetime.datetime] = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> MatchSubmission:
        """Build a submission from a request body, coercing form strings."""
        teams = payload.get("teams") or []
        if isinstance(teams, str):
            teams = [t.strip() for t in teams.split(",") if t.strip()]

        locked = payload.get("locked", False)
        if isinstance(locked, str):
            locked = locked.lower() in TRUE_STRINGS

        date = payload.get("date")
        return cls(
            competition=payload.get("competition"),
            match_number=parse_match_number(payload.get("matchNumber")),
            teams=teams,
            locked=bool(locked),
            date=parse_datetime(date) if date not in (None, "") else None,
        )

    def validate(self) -> None:
        """Validate the submission for obvious errors."""
        if not self.competition or not isinstance(self.competition, str):
            raise ValidationError("A competition is required.")
        if self.match_number < 0:
            raise ValidationError("Match numbers cannot be negative.")
        if not isinstance(self.teams, list):
            raise ValidationError("teams must be a list.")

    def to_document(self, environment: str) -> dict[str, Any]:
        """The stored representation of a new match."""
        return {
            "environment": environment,
            "competition": self.competition,
            "matchNumber": self.match_number,
            "teams": self.teams,
            "locked": self.locked,
            "documents": [],
            "date": self.date,
        }

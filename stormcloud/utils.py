"""Utility functions for request handling."""

from __future__ import annotations

import datetime
import re
from typing import Any, Optional

from flask import current_app, request

from .errors import ValidationError

INTEGER_PATTERN = re.compile(r"-?\d+", re.ASCII)


def request_payload() -> dict[str, Any]:
    """Return the request body as a dict, whether it was sent as JSON or a form."""
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return payload
    return request.form.to_dict()


def require_fields(payload: dict[str, Any], *fields: str) -> None:
    """Raise a ValidationError naming every required field that is missing."""
    missing = [f for f in fields if payload.get(f) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}.")


def require_strings(payload: dict[str, Any], *fields: str) -> None:
    """Like require_fields, and every field must also be a string."""
    require_fields(payload, *fields)
    for f in fields:
        optional_string(payload, f)


def optional_string(
    payload: dict[str, Any], field: str, default: Optional[str] = None
) -> Optional[str]:
    """Return a field that may be absent but must be a string when present."""
    value = payload.get(field)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string.")
    return value


def request_token() -> Optional[str]:
    """Read the bearer token from the token cookie or the Authorization header."""
    token = request.cookies.get(current_app.config["TOKEN_COOKIE"])
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def utcnow() -> datetime.datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def parse_datetime(value: Any) -> datetime.datetime:
    """Parse a client-supplied timestamp.

    Accepts datetimes, epoch milliseconds and ISO-8601 strings (a trailing
    ``Z`` is understood). Missing values mean now.
    """
    if value in (None, ""):
        return utcnow()
    if isinstance(value, datetime.datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.datetime.fromtimestamp(
                value / 1000, tz=datetime.timezone.utc
            )
        except (OverflowError, OSError, ValueError) as e:
            raise ValidationError(f"Invalid date: {value!r}.") from e
    elif isinstance(value, str):
        text = value.strip()
        if INTEGER_PATTERN.fullmatch(text):
            return parse_datetime(int(text))
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.datetime.fromisoformat(text)
        except ValueError as e:
            raise ValidationError(f"Invalid date: {value!r}.") from e
    else:
        raise ValidationError(f"Invalid date: {value!r}.")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed

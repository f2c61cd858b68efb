from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from flask import jsonify, request

from app.jsonfmt.errors import ActionError


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime(timezone=False) columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat() + "Z"


def parse_datetime(raw: str) -> datetime:
    """
    Parse an ISO-8601 datetime. Offsets are converted to naive UTC;
    naive input is taken as UTC. Raises ValueError, including when the
    UTC conversion falls outside the datetime range.
    """
    s = raw.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    value = datetime.fromisoformat(s)
    if value.tzinfo is not None:
        try:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError as e:
            raise ValueError(f"datetime out of range: {raw!r}") from e
    return value


def read_json_object() -> dict[str, Any]:
    """Request body as a dict; an empty body counts as {}."""
    if not request.get_data(cache=True):
        return {}
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ActionError("BAD_REQUEST", "Request body must be a JSON object.")
    return body


def check_string(payload: dict, key: str, errors: list[str], *, required: bool = False, non_empty: bool = False) -> None:
    """Append an error for `key` unless it is absent (and optional) or a valid string."""
    if key not in payload:
        if required:
            errors.append(f"{key} is required.")
        return
    value = payload[key]
    if not isinstance(value, str):
        errors.append(f"{key} must be a string.")
    elif non_empty and not value:
        errors.append(f"{key} must not be empty.")


def check_bool(payload: dict, key: str, errors: list[str]) -> None:
    if key in payload and not isinstance(payload[key], bool):
        errors.append(f"{key} must be a boolean.")


def check_datetime(payload: dict, key: str, errors: list[str]) -> None:
    if key not in payload:
        return
    value = payload[key]
    if not isinstance(value, str):
        errors.append(f"{key} must be an ISO-8601 datetime string.")
        return
    try:
        parse_datetime(value)
    except ValueError:
        errors.append(f"{key} is not a valid ISO-8601 datetime.")


def success(**data: Any):
    """The {"success": true, "data": {...}} envelope every action returns."""
    return jsonify({"success": True, "data": data})

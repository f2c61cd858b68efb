from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.jsonfmt.errors import ActionError
from app.jsonfmt.utils import check_bool, check_datetime, check_string, iso, parse_datetime, utcnow

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.jsonfmt.models import User
    from app.jsonfmt.modules.snippets.models import JsonSnippet

logger = logging.getLogger(__name__)

# wire name -> column attribute
UPDATABLE_FIELDS = {
    "label": "label",
    "rawJson": "raw_json",
    "isValid": "is_valid",
    "validationError": "validation_error",
    "lastUsedAt": "last_used_at",
}


def validate_snippet_payload(payload: dict, *, partial: bool = False) -> list[str]:
    """Validate snippet create/update payload. Returns list of errors."""
    errors: list[str] = []
    check_string(payload, "label", errors)
    check_string(payload, "rawJson", errors, required=not partial, non_empty=not partial)
    check_bool(payload, "isValid", errors)
    check_string(payload, "validationError", errors)
    check_datetime(payload, "lastUsedAt", errors)
    if partial and not any(k in payload for k in UPDATABLE_FIELDS):
        errors.append("At least one field must be provided to update.")
    return errors


def serialize_snippet(snippet: "JsonSnippet") -> dict[str, Any]:
    return {
        "id": snippet.id,
        "userId": snippet.user_id,
        "label": snippet.label,
        "rawJson": snippet.raw_json,
        "isValid": snippet.is_valid,
        "validationError": snippet.validation_error,
        "createdAt": iso(snippet.created_at),
        "lastUsedAt": iso(snippet.last_used_at),
    }


def get_owned_snippet(s: "Session", snippet_id: str, user_id: str) -> "JsonSnippet":
    """
    The snippet with this id owned by user_id.
    Missing and not-owned both raise NOT_FOUND so ids of other users' rows are not disclosed.
    """
    from app.jsonfmt.modules.snippets.models import JsonSnippet

    snippet = (
        s.query(JsonSnippet)
        .filter(JsonSnippet.id == snippet_id, JsonSnippet.user_id == user_id)
        .one_or_none()
    )
    if not snippet:
        raise ActionError("NOT_FOUND", "JSON snippet not found.")
    return snippet


def _coerce(field: str, value: Any) -> Any:
    if field == "lastUsedAt":
        return parse_datetime(value)
    return value


def create_snippet(s: "Session", payload: dict, user: "User") -> "JsonSnippet":
    """Insert a snippet owned by user. Payload must already be validated."""
    from app.jsonfmt.modules.snippets.models import JsonSnippet

    snippet = JsonSnippet(
        user_id=user.id,
        label=payload.get("label"),
        raw_json=payload["rawJson"],
        is_valid=payload.get("isValid", True),
        validation_error=payload.get("validationError"),
        created_at=utcnow(),
        last_used_at=_coerce("lastUsedAt", payload["lastUsedAt"]) if "lastUsedAt" in payload else None,
    )
    s.add(snippet)
    s.flush()
    logger.info("snippet.create id=%s user_id=%s", snippet.id, user.id)
    return snippet


def update_snippet(s: "Session", snippet: "JsonSnippet", payload: dict, user: "User") -> "JsonSnippet":
    """Apply only the fields present in payload."""
    changed = []
    for field, attr in UPDATABLE_FIELDS.items():
        if field in payload:
            setattr(snippet, attr, _coerce(field, payload[field]))
            changed.append(field)
    s.flush()
    logger.info("snippet.update id=%s user_id=%s fields=%s", snippet.id, user.id, ",".join(changed))
    return snippet


def list_snippets(s: "Session", user: "User") -> list["JsonSnippet"]:
    from app.jsonfmt.modules.snippets.models import JsonSnippet

    return (
        s.query(JsonSnippet)
        .filter(JsonSnippet.user_id == user.id)
        .order_by(JsonSnippet.created_at.desc(), JsonSnippet.id.asc())
        .all()
    )

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.jsonfmt.utils import check_string, iso, utcnow

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.jsonfmt.models import User
    from app.jsonfmt.modules.format_operations.models import JsonFormatOperation
    from app.jsonfmt.modules.snippets.models import JsonSnippet

logger = logging.getLogger(__name__)


def validate_operation_payload(payload: dict) -> list[str]:
    """Validate format operation payload. Returns list of errors."""
    errors: list[str] = []
    check_string(payload, "snippetId", errors, required=True, non_empty=True)
    check_string(payload, "operationType", errors)
    check_string(payload, "settingsJson", errors)
    check_string(payload, "resultJson", errors)
    return errors


def serialize_operation(op: "JsonFormatOperation") -> dict[str, Any]:
    return {
        "id": op.id,
        "snippetId": op.snippet_id,
        "userId": op.user_id,
        "operationType": op.operation_type,
        "settingsJson": op.settings_json,
        "resultJson": op.result_json,
        "createdAt": iso(op.created_at),
    }


def create_operation(s: "Session", snippet: "JsonSnippet", payload: dict, user: "User") -> "JsonFormatOperation":
    """Record one formatting action against a snippet the caller owns."""
    from app.jsonfmt.modules.format_operations.models import JsonFormatOperation

    op = JsonFormatOperation(
        snippet_id=snippet.id,
        user_id=user.id,
        operation_type=payload.get("operationType"),
        settings_json=payload.get("settingsJson"),
        result_json=payload.get("resultJson"),
        created_at=utcnow(),
    )
    s.add(op)
    s.flush()
    logger.info(
        "format_operation.create id=%s snippet_id=%s user_id=%s type=%s",
        op.id,
        snippet.id,
        user.id,
        op.operation_type,
    )
    return op


def list_operations(s: "Session", snippet: "JsonSnippet") -> list["JsonFormatOperation"]:
    from app.jsonfmt.modules.format_operations.models import JsonFormatOperation

    return (
        s.query(JsonFormatOperation)
        .filter(JsonFormatOperation.snippet_id == snippet.id)
        .order_by(JsonFormatOperation.created_at.desc(), JsonFormatOperation.id.asc())
        .all()
    )

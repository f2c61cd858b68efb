from __future__ import annotations

from flask import Blueprint

from app.jsonfmt.auth import require_user
from app.jsonfmt.db import db_session
from app.jsonfmt.errors import bad_request
from app.jsonfmt.modules.format_operations.service import (
    create_operation,
    list_operations,
    serialize_operation,
    validate_operation_payload,
)
from app.jsonfmt.modules.snippets.service import get_owned_snippet
from app.jsonfmt.utils import read_json_object, success

bp = Blueprint("format_operations", __name__)


@bp.post("/snippets/<snippet_id>/operations")
def operations_create(snippet_id: str):
    u = require_user()
    payload = {**read_json_object(), "snippetId": snippet_id}
    errors = validate_operation_payload(payload)
    if errors:
        raise bad_request(errors)

    s = db_session()
    snippet = get_owned_snippet(s, snippet_id, u.id)
    op = create_operation(s, snippet, payload, u)
    s.commit()
    return success(operation=serialize_operation(op))


@bp.get("/snippets/<snippet_id>/operations")
def operations_list(snippet_id: str):
    u = require_user()
    s = db_session()
    snippet = get_owned_snippet(s, snippet_id, u.id)
    ops = list_operations(s, snippet)
    return success(items=[serialize_operation(op) for op in ops], total=len(ops))

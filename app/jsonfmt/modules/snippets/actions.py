from __future__ import annotations

from flask import Blueprint

from app.jsonfmt.auth import require_user
from app.jsonfmt.db import db_session
from app.jsonfmt.errors import bad_request
from app.jsonfmt.modules.snippets.service import (
    create_snippet,
    get_owned_snippet,
    list_snippets,
    serialize_snippet,
    update_snippet,
    validate_snippet_payload,
)
from app.jsonfmt.utils import read_json_object, success

bp = Blueprint("snippets", __name__)


@bp.post("/snippets")
def snippets_create():
    u = require_user()
    payload = read_json_object()
    errors = validate_snippet_payload(payload)
    if errors:
        raise bad_request(errors)

    s = db_session()
    snippet = create_snippet(s, payload, u)
    s.commit()
    return success(snippet=serialize_snippet(snippet))


@bp.patch("/snippets/<snippet_id>")
def snippets_update(snippet_id: str):
    u = require_user()
    payload = read_json_object()
    errors = validate_snippet_payload(payload, partial=True)
    if errors:
        raise bad_request(errors)

    s = db_session()
    snippet = get_owned_snippet(s, snippet_id, u.id)
    snippet = update_snippet(s, snippet, payload, u)
    s.commit()
    return success(snippet=serialize_snippet(snippet))


@bp.get("/snippets")
def snippets_list():
    u = require_user()
    snippets = list_snippets(db_session(), u)
    return success(items=[serialize_snippet(sn) for sn in snippets], total=len(snippets))

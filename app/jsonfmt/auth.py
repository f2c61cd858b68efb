from __future__ import annotations

import uuid

from flask import Blueprint, current_app, g, request, session
from sqlalchemy.exc import SQLAlchemyError

from app.jsonfmt.db import db_session
from app.jsonfmt.errors import ActionError
from app.jsonfmt.models import User
from app.jsonfmt.security import ensure_csrf_token

bp = Blueprint("auth", __name__)


def load_current_user() -> None:
    """
    Loads g.current_user from the signed session cookie.
    Also assigns a simple per-request request_id (for log correlation).
    """
    if not getattr(g, "request_id", None):
        g.request_id = uuid.uuid4().hex
    if request.path.startswith(("/static/", "/health", "/healthz")):
        g.current_user = None
        return

    user_id = session.get("user_id")
    if not user_id:
        g.current_user = None
        return

    s = db_session()
    try:
        user = s.get(User, str(user_id))
    except SQLAlchemyError as e:
        # Session key kept: only a resolved missing or inactive user clears it.
        current_app.logger.error("load_current_user DB error: %s", e)
        s.rollback()
        g.current_user = None
        return
    if not user or not user.is_active:
        session.pop("user_id", None)
        g.current_user = None
        return
    g.current_user = user


def require_user() -> User:
    """Authenticated session user, or UNAUTHORIZED."""
    user: User | None = getattr(g, "current_user", None)
    if not user:
        raise ActionError("UNAUTHORIZED", "You must be signed in to perform this action.")
    return user


@bp.get("/session")
def session_info():
    """Current user id and the CSRF token mutating calls must echo."""
    user: User | None = getattr(g, "current_user", None)
    return {
        "success": True,
        "data": {
            "userId": user.id if user else None,
            "csrfToken": ensure_csrf_token(),
        },
    }

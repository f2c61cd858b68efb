from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from app.jsonfmt.utils import utcnow


def new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class User(Base):
    """
    Identity row owned by the external auth provider.
    This app only reads it to resolve the session user.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=utcnow)


# Ensure module models are imported so Base.metadata includes their tables.
# (Kept at bottom to avoid circular imports.)
from app.jsonfmt.modules.snippets.models import JsonSnippet  # noqa: E402,F401
from app.jsonfmt.modules.format_operations.models import JsonFormatOperation  # noqa: E402,F401
from app.jsonfmt.modules.transform_recipes.models import JsonTransformRecipe  # noqa: E402,F401

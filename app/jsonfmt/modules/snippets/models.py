from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.jsonfmt.models import Base, new_id
from app.jsonfmt.utils import utcnow


class JsonSnippet(Base):
    __tablename__ = "json_snippets"
    __table_args__ = (
        Index("idx_json_snippets_user", "user_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)

    label: Mapped[str | None] = mapped_column(Text, nullable=True)  # "Webhook payload", "API response"
    raw_json: Mapped[str] = mapped_column(Text, nullable=False)  # original JSON text
    is_valid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    validation_error: Mapped[str | None] = mapped_column(Text, nullable=True)  # if invalid

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=utcnow)
    last_used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)

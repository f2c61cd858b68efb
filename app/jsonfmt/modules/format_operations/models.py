from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.jsonfmt.models import Base, new_id
from app.jsonfmt.utils import utcnow


class JsonFormatOperation(Base):
    __tablename__ = "json_format_operations"
    __table_args__ = (
        Index("idx_json_format_operations_snippet", "snippet_id"),
        Index("idx_json_format_operations_user", "user_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    snippet_id: Mapped[str] = mapped_column(ForeignKey("json_snippets.id"), nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)

    operation_type: Mapped[str | None] = mapped_column(Text, nullable=True)  # "pretty-print", "minify", "sort-keys", "transform"
    settings_json: Mapped[str | None] = mapped_column(Text, nullable=True)  # e.g. indent size, sorting settings
    result_json: Mapped[str | None] = mapped_column(Text, nullable=True)  # resulting JSON string (if stored)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=utcnow)

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.jsonfmt.models import Base, new_id
from app.jsonfmt.utils import utcnow


class JsonTransformRecipe(Base):
    __tablename__ = "json_transform_recipes"
    __table_args__ = (
        Index("idx_json_transform_recipes_user", "user_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)

    name: Mapped[str] = mapped_column(Text, nullable=False)  # "Pick keys for logs", "Mask sensitive fields"
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    config_json: Mapped[str] = mapped_column(Text, nullable=False)  # transform config as JSON text

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=utcnow)

"""
Outfit suggestion model.

Reference: https://docs.sqlalchemy.org/en/21/orm/basic_relationships.html
"""

import uuid
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from closet.core.database import Base

if TYPE_CHECKING:
    from closet.models.user import User


class OutfitSuggestion(Base):
    """
    A saved outfit: a list of clothing item IDs for a given day.

    clothes_ids is a plain JSON list; referenced items may have been deleted since.
    """

    __tablename__ = "outfit_suggestions"

    __table_args__ = (Index("ix_outfit_suggestions_user_id", "user_id"),)

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    user: Mapped["User"] = relationship("User", back_populates="outfit_suggestions")

    clothes_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    suggestion_date: Mapped[date] = mapped_column(Date, nullable=False)
    context: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<OutfitSuggestion(id={self.id}, user_id={self.user_id}, items={len(self.clothes_ids or [])})>"

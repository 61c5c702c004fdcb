"""
Clothing item model representing a photographed piece in a user's wardrobe.

Reference: https://docs.sqlalchemy.org/en/21/orm/basic_relationships.html
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from closet.core.database import Base

# Import User only for type checking to avoid circular imports
# Reference: https://docs.python.org/3/library/typing.html#typing.TYPE_CHECKING
if TYPE_CHECKING:
    from closet.models.user import User


class ClothingType(str, Enum):
    """Clothing category."""

    TOP = "top"
    BOTTOM = "bottom"
    SHOES = "shoes"
    ACCESSORIES = "accessories"
    OUTERWEAR = "outerwear"
    DRESS = "dress"
    SUIT = "suit"


class Season(str, Enum):
    """Season an item is meant for."""

    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"
    ALL = "all"


class Style(str, Enum):
    """Style family of an item."""

    CASUAL = "casual"
    FORMAL = "formal"
    SPORT = "sport"
    CHIC = "chic"
    VINTAGE = "vintage"
    STREETWEAR = "streetwear"


# Note: type/season/style are stored as short VARCHARs, not PostgreSQL enums
# Pydantic schemas handle enum validation at the API boundary


class ClothingItem(Base):
    """
    Clothing item model.

    Attributes:
        id: Primary key (UUID string)
        user_id: Foreign key to users table
        image_url: Public URL of the item photo
        type: Item category (top, bottom, shoes, ...)
        color, season, size, material, style, brand, model: Optional descriptors
        tags: Optional list of free tags, also used as occasions (e.g. ["party", "summer"])
        created_at: Timestamp when item was created
        updated_at: Timestamp when item was last updated
    """

    __tablename__ = "clothes"

    __table_args__ = (
        Index("ix_clothes_user_id", "user_id"),
        Index("ix_clothes_user_type", "user_id", "type"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )

    user_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    user: Mapped["User"] = relationship("User", back_populates="clothes")

    image_url: Mapped[str] = mapped_column(
        String(500), nullable=False, comment="URL to item image"
    )
    type: Mapped[str] = mapped_column(
        String(20), nullable=False, comment="Item category (top, bottom, shoes, ...)"
    )

    color: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    season: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    size: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    material: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    style: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    brand: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    model: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Reference: https://docs.sqlalchemy.org/en/21/core/type_basics.html#sqlalchemy.types.JSON
    tags: Mapped[Optional[list[str]]] = mapped_column(
        JSON,
        nullable=True,
        comment="List of tags / occasions (e.g., ['party', 'summer'])",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<ClothingItem(id={self.id}, user_id={self.user_id}, type='{self.type}')>"

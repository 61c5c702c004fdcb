"""
User model mirroring the identity provider's user in the database.

Reference: https://docs.sqlalchemy.org/en/21/orm/basic_relationships.html
"""

from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from closet.core.database import Base

if TYPE_CHECKING:
    from closet.models.clothing import ClothingItem
    from closet.models.event import Event
    from closet.models.outfit import OutfitSuggestion


class GeneratorMode(str, Enum):
    """Outfit generator mode preference."""

    HEURISTIC = "heuristic"
    AI = "ai"


class User(Base):
    """
    User model representing a user in the database

    Attributes:
        id: Primary key, identity provider user ID
        email: User email (required)
        full_name: Display name (optional)
        avatar_url: Profile picture URL (optional)
        outfit_generator_mode: Preferred outfit generator mode (heuristic or ai)
        created_at: Timestamp when user was created
        updated_at: Timestamp when user was last updated
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True)
    full_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    outfit_generator_mode: Mapped[str] = mapped_column(
        String(10),
        default=GeneratorMode.HEURISTIC.value,
        server_default=GeneratorMode.HEURISTIC.value,
        nullable=False,
        comment="Outfit generator mode (heuristic, ai)",
    )

    clothes: Mapped[list["ClothingItem"]] = relationship(
        "ClothingItem", back_populates="user", cascade="all, delete-orphan"
    )
    events: Mapped[list["Event"]] = relationship(
        "Event", back_populates="user", cascade="all, delete-orphan"
    )
    outfit_suggestions: Mapped[list["OutfitSuggestion"]] = relationship(
        "OutfitSuggestion", back_populates="user", cascade="all, delete-orphan"
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
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"

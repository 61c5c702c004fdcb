"""
Database models
All SQLAlchemy models should be defined here or imported here
"""

from closet.core.database import Base
from closet.models.clothing import ClothingItem, ClothingType, Season, Style
from closet.models.event import Event, EventStatus, EventType
from closet.models.outfit import OutfitSuggestion
from closet.models.user import GeneratorMode, User

__all__ = [
    "Base",
    "ClothingItem",
    "ClothingType",
    "Event",
    "EventStatus",
    "EventType",
    "GeneratorMode",
    "OutfitSuggestion",
    "Season",
    "Style",
    "User",
]

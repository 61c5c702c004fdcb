"""
Pydantic schemas for API request/response models
"""

from closet.api.v1.schemas.clothing import ClothingCreate, ClothingResponse, ClothingUpdate
from closet.api.v1.schemas.event import EventCreate, EventResponse, EventUpdate
from closet.api.v1.schemas.outfit import OutfitSuggestionCreate, OutfitSuggestionResponse

__all__ = [
    "ClothingCreate",
    "ClothingResponse",
    "ClothingUpdate",
    "EventCreate",
    "EventResponse",
    "EventUpdate",
    "OutfitSuggestionCreate",
    "OutfitSuggestionResponse",
]

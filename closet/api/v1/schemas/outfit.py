"""
Outfit suggestion schemas, including the wire format of the remote AI function
"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from closet.api.v1.schemas.clothing import ClothingResponse
from closet.models.user import GeneratorMode


class OutfitSuggestionCreate(BaseModel):
    """Schema for saving an outfit suggestion"""
    clothes_ids: list[str] = Field(..., description="IDs of the selected clothing items")
    suggestion_date: date = Field(..., description="Day the outfit is suggested for")
    context: Optional[str] = Field(None, description="Free-text context (occasion, weather, ...)")


class OutfitSuggestionResponse(BaseModel):
    """
    Schema for outfit suggestion response.

    clothes is only populated when the suggestion was hydrated with the
    actual clothing records. reasoning/confidence come from the AI function
    and are not persisted.
    """
    id: str = Field(..., description="Suggestion ID (local-<ms> for unsaved heuristic outfits)")
    user_id: str
    clothes_ids: list[str]
    suggestion_date: date
    context: Optional[str] = None
    created_at: datetime
    clothes: Optional[list[ClothingResponse]] = None
    reasoning: Optional[str] = None
    confidence: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class GenerateOutfitRequest(BaseModel):
    """
    Request for the outfit generator.

    mode overrides the user's saved preference for this call only.
    """
    occasion: Optional[str] = Field(None, max_length=100, description="Occasion tag (e.g., 'party')")
    season: Optional[str] = Field(None, max_length=20, description="Season hint forwarded to the AI function")
    force_refresh: bool = Field(False, description="Bypass today's cached AI outfit")
    mode: Optional[GeneratorMode] = Field(None, description="heuristic or ai")


class GenerateOutfitResponse(BaseModel):
    """Outcome of a generation: outfit is null when the wardrobe is empty"""
    mode: GeneratorMode
    cached: bool = False
    outfit: Optional[OutfitSuggestionResponse] = None


class OutfitModeUpdate(BaseModel):
    mode: GeneratorMode


class OutfitModeResponse(BaseModel):
    mode: GeneratorMode


class SuggestionClothes(BaseModel):
    """Minimal wardrobe entry sent to the AI function"""
    id: str
    type: str
    color: str
    style: str
    season: str


class SuggestOutfitRequest(BaseModel):
    clothes: list[SuggestionClothes]
    context: Optional[str] = None
    season: Optional[str] = None
    weather: Optional[str] = None


class SuggestOutfitResponse(BaseModel):
    suggested_clothes_ids: list[str] = Field(default_factory=list)
    reasoning: Optional[str] = None
    confidence: Optional[float] = None

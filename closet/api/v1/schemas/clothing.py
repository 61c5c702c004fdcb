"""
Clothing item schemas for request/response validation
Reference: https://fastapi.tiangolo.com/tutorial/body/
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from closet.models.clothing import ClothingType, Season, Style


def _clean_tags(v: Optional[list[str]]) -> Optional[list[str]]:
    """Strip blanks and duplicates while keeping order"""
    if v is None:
        return None
    cleaned: list[str] = []
    for tag in v:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class ClothingBase(BaseModel):
    """Base schema with common clothing fields"""
    image_url: str = Field(..., min_length=1, max_length=500, description="URL to item image")
    type: ClothingType = Field(..., description="Item category (top, bottom, shoes, accessories, outerwear, dress, suit)")
    color: Optional[str] = Field(None, max_length=50, description="Main color (e.g., 'blue')")
    season: Optional[Season] = Field(None, description="Season (spring, summer, fall, winter, all)")
    size: Optional[str] = Field(None, max_length=20, description="Size label (e.g., 'M', '42')")
    material: Optional[str] = Field(None, max_length=100, description="Material (e.g., 'cotton')")
    style: Optional[Style] = Field(None, description="Style (casual, formal, sport, chic, vintage, streetwear)")
    brand: Optional[str] = Field(None, max_length=100, description="Brand")
    model: Optional[str] = Field(None, max_length=100, description="Model name")
    tags: Optional[list[str]] = Field(
        None,
        description="Free tags, also matched against occasions (e.g., ['party', 'summer'])"
    )

    # "model" collides with pydantic's protected namespace
    model_config = ConfigDict(protected_namespaces=())

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return _clean_tags(v)


class ClothingCreate(ClothingBase):
    """
    Schema for creating a clothing item.

    user_id is set from the authenticated user.
    """
    pass


class ClothingUpdate(BaseModel):
    """
    Schema for updating a clothing item.

    All fields are optional for partial updates.
    """
    image_url: Optional[str] = Field(None, min_length=1, max_length=500, description="URL to item image")
    type: Optional[ClothingType] = Field(None, description="Item category")
    color: Optional[str] = Field(None, max_length=50)
    season: Optional[Season] = None
    size: Optional[str] = Field(None, max_length=20)
    material: Optional[str] = Field(None, max_length=100)
    style: Optional[Style] = None
    brand: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=100)
    tags: Optional[list[str]] = None

    model_config = ConfigDict(protected_namespaces=())

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return _clean_tags(v)


class ClothingResponse(ClothingBase):
    """
    Schema for clothing item response.

    Includes all fields from ClothingBase plus database-generated fields.
    """
    id: str = Field(..., description="Item ID")
    user_id: str = Field(..., description="User ID who owns this item")
    created_at: datetime = Field(..., description="Timestamp when item was created")
    updated_at: datetime = Field(..., description="Timestamp when item was last updated")

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())


class TagClothesRequest(BaseModel):
    """Ask the AI tagging function to describe an uploaded photo"""
    image_url: str = Field(..., min_length=1, max_length=500, description="Public URL of the photo")


class TagClothesResponse(BaseModel):
    """Attributes detected by the AI tagging function"""
    type: Optional[str] = None
    color: Optional[str] = None
    tags: Optional[list[str]] = None
    confidence: Optional[float] = None

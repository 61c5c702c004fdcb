from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from closet.models.user import GeneratorMode


class WorkOSUserResponse(BaseModel):
    """User as returned by the identity provider"""
    object: str = Field("user", description="Object")
    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User email")
    first_name: str | None = Field(None, description="User first name")
    last_name: str | None = Field(None, description="User last name")
    email_verified: bool = Field(False, description="User email verified")
    profile_picture_url: str | None = Field(
        None, description="User profile picture URL"
    )
    created_at: datetime = Field(..., description="User created at")
    updated_at: datetime = Field(..., description="User updated at")

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    """
    Schema for the authenticated user's local record

    Attributes:
        id: User ID
        email: User email
        full_name: Display name
        avatar_url: Profile picture URL
        outfit_generator_mode: Saved generator mode
    """
    id: str
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    outfit_generator_mode: GeneratorMode = GeneratorMode.HEURISTIC
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

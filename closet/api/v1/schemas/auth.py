from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from closet.api.v1.schemas.user import WorkOSUserResponse


class LoginRequest(BaseModel):
    email: str = Field(..., description="User email")
    password: str = Field(..., description="User password")


class SignupRequest(BaseModel):
    """
    Schema for user signup/registration.

    Includes password validation and confirmation.
    """
    email: str = Field(..., min_length=1, max_length=255, description="User email")
    password: str = Field(..., min_length=8, max_length=255, description="User password")
    confirm_password: str = Field(..., min_length=8, max_length=255, description="Password confirmation")
    full_name: Optional[str] = Field(None, max_length=255, description="User full name")

    @field_validator('password')
    def validate_password(cls, v: str) -> str:
        """Validate password strength."""
        if not any(char.isdigit() for char in v):
            raise ValueError("Password must contain at least one number")
        if not any(char.isalpha() for char in v):
            raise ValueError("Password must contain at least one letter")
        return v

    @model_validator(mode='after')
    def validate_confirm_password(self) -> 'SignupRequest':
        """Ensure password and confirm_password match."""
        if self.password != self.confirm_password:
            raise ValueError("Password and confirm password do not match")
        return self


class LoginResponse(BaseModel):
    user: WorkOSUserResponse = Field(..., description="User")
    access_token: str = Field(..., description="Access token")
    refresh_token: str = Field(..., description="Refresh token")


class SignupResponse(BaseModel):
    """
    Response for user signup.

    Returns user information without tokens since email verification is required.
    """
    user: WorkOSUserResponse = Field(..., description="Created user")
    message: str = Field(default="User created successfully. Please verify your email to login.", description="Success message")


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., description="Refresh token")


class RefreshTokenResponse(BaseModel):
    access_token: str = Field(..., description="Access token")
    refresh_token: str = Field(..., description="Refresh token")


class PhoneCodeRequest(BaseModel):
    phone_number: str = Field(..., min_length=1, max_length=32, description="Phone number, national or E.164")


class PhoneVerifyRequest(PhoneCodeRequest):
    code: str = Field(..., min_length=4, max_length=10, description="Code received by SMS")


class PhoneVerificationResponse(BaseModel):
    success: bool
    error: Optional[str] = None

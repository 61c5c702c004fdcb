"""
Storage schemas for image upload responses
"""
from pydantic import BaseModel, Field


class ImageUploadResponse(BaseModel):
    """
    Response schema for image upload endpoint

    Attributes:
        url: Public URL of the uploaded image
        path: Object key inside the bucket (needed to delete it later)
        message: Success message
    """
    url: str = Field(..., description="Public URL of the uploaded image")
    path: str = Field(..., description="Object key of the image inside the bucket")
    message: str = Field(default="Image uploaded successfully", description="Upload status message")

    model_config = {"json_schema_extra": {"example": {
        "url": "https://clothes-images.s3.eu-west-3.amazonaws.com/user_123/1700000000000-k3j9x.jpg",
        "path": "user_123/1700000000000-k3j9x.jpg",
        "message": "Image uploaded successfully",
    }}}

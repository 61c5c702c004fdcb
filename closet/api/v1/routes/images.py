"""
Image upload routes
Handles clothing photo uploads to S3 storage
"""
import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from closet.api.v1.schemas.storage import ImageUploadResponse
from closet.core.dependencies import get_current_user
from closet.core.exceptions import StorageException
from closet.models.user import User
from closet.services.storage import (
    MAX_IMAGE_SIZE,
    SUPPORTED_CONTENT_TYPES,
    StorageService,
    get_storage_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/images",
    tags=["images"],
)


@router.post(
    "/upload",
    response_model=ImageUploadResponse,
    summary="Upload image",
    description="Upload a clothing photo. Returns the public URL to store on the clothing item.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Image uploaded successfully"},
        400: {"description": "Invalid file format or size"},
        401: {"description": "Unauthorized - authentication required"},
        502: {"description": "Storage rejected the upload"},
    }
)
async def upload_image(
    file: UploadFile = File(..., description="Image file to upload (JPEG, PNG or WebP)"),
    current_user: User = Depends(get_current_user),
    storage_service: StorageService = Depends(get_storage_service),
) -> ImageUploadResponse:
    """
    Upload an image file to S3 storage.

    **File Requirements:**
    - Format: JPEG, PNG or WebP
    - Size: Max 5MB

    The object is stored under the user's folder as <user_id>/<ms>-<random>.<ext>.

    Raises:
        HTTPException:
            - 400 if file format is invalid, file is empty or too large
            - 502 if storage rejects the upload (French message)
    """
    content_type = (file.content_type or "").lower()
    extension = SUPPORTED_CONTENT_TYPES.get(content_type)
    if extension is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Format d'image non pris en charge. Utilisez JPEG, PNG ou WebP."
        )

    file_content = await file.read()
    if len(file_content) > MAX_IMAGE_SIZE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="L'image est trop volumineuse. La taille maximale est de 5 Mo."
        )

    file_name = storage_service.generate_file_name(current_user.id, extension)
    try:
        url = await storage_service.upload_image(file_content, file_name, content_type)
    except ValueError as e:
        logger.warning(f"Image upload validation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        ) from e
    except StorageException as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message
        ) from e

    logger.info(f"Image uploaded successfully by user {current_user.id}: {file_name}")
    return ImageUploadResponse(url=url, path=file_name)


@router.delete(
    "",
    summary="Delete image",
    description="Delete one of the caller's images, by object key or public URL.",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        204: {"description": "Image deleted successfully"},
        400: {"description": "Neither path nor url given, or url from another bucket"},
        403: {"description": "Image belongs to another user"},
        502: {"description": "Storage rejected the deletion"},
    }
)
async def delete_image(
    path: str | None = Query(None, description="Object key returned by the upload"),
    url: str | None = Query(None, description="Public URL returned by the upload"),
    current_user: User = Depends(get_current_user),
    storage_service: StorageService = Depends(get_storage_service),
) -> None:
    file_name = path or (storage_service.key_from_url(url) if url else None)
    if not file_name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide the path or the URL of an image from this bucket"
        )

    # Keys are namespaced by owner
    if not file_name.startswith(f"{current_user.id}/"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own images"
        )

    try:
        await storage_service.delete_image(file_name)
    except StorageException as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message
        ) from e

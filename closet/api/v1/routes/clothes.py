"""
Clothing item routes
Handles CRUD operations for the wardrobe and AI tagging of photos
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from closet.api.v1.schemas.clothing import (
    ClothingCreate,
    ClothingResponse,
    ClothingUpdate,
    TagClothesRequest,
    TagClothesResponse,
)
from closet.core.database import get_db
from closet.core.dependencies import get_current_user
from closet.core.exceptions import (
    ResourceNotFoundException,
    StorageException,
    SuggestionServiceException,
)
from closet.models.clothing import ClothingType, Season, Style
from closet.models.user import User
from closet.services.clothes import ClothesService
from closet.services.storage import StorageService, get_storage_service
from closet.services.suggestion import SuggestionClient, get_suggestion_client

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/clothes",
    tags=["clothes"],
)


@router.get(
    "",
    response_model=list[ClothingResponse],
    summary="Get clothing items",
    description="Get the wardrobe of the authenticated user, newest first, with optional equality filters.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Clothing items retrieved successfully"},
        401: {"description": "Unauthorized - authentication required"},
        500: {"description": "Internal server error"},
    },
)
async def get_clothes(
    item_type: Optional[ClothingType] = Query(None, alias="type", description="Filter by category"),
    color: Optional[str] = Query(None, description="Filter by color"),
    season: Optional[Season] = Query(None, description="Filter by season"),
    style: Optional[Style] = Query(None, description="Filter by style"),
    brand: Optional[str] = Query(None, description="Filter by brand"),
    limit: int = Query(500, ge=1, le=1000, description="Maximum number of items to return"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[ClothingResponse]:
    """
    Get clothing items for the authenticated user.

    Without filters the whole wardrobe is returned; any provided filter
    switches to filter_clothes (all filters must match).
    """
    clothes_service = ClothesService()
    try:
        if any(value is not None for value in (item_type, color, season, style, brand)):
            items = await clothes_service.filter_clothes(
                db,
                current_user.id,
                type=item_type,
                color=color,
                season=season,
                style=style,
                brand=brand,
                limit=limit,
            )
        else:
            items = await clothes_service.get_clothes(db, current_user.id, limit=limit)
        logger.info(f"Retrieved {len(items)} clothing items for user: {current_user.id}")
        return items
    except Exception as e:
        logger.error(
            f"Unexpected error getting clothes for user {current_user.id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving clothing items",
        ) from e


@router.post(
    "/tag",
    response_model=TagClothesResponse,
    summary="Tag a clothing photo",
    description="Ask the AI tagging function to detect type, color and tags of an uploaded photo.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Photo tagged successfully"},
        401: {"description": "Unauthorized - authentication required"},
        502: {"description": "AI tagging function unavailable"},
    },
)
async def tag_clothes(
    request: TagClothesRequest,
    current_user: User = Depends(get_current_user),
    suggestion_client: SuggestionClient = Depends(get_suggestion_client),
) -> TagClothesResponse:
    try:
        return await suggestion_client.tag_clothes(request.image_url)
    except SuggestionServiceException as e:
        logger.warning(f"Tagging failed for user {current_user.id}: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message,
        ) from e


@router.get(
    "/{item_id}",
    response_model=ClothingResponse,
    summary="Get clothing item",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Clothing item retrieved successfully"},
        401: {"description": "Unauthorized - authentication required"},
        404: {"description": "Clothing item not found"},
    },
)
async def get_clothing_item(
    item_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ClothingResponse:
    item = await ClothesService().get_clothes_by_id(db, item_id, current_user.id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Clothing item not found"
        )
    return item


@router.post(
    "",
    response_model=ClothingResponse,
    summary="Create clothing item",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Clothing item created successfully"},
        400: {"description": "Invalid request data or validation error"},
        401: {"description": "Unauthorized - authentication required"},
        500: {"description": "Internal server error"},
    },
)
async def create_clothing_item(
    item_data: ClothingCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ClothingResponse:
    """
    Create a new clothing item.

    user_id is set from the authenticated user.
    """
    try:
        item = await ClothesService().add_clothing_item(db, current_user.id, item_data)
        await db.refresh(item)
        return item
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    except Exception as e:
        logger.error(
            f"Unexpected error creating clothing item for user {current_user.id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while creating the clothing item",
        ) from e


@router.patch(
    "/{item_id}",
    response_model=ClothingResponse,
    summary="Update clothing item",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Clothing item updated successfully"},
        400: {"description": "Invalid request data"},
        404: {"description": "Clothing item not found"},
    },
)
async def update_clothing_item(
    item_id: str,
    item_data: ClothingUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ClothingResponse:
    try:
        item = await ClothesService().update_clothing_item(db, item_id, current_user.id, item_data)
        await db.refresh(item)
        return item
    except ResourceNotFoundException as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Clothing item not found"
        ) from e
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e


@router.delete(
    "/{item_id}",
    summary="Delete clothing item",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        204: {"description": "Clothing item deleted successfully"},
        404: {"description": "Clothing item not found"},
    },
)
async def delete_clothing_item(
    item_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage_service: StorageService = Depends(get_storage_service),
) -> None:
    """
    Delete a clothing item and, when it lives in our bucket, its photo.

    The row deletion is committed before the photo is removed, so a failed
    commit never leaves the item pointing at a missing photo. A failed photo
    deletion is logged; the item stays deleted.
    """
    try:
        item = await ClothesService().delete_clothing_item(db, item_id, current_user.id)
    except ResourceNotFoundException as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Clothing item not found"
        ) from e

    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to commit deletion of item {item_id}: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while deleting the clothing item",
        ) from e

    key = storage_service.key_from_url(item.image_url)
    if key:
        try:
            await storage_service.delete_image(key)
        except StorageException as e:
            logger.warning(f"Orphaned image {key} after deleting item {item_id}: {e.message}")

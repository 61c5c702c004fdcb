"""
Outfit routes
Saved suggestions, the daily outfit generator and the generator mode preference
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from closet.api.v1.schemas.outfit import (
    GenerateOutfitRequest,
    GenerateOutfitResponse,
    OutfitModeResponse,
    OutfitModeUpdate,
    OutfitSuggestionResponse,
)
from closet.core.database import get_db
from closet.core.dependencies import get_current_user
from closet.core.exceptions import OutfitGenerationException, ResourceNotFoundException
from closet.models.user import User
from closet.services.outfit import OutfitService
from closet.services.outfit_generator import OutfitGenerator, get_outfit_generator

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/outfits",
    tags=["outfits"],
)


@router.get(
    "",
    response_model=list[OutfitSuggestionResponse],
    summary="Get saved outfit suggestions",
    description="Saved suggestions of the authenticated user, newest first.",
    status_code=status.HTTP_200_OK,
)
async def get_outfit_suggestions(
    limit: int = Query(50, ge=1, le=200, description="Maximum number of suggestions to return"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[OutfitSuggestionResponse]:
    return await OutfitService().get_outfit_suggestions(db, current_user.id, limit=limit)


@router.get(
    "/mode",
    response_model=OutfitModeResponse,
    summary="Get outfit generator mode",
    status_code=status.HTTP_200_OK,
)
async def get_outfit_mode(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    generator: OutfitGenerator = Depends(get_outfit_generator),
) -> OutfitModeResponse:
    return OutfitModeResponse(mode=await generator.get_mode(db, current_user.id))


@router.put(
    "/mode",
    response_model=OutfitModeResponse,
    summary="Switch outfit generator mode",
    description="Persist the preferred generator mode (heuristic or ai) on the user profile.",
    status_code=status.HTTP_200_OK,
)
async def set_outfit_mode(
    mode_update: OutfitModeUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    generator: OutfitGenerator = Depends(get_outfit_generator),
) -> OutfitModeResponse:
    mode = await generator.switch_mode(db, current_user.id, mode_update.mode)
    return OutfitModeResponse(mode=mode)


@router.post(
    "/generate",
    response_model=GenerateOutfitResponse,
    summary="Generate an outfit",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Outfit generated (outfit is null for an empty wardrobe in heuristic mode)"},
        400: {"description": "Outfit cannot be generated (e.g., empty wardrobe)"},
        401: {"description": "Unauthorized - authentication required"},
        502: {"description": "AI suggestion service failed"},
    },
)
async def generate_outfit(
    request: GenerateOutfitRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    generator: OutfitGenerator = Depends(get_outfit_generator),
) -> GenerateOutfitResponse:
    """
    Generate today's outfit.

    **Modes:**
    - heuristic: one random top, bottom and pair of shoes, preferring items
      tagged with the occasion
    - ai: remote suggestion, served from the daily cache unless force_refresh

    The request mode overrides the saved preference for this call only.
    """
    try:
        return await generator.generate_outfit(
            db,
            current_user.id,
            occasion=request.occasion,
            season=request.season,
            force_refresh=request.force_refresh,
            mode=request.mode,
        )
    except OutfitGenerationException as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY if e.upstream else status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        ) from e
    except Exception as e:
        logger.error(
            f"Unexpected error generating outfit for user {current_user.id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while generating the outfit",
        ) from e


@router.get(
    "/{suggestion_id}",
    response_model=OutfitSuggestionResponse,
    summary="Get outfit suggestion",
    description="A saved suggestion with its clothing items attached.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Suggestion retrieved successfully"},
        404: {"description": "Suggestion not found"},
    },
)
async def get_outfit_suggestion(
    suggestion_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> OutfitSuggestionResponse:
    outfit_service = OutfitService()
    try:
        suggestion = await outfit_service.get_outfit_suggestion(db, suggestion_id, current_user.id)
    except ResourceNotFoundException as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Outfit suggestion not found"
        ) from e
    return await outfit_service.get_outfit_with_clothes(db, suggestion)


@router.delete(
    "/{suggestion_id}",
    summary="Delete outfit suggestion",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        204: {"description": "Suggestion deleted successfully"},
        404: {"description": "Suggestion not found"},
    },
)
async def delete_outfit_suggestion(
    suggestion_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await OutfitService().delete_outfit_suggestion(db, suggestion_id, current_user.id)
    except ResourceNotFoundException as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Outfit suggestion not found"
        ) from e

"""
Outfit suggestion service: persistence plus AI-backed generation
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from closet.api.v1.schemas.clothing import ClothingResponse
from closet.api.v1.schemas.outfit import (
    OutfitSuggestionCreate,
    OutfitSuggestionResponse,
    SuggestionClothes,
    SuggestOutfitRequest,
)
from closet.core.exceptions import OutfitGenerationException, ResourceNotFoundException
from closet.models.clothing import ClothingItem
from closet.models.outfit import OutfitSuggestion
from closet.services.clothes import ClothesService
from closet.services.suggestion import SuggestionClient, get_suggestion_client

logger = logging.getLogger(__name__)


def serialize_wardrobe(clothes: List[ClothingItem]) -> List[SuggestionClothes]:
    """Reduce items to the minimal shape the AI function expects"""
    return [
        SuggestionClothes(
            id=item.id,
            type=item.type,
            color=item.color or "unknown",
            style=item.style or "casual",
            season=item.season or "all",
        )
        for item in clothes
    ]


class OutfitService:
    """Service for outfit suggestions"""

    def __init__(
        self,
        clothes_service: Optional[ClothesService] = None,
        suggestion_client: Optional[SuggestionClient] = None,
    ):
        self.clothes_service = clothes_service or ClothesService()
        self._suggestion_client = suggestion_client

    @property
    def suggestion_client(self) -> SuggestionClient:
        if self._suggestion_client is None:
            self._suggestion_client = get_suggestion_client()
        return self._suggestion_client

    async def get_outfit_suggestions(
        self, db: AsyncSession, user_id: str, limit: int = 50
    ) -> List[OutfitSuggestion]:
        """List saved suggestions, newest first"""
        result = await db.execute(
            select(OutfitSuggestion)
            .where(OutfitSuggestion.user_id == user_id)
            .order_by(OutfitSuggestion.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_outfit_suggestion(
        self, db: AsyncSession, suggestion_id: str, user_id: str
    ) -> OutfitSuggestion:
        result = await db.execute(
            select(OutfitSuggestion).where(
                OutfitSuggestion.id == suggestion_id,
                OutfitSuggestion.user_id == user_id,
            )
        )
        suggestion = result.scalar_one_or_none()
        if not suggestion:
            raise ResourceNotFoundException("Outfit suggestion", suggestion_id)
        return suggestion

    async def save_outfit_suggestion(
        self, db: AsyncSession, user_id: str, suggestion_data: OutfitSuggestionCreate
    ) -> OutfitSuggestion:
        suggestion = OutfitSuggestion(user_id=user_id, **suggestion_data.model_dump())
        db.add(suggestion)
        await db.flush()
        logger.info(
            "Saved outfit suggestion %s (%d items) for user %s",
            suggestion.id,
            len(suggestion.clothes_ids),
            user_id,
        )
        return suggestion

    async def delete_outfit_suggestion(
        self, db: AsyncSession, suggestion_id: str, user_id: str
    ) -> None:
        suggestion = await self.get_outfit_suggestion(db, suggestion_id, user_id)
        await db.delete(suggestion)
        await db.flush()
        logger.info("Deleted outfit suggestion %s for user %s", suggestion_id, user_id)

    async def generate_outfit_suggestion(
        self,
        db: AsyncSession,
        user_id: str,
        context: Optional[str] = None,
        season: Optional[str] = None,
        weather: Optional[str] = None,
        today: Optional[date] = None,
    ) -> OutfitSuggestionResponse:
        """
        Ask the AI function for an outfit, save it and return it hydrated.

        Raises:
            OutfitGenerationException: If the wardrobe is empty
            SuggestionServiceException: If the AI function fails
        """
        clothes = await self.clothes_service.get_clothes(db, user_id)
        if not clothes:
            raise OutfitGenerationException("No clothes found in wardrobe")

        ai_response = await self.suggestion_client.suggest_outfit(
            SuggestOutfitRequest(
                clothes=serialize_wardrobe(clothes),
                context=context,
                season=season,
                weather=weather,
            )
        )

        # Ignore ids the AI invented or that belong to someone else
        owned = {item.id: item for item in clothes}
        selected_ids = [cid for cid in ai_response.suggested_clothes_ids if cid in owned]
        if len(selected_ids) != len(ai_response.suggested_clothes_ids):
            logger.warning(
                "AI suggestion referenced %d unknown clothing ids for user %s",
                len(ai_response.suggested_clothes_ids) - len(selected_ids),
                user_id,
            )

        saved = await self.save_outfit_suggestion(
            db,
            user_id,
            OutfitSuggestionCreate(
                clothes_ids=selected_ids,
                suggestion_date=today or date.today(),
                context=context,
            ),
        )

        response = OutfitSuggestionResponse.model_validate(saved)
        response.clothes = [ClothingResponse.model_validate(owned[cid]) for cid in selected_ids]
        response.reasoning = ai_response.reasoning
        response.confidence = ai_response.confidence
        return response

    async def get_outfit_with_clothes(
        self, db: AsyncSession, suggestion: OutfitSuggestion
    ) -> OutfitSuggestionResponse:
        """Attach the clothing records; items deleted since are skipped"""
        items = await self.clothes_service.get_clothes_by_ids(
            db, list(suggestion.clothes_ids or []), suggestion.user_id
        )
        response = OutfitSuggestionResponse.model_validate(suggestion)
        response.clothes = [ClothingResponse.model_validate(item) for item in items]
        return response

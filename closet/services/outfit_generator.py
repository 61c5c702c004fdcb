"""
Outfit generator with two modes:
 - heuristic: offline random pick of one top, one bottom and one pair of shoes
 - ai: remote suggestion through OutfitService, cached for the rest of the local day

The chosen mode is stored on the user row so it survives across sessions.
"""

import json
import logging
import random
import time
from datetime import date, datetime, timedelta, timezone
from functools import lru_cache
from typing import List, Optional, Sequence, TypeVar, Union

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from closet.api.v1.schemas.clothing import ClothingResponse
from closet.api.v1.schemas.outfit import GenerateOutfitResponse, OutfitSuggestionResponse
from closet.core.exceptions import OutfitGenerationException, SuggestionServiceException
from closet.core.redis import InMemoryCache, RedisClient, get_cache
from closet.models.clothing import ClothingItem, ClothingType
from closet.models.user import GeneratorMode
from closet.services.clothes import ClothesService
from closet.services.outfit import OutfitService
from closet.services.user import UserService

logger = logging.getLogger(__name__)

CACHE_PREFIX = "outfit_cache"

# One slot per category, in display order
HEURISTIC_SLOTS = (ClothingType.TOP, ClothingType.BOTTOM, ClothingType.SHOES)

T = TypeVar("T")


def daily_cache_key(user_id: str, today: date) -> str:
    """Cache key of the AI outfit for a user and a local calendar day"""
    return f"{CACHE_PREFIX}:{user_id}:{today.isoformat()}"


def seconds_until_midnight(now: datetime) -> int:
    """Seconds left before the next local midnight (at least 1)"""
    midnight = datetime.combine(now.date() + timedelta(days=1), datetime.min.time(), tzinfo=now.tzinfo)
    return max(1, int((midnight - now).total_seconds()))


def pick_random(items: Sequence[T], rng: random.Random) -> Optional[T]:
    return rng.choice(items) if items else None


@lru_cache()
def get_outfit_generator() -> 'OutfitGenerator':
    """Get a singleton OutfitGenerator instance"""
    return OutfitGenerator()


class OutfitGenerator:
    """Chooses between the heuristic picker and the cached AI suggestion"""

    def __init__(
        self,
        outfit_service: Optional[OutfitService] = None,
        clothes_service: Optional[ClothesService] = None,
        user_service: Optional[UserService] = None,
        cache: Optional[Union[RedisClient, InMemoryCache]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.clothes_service = clothes_service or ClothesService()
        self.outfit_service = outfit_service or OutfitService(clothes_service=self.clothes_service)
        self.user_service = user_service or UserService()
        self.cache = cache if cache is not None else get_cache()
        self.rng = rng or random.Random()

    async def get_mode(self, db: AsyncSession, user_id: str) -> GeneratorMode:
        return await self.user_service.get_outfit_mode(db, user_id)

    async def switch_mode(
        self, db: AsyncSession, user_id: str, mode: GeneratorMode
    ) -> GeneratorMode:
        return await self.user_service.set_outfit_mode(db, user_id, mode)

    def heuristic_generate(
        self,
        clothes: List[ClothingItem],
        user_id: str,
        occasion: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Optional[OutfitSuggestionResponse]:
        """
        Pick at most one random item per slot (top, bottom, shoes).

        Items tagged with the occasion are preferred; when none is tagged the
        whole wardrobe is used. A slot without candidates is left out.

        Returns:
            An unsaved suggestion, or None for an empty wardrobe
        """
        if not clothes:
            return None

        candidates = clothes
        if occasion:
            tagged = [item for item in clothes if item.tags and occasion in item.tags]
            if tagged:
                candidates = tagged
            else:
                logger.debug(f"No item tagged '{occasion}', using the full wardrobe")

        chosen: List[ClothingItem] = []
        for slot in HEURISTIC_SLOTS:
            pick = pick_random([item for item in candidates if item.type == slot.value], self.rng)
            if pick is not None:
                chosen.append(pick)

        now = datetime.now(timezone.utc)
        return OutfitSuggestionResponse(
            id=f"local-{int(time.time() * 1000)}",
            user_id=user_id,
            clothes_ids=[item.id for item in chosen],
            suggestion_date=today or date.today(),
            context=json.dumps({"mode": GeneratorMode.HEURISTIC.value, "occasion": occasion}),
            created_at=now,
            clothes=[ClothingResponse.model_validate(item) for item in chosen],
        )

    async def _read_cache(self, key: str) -> Optional[OutfitSuggestionResponse]:
        try:
            cached = await self.cache.get(key)
        except Exception as e:
            logger.warning(f"Failed to read outfit cache {key}: {e}")
            return None
        if not cached:
            return None
        try:
            return OutfitSuggestionResponse.model_validate_json(cached)
        except ValidationError:
            logger.warning(f"Discarding unreadable outfit cache entry {key}")
            return None

    async def _write_cache(self, key: str, outfit: OutfitSuggestionResponse, now: datetime) -> None:
        try:
            stored = await self.cache.setex(key, seconds_until_midnight(now), outfit.model_dump_json())
        except Exception as e:
            logger.warning(f"Failed to cache outfit {key}: {e}")
            return
        if not stored:
            logger.warning(f"Outfit cache rejected entry {key}")

    async def generate_outfit(
        self,
        db: AsyncSession,
        user_id: str,
        occasion: Optional[str] = None,
        season: Optional[str] = None,
        force_refresh: bool = False,
        mode: Optional[GeneratorMode] = None,
        now: Optional[datetime] = None,
    ) -> GenerateOutfitResponse:
        """
        Generate an outfit with the requested mode (or the user's saved one).

        Args:
            occasion: Tag to favour (heuristic) / context forwarded to the AI
            season: Season hint forwarded to the AI
            force_refresh: Skip today's cached AI outfit and overwrite it
            mode: Overrides the saved preference for this call
            now: Local wall-clock time (defaults to datetime.now())

        Raises:
            OutfitGenerationException: Empty wardrobe in AI mode, or AI failure.
                The cached outfit for today is left untouched.
        """
        mode = GeneratorMode(mode) if mode else await self.get_mode(db, user_id)
        now = now or datetime.now()
        today = now.date()

        if mode == GeneratorMode.HEURISTIC:
            clothes = await self.clothes_service.get_clothes(db, user_id)
            outfit = self.heuristic_generate(clothes, user_id, occasion, today=today)
            return GenerateOutfitResponse(mode=mode, cached=False, outfit=outfit)

        cache_key = daily_cache_key(user_id, today)
        if not force_refresh:
            cached = await self._read_cache(cache_key)
            if cached is not None:
                logger.info(f"Serving cached AI outfit {cached.id} for user: {user_id}")
                return GenerateOutfitResponse(mode=mode, cached=True, outfit=cached)

        try:
            outfit = await self.outfit_service.generate_outfit_suggestion(
                db, user_id, context=occasion, season=season, today=today
            )
        except SuggestionServiceException as e:
            logger.error(f"AI outfit generation failed for user {user_id}: {e.message}")
            raise OutfitGenerationException(
                f"AI outfit generation failed: {e.message}", upstream=True
            ) from e

        await self._write_cache(cache_key, outfit, now)
        return GenerateOutfitResponse(mode=mode, cached=False, outfit=outfit)

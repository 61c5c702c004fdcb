"""
Clothes service for managing wardrobe items
Reference: https://docs.sqlalchemy.org/en/21/orm/queryguide/
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from closet.api.v1.schemas.clothing import ClothingCreate, ClothingUpdate
from closet.core.exceptions import ResourceNotFoundException
from closet.models.clothing import ClothingItem, ClothingType, Season, Style

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 500


def _plain(value):
    """Store enum members by value"""
    return value.value if hasattr(value, "value") else value


class ClothesService:
    """Service for managing clothing items"""

    async def get_clothes(
        self, db: AsyncSession, user_id: str, limit: int = DEFAULT_LIMIT
    ) -> List[ClothingItem]:
        """
        Get all clothing items of a user, newest first.

        Args:
            db: Database session
            user_id: Owner of the items
            limit: Maximum number of items to return

        Returns:
            List of clothing items
        """
        result = await db.execute(
            select(ClothingItem)
            .where(ClothingItem.user_id == user_id)
            .order_by(ClothingItem.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_clothes_by_id(
        self, db: AsyncSession, item_id: str, user_id: Optional[str] = None
    ) -> Optional[ClothingItem]:
        """
        Get a clothing item by ID.

        When user_id is given, items of other users are treated as missing.
        """
        query = select(ClothingItem).where(ClothingItem.id == item_id)
        if user_id is not None:
            query = query.where(ClothingItem.user_id == user_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_clothes_by_ids(
        self, db: AsyncSession, item_ids: List[str], user_id: str
    ) -> List[ClothingItem]:
        """Fetch several items at once, preserving the order of item_ids and skipping missing ones"""
        if not item_ids:
            return []
        result = await db.execute(
            select(ClothingItem).where(
                ClothingItem.user_id == user_id, ClothingItem.id.in_(item_ids)
            )
        )
        by_id = {item.id: item for item in result.scalars().all()}
        return [by_id[item_id] for item_id in item_ids if item_id in by_id]

    async def add_clothing_item(
        self, db: AsyncSession, user_id: str, item_data: ClothingCreate
    ) -> ClothingItem:
        """
        Create a clothing item for a user.

        Raises:
            ValueError: If the insert violates a database constraint (e.g. unknown user)
        """
        payload = {key: _plain(value) for key, value in item_data.model_dump().items()}
        item = ClothingItem(user_id=user_id, **payload)
        db.add(item)

        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Failed to add clothing item due to database error", exc_info=True)
            raise ValueError(
                "Failed to add clothing item due to database constraints"
            ) from e

        logger.info(f"Added clothing item {item.id} ({item.type}) for user: {user_id}")
        return item

    async def update_clothing_item(
        self,
        db: AsyncSession,
        item_id: str,
        user_id: str,
        item_data: ClothingUpdate,
    ) -> ClothingItem:
        """
        Partially update a clothing item.

        Raises:
            ResourceNotFoundException: If the item does not exist for this user
        """
        item = await self.get_clothes_by_id(db, item_id, user_id)
        if not item:
            logger.warning(f"Update requested for missing clothing item {item_id} (user: {user_id})")
            raise ResourceNotFoundException("Clothing item", item_id)

        for field, value in item_data.model_dump(exclude_unset=True).items():
            setattr(item, field, _plain(value))

        # Set explicitly, server-side onupdate values are not loaded back
        item.updated_at = datetime.now(timezone.utc)

        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Failed to update clothing item due to database error", exc_info=True)
            raise ValueError(
                "Failed to update clothing item due to database constraints"
            ) from e

        logger.info(f"Updated clothing item {item_id} for user: {user_id}")
        return item

    async def delete_clothing_item(
        self, db: AsyncSession, item_id: str, user_id: str
    ) -> ClothingItem:
        """
        Delete a clothing item.

        Returns:
            The deleted item (so callers can clean up its image)

        Raises:
            ResourceNotFoundException: If the item does not exist for this user
        """
        item = await self.get_clothes_by_id(db, item_id, user_id)
        if not item:
            logger.warning(f"Delete requested for missing clothing item {item_id} (user: {user_id})")
            raise ResourceNotFoundException("Clothing item", item_id)

        await db.delete(item)
        await db.flush()
        logger.info(f"Deleted clothing item {item_id} for user: {user_id}")
        return item

    async def filter_clothes(
        self,
        db: AsyncSession,
        user_id: str,
        type: Optional[ClothingType] = None,
        color: Optional[str] = None,
        season: Optional[Season] = None,
        style: Optional[Style] = None,
        brand: Optional[str] = None,
        limit: int = DEFAULT_LIMIT,
    ) -> List[ClothingItem]:
        """
        Get clothing items matching every provided equality filter, newest first.
        """
        query = select(ClothingItem).where(ClothingItem.user_id == user_id)

        if type:
            query = query.where(ClothingItem.type == _plain(type))
        if color:
            query = query.where(ClothingItem.color == color)
        if season:
            query = query.where(ClothingItem.season == _plain(season))
        if style:
            query = query.where(ClothingItem.style == _plain(style))
        if brand:
            query = query.where(ClothingItem.brand == brand)

        query = query.order_by(ClothingItem.created_at.desc()).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

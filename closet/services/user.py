import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from closet.core.exceptions import ResourceNotFoundException
from closet.models.user import GeneratorMode, User

logger = logging.getLogger(__name__)


class UserService:
    """Local user rows mirroring the identity provider"""

    async def get_user(self, db: AsyncSession, user_id: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def ensure_user_exists(
        self,
        db: AsyncSession,
        user_id: str,
        email: str,
        full_name: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> User:
        """
        Return the users row for user_id, creating it on first sight.

        Clothes, events and suggestions reference users.id, so the row must
        exist before anything else is written for that user.
        """
        existing = await self.get_user(db, user_id)
        if existing:
            return existing

        logger.info(f"User {user_id} not found in users table, creating")
        user = User(
            id=user_id,
            email=email,
            full_name=full_name,
            avatar_url=avatar_url,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            # Created concurrently by another request
            await db.rollback()
            existing = await self.get_user(db, user_id)
            if existing:
                return existing
            logger.error(f"Failed to create users row for {user_id}", exc_info=True)
            raise
        return user

    async def get_outfit_mode(self, db: AsyncSession, user_id: str) -> GeneratorMode:
        user = await self.get_user(db, user_id)
        if not user:
            raise ResourceNotFoundException("User", user_id)
        try:
            return GeneratorMode(user.outfit_generator_mode)
        except ValueError:
            logger.warning(f"Unknown generator mode '{user.outfit_generator_mode}' for user {user_id}")
            return GeneratorMode.HEURISTIC

    async def set_outfit_mode(
        self, db: AsyncSession, user_id: str, mode: GeneratorMode
    ) -> GeneratorMode:
        user = await self.get_user(db, user_id)
        if not user:
            raise ResourceNotFoundException("User", user_id)
        user.outfit_generator_mode = GeneratorMode(mode).value
        await db.flush()
        logger.info(f"Outfit generator mode set to {user.outfit_generator_mode} for user: {user_id}")
        return GeneratorMode(user.outfit_generator_mode)

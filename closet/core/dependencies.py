"""
Authentication dependencies for protecting endpoints
Reference: https://fastapi.tiangolo.com/tutorial/dependencies/
"""
import logging
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from workos.exceptions import NotFoundException

from closet.core.database import get_db
from closet.models.user import User
from closet.services.auth import AuthService, full_name_of
from closet.services.user import UserService

logger = logging.getLogger(__name__)

# Reference: https://fastapi.tiangolo.com/reference/security/#fastapi.security.HTTPBearer
security = HTTPBearer()


@lru_cache()
def get_auth_service() -> AuthService:
    """
    Get a singleton AuthService instance.

    Keeps the JWKS cache at application level rather than request level.
    """
    return AuthService()


async def get_access_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    return credentials.credentials


async def get_current_user(
    access_token: str = Depends(get_access_token),
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Dependency returning the local users row of the authenticated caller.

    Verifies the bearer token against the WorkOS JWKS. The row is created
    from the WorkOS profile on first sight, so every later write can
    reference users.id.

    Raises:
        HTTPException: 401 if the token is invalid or the user is unknown to WorkOS
    """
    try:
        session_data = await auth_service.verify_session(access_token)
    except ValueError as e:
        msg = str(e)
        description = "The access token expired" if "expired" in msg.lower() else (msg or "The access token is invalid")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=msg,
            headers={
                "WWW-Authenticate": f'Bearer realm="api", error="invalid_token", error_description="{description}"'
            },
        ) from e

    user_id = session_data.get("user_id")
    if not user_id:
        logger.error("Token missing user_id (sub claim)")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing user information",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_service = UserService()
    user = await user_service.get_user(db, user_id)
    if user:
        return user

    try:
        profile = await auth_service.get_user_profile(user_id)
    except NotFoundException as e:
        logger.error(f"User {user_id} not found in WorkOS after token verification")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    return await user_service.ensure_user_exists(
        db,
        user_id,
        profile.email,
        full_name=full_name_of(profile),
        avatar_url=profile.profile_picture_url,
    )

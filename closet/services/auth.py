import asyncio
import logging
import time
from typing import Any, Optional

import httpx
from authlib.jose import JsonWebKey, jwt
from authlib.jose.errors import (
    BadSignatureError,
    DecodeError,
    ExpiredTokenError,
    InvalidClaimError,
)
from sqlalchemy.ext.asyncio import AsyncSession
from workos import WorkOSClient

from closet.api.v1.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
    SignupRequest,
    SignupResponse,
)
from closet.api.v1.schemas.user import WorkOSUserResponse
from closet.core.config import settings
from closet.services.user import UserService

logger = logging.getLogger(__name__)

JWKS_CACHE_TTL = 3600  # 1 hour


def full_name_of(workos_user: Any) -> Optional[str]:
    parts = [workos_user.first_name, workos_user.last_name]
    name = " ".join(part for part in parts if part)
    return name or None


def _to_user_response(workos_user: Any) -> WorkOSUserResponse:
    return WorkOSUserResponse(
        object=workos_user.object,
        id=workos_user.id,
        email=workos_user.email,
        first_name=workos_user.first_name,
        last_name=workos_user.last_name,
        email_verified=workos_user.email_verified,
        profile_picture_url=workos_user.profile_picture_url,
        created_at=workos_user.created_at,
        updated_at=workos_user.updated_at,
    )


class AuthService:
    def __init__(
        self,
        workos_client: Any = None,
        user_service: Optional[UserService] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.workos_client = workos_client or WorkOSClient(
            api_key=settings.WORKOS_API_KEY, client_id=settings.WORKOS_CLIENT_ID
        )
        self.user_service = user_service or UserService()
        self._transport = transport
        self._jwks_cache: Optional[dict] = None
        self._jwks_cache_expiry: Optional[float] = None

    async def _get_jwks(self) -> dict:
        current_time = time.time()
        if self._jwks_cache and self._jwks_cache_expiry and current_time <= self._jwks_cache_expiry:
            return self._jwks_cache

        jwks_url = await asyncio.to_thread(
            self.workos_client.user_management.get_jwks_url
        )
        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            self._jwks_cache = response.json()
            self._jwks_cache_expiry = current_time + JWKS_CACHE_TTL
        logger.debug(
            f"JWKS fetched and cached. Keys: {len(self._jwks_cache.get('keys', []))}"
        )
        return self._jwks_cache

    async def _decode_and_validate_token(self, access_token: str) -> dict:
        """
        Decode and validate a JWT against the WorkOS JWKS.

        Raises:
            authlib.jose.errors.JoseError: If the token is malformed, expired or badly signed
        """
        jwk_set = JsonWebKey.import_key_set(await self._get_jwks())
        claims = jwt.decode(
            access_token,
            jwk_set,
            claims_options={"exp": {"essential": True}, "iat": {"essential": True}},
        )
        claims.validate()
        return claims

    async def verify_session(self, access_token: str) -> dict:
        """
        Verify a WorkOS access token with full signature verification.

        Reference: https://workos.com/docs/reference/authkit/session-tokens/access-token

        Returns:
            Dict with user_id (sub), session_id (sid), exp and iat

        Raises:
            ValueError: If token is invalid, expired, or signature verification fails
        """
        try:
            claims = await self._decode_and_validate_token(access_token)
        except ExpiredTokenError:
            logger.warning("Token has expired")
            raise ValueError("Token has expired")
        except BadSignatureError:
            logger.warning("Invalid token signature")
            raise ValueError("Invalid token signature - token may have been tampered with")
        except DecodeError as e:
            logger.warning(f"Failed to decode token: {e}")
            raise ValueError(f"Invalid token format: {e}")
        except InvalidClaimError as e:
            logger.warning(f"Invalid token claim: {e}")
            raise ValueError(f"Invalid token claim: {e}")
        except Exception as e:
            logger.error(f"Error verifying session: {type(e).__name__}: {e}", exc_info=True)
            raise ValueError(f"Token verification failed: {str(e)}") from e

        logger.debug(f"Token verified successfully. User: {claims.get('sub')}")
        return {
            "user_id": claims.get("sub"),
            "session_id": claims.get("sid"),
            "exp": claims.get("exp"),
            "iat": claims.get("iat"),
        }

    async def get_user_profile(self, user_id: str) -> WorkOSUserResponse:
        workos_user = await asyncio.to_thread(
            self.workos_client.user_management.get_user, user_id=user_id
        )
        return _to_user_response(workos_user)

    async def signup(self, db: AsyncSession, signup_request: SignupRequest) -> SignupResponse:
        """
        Create the account in WorkOS, then its local users row.

        If the local insert fails the WorkOS user is deleted again so the
        email is not left locked by an orphaned account.

        Raises:
            workos.exceptions.BadRequestException: If WorkOS rejects the user (e.g. email taken)
            sqlalchemy.exc.IntegrityError: If the local row cannot be created
        """
        payload = {"email": signup_request.email, "password": signup_request.password}
        if signup_request.full_name:
            first, _, last = signup_request.full_name.strip().partition(" ")
            payload["first_name"] = first
            if last:
                payload["last_name"] = last

        workos_user = await asyncio.to_thread(
            self.workos_client.user_management.create_user, **payload
        )

        try:
            await self.user_service.ensure_user_exists(
                db,
                workos_user.id,
                workos_user.email,
                full_name=signup_request.full_name or full_name_of(workos_user),
                avatar_url=workos_user.profile_picture_url,
            )
        except Exception as db_error:
            logger.warning(
                f"Database insert failed after WorkOS user creation for {signup_request.email}. "
                f"Cleaning up WorkOS user {workos_user.id}. Error: {db_error}"
            )
            try:
                await asyncio.to_thread(
                    self.workos_client.user_management.delete_user,
                    user_id=workos_user.id,
                )
            except Exception as cleanup_error:
                logger.error(
                    f"Failed to clean up WorkOS user {workos_user.id}: {cleanup_error}",
                    exc_info=True,
                )
            raise

        logger.info(f"User created: {workos_user.id}")
        return SignupResponse(user=_to_user_response(workos_user))

    async def login(self, db: AsyncSession, login_request: LoginRequest) -> LoginResponse:
        response = await asyncio.to_thread(
            self.workos_client.user_management.authenticate_with_password,
            email=login_request.email,
            password=login_request.password,
        )
        await self.user_service.ensure_user_exists(
            db,
            response.user.id,
            response.user.email,
            full_name=full_name_of(response.user),
            avatar_url=response.user.profile_picture_url,
        )
        return LoginResponse(
            user=_to_user_response(response.user),
            access_token=response.access_token,
            refresh_token=response.refresh_token,
        )

    async def refresh_token(self, refresh_token_request: RefreshTokenRequest) -> RefreshTokenResponse:
        response = await asyncio.to_thread(
            self.workos_client.user_management.authenticate_with_refresh_token,
            refresh_token=refresh_token_request.refresh_token,
        )
        return RefreshTokenResponse(
            access_token=response.access_token, refresh_token=response.refresh_token
        )

    async def logout(self, access_token: str) -> bool:
        """
        Revoke the WorkOS session carried by the access token.

        Raises:
            ValueError: If the token is invalid or has no session id
        """
        session = await self.verify_session(access_token)
        session_id = session.get("session_id")
        if not session_id:
            logger.warning("Token missing session_id (sid claim)")
            raise ValueError("Invalid token: missing session information")

        try:
            await asyncio.to_thread(
                self.workos_client.user_management.revoke_session, session_id=session_id
            )
        except Exception as e:
            logger.error(f"Error during logout: {type(e).__name__}: {e}", exc_info=True)
            raise ValueError(f"Logout failed: {e}") from e

        logger.info(f"Session revoked successfully: {session_id}")
        return True

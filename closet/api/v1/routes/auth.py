"""
Authentication routes
WorkOS-backed signup/login/refresh/logout and Twilio phone verification
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from workos.exceptions import (
    AuthenticationException,
    BadRequestException,
    EmailVerificationRequiredException,
)

from closet.api.v1.schemas.auth import (
    LoginRequest,
    LoginResponse,
    PhoneCodeRequest,
    PhoneVerificationResponse,
    PhoneVerifyRequest,
    RefreshTokenRequest,
    RefreshTokenResponse,
    SignupRequest,
    SignupResponse,
)
from closet.core.database import get_db
from closet.core.dependencies import get_access_token, get_auth_service
from closet.services.auth import AuthService
from closet.services.twilio import TwilioService, get_twilio_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)

INVALID_PHONE_ERROR = "Numéro de téléphone invalide."


@router.post(
    "/signup",
    response_model=SignupResponse,
    summary="Sign up a new user",
    description="Create a new user account. Email verification required before login.",
    status_code=status.HTTP_201_CREATED
)
async def signup(
    signup_request: SignupRequest,
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> SignupResponse:
    """
    Sign up a new user.

    Creates the account in WorkOS and the matching users row.

    Raises:
        HTTPException: 409 if email already exists, 400 for validation errors
    """
    try:
        return await auth_service.signup(db, signup_request)
    except BadRequestException as e:
        for error in getattr(e, 'errors', None) or []:
            error_code = error.get('code', '')
            if error_code == 'email_not_available':
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Email address is already registered. Please use a different email or try logging in."
                ) from e
            if error_code == 'invalid_email':
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Invalid email address format"
                ) from e

        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to create account: {getattr(e, 'message', None) or str(e)}"
        ) from e
    except IntegrityError as e:
        logger.warning(f"Duplicate user during signup: {signup_request.email}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email address already exists. Please try logging in."
        ) from e
    except Exception as e:
        logger.error(f"Unexpected error during signup: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while creating your account"
        ) from e


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Sign in a user with email and password",
    status_code=status.HTTP_200_OK
)
async def login(
    login_request: LoginRequest,
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    try:
        return await auth_service.login(db, login_request)
    except EmailVerificationRequiredException as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Email verification required before login"
        ) from e
    except (AuthenticationException, BadRequestException) as e:
        logger.warning(f"Failed login attempt for {login_request.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        ) from e
    except Exception as e:
        logger.error(f"Unexpected error during login: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while signing in"
        ) from e


@router.post(
    "/refresh",
    response_model=RefreshTokenResponse,
    summary="Refresh an access token",
    status_code=status.HTTP_200_OK
)
async def refresh_token(
    refresh_token_request: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> RefreshTokenResponse:
    try:
        return await auth_service.refresh_token(refresh_token_request)
    except (AuthenticationException, BadRequestException) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token"
        ) from e
    except Exception as e:
        logger.error(f"Unexpected error refreshing token: {type(e).__name__}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while refreshing the token"
        ) from e


@router.post(
    "/logout",
    summary="Log out the current session",
    status_code=status.HTTP_200_OK
)
async def logout(
    access_token: str = Depends(get_access_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict:
    """Revoke the WorkOS session carried by the bearer token."""
    try:
        await auth_service.logout(access_token)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
    return {"message": "Logged out successfully"}


@router.post(
    "/phone/send-code",
    response_model=PhoneVerificationResponse,
    summary="Send an SMS verification code",
    status_code=status.HTTP_200_OK
)
async def send_phone_code(
    request: PhoneCodeRequest,
    twilio_service: TwilioService = Depends(get_twilio_service),
) -> PhoneVerificationResponse:
    """
    Send a verification code by SMS.

    The number may be national (06...) or E.164; failures come back as
    success=false with a French message rather than an HTTP error.
    """
    if not twilio_service.validate_phone_number(request.phone_number):
        return PhoneVerificationResponse(success=False, error=INVALID_PHONE_ERROR)
    phone_number = twilio_service.format_phone_number(request.phone_number)
    return await twilio_service.send_verification_code(phone_number)


@router.post(
    "/phone/verify",
    response_model=PhoneVerificationResponse,
    summary="Check an SMS verification code",
    status_code=status.HTTP_200_OK
)
async def verify_phone_code(
    request: PhoneVerifyRequest,
    twilio_service: TwilioService = Depends(get_twilio_service),
) -> PhoneVerificationResponse:
    if not twilio_service.validate_phone_number(request.phone_number):
        return PhoneVerificationResponse(success=False, error=INVALID_PHONE_ERROR)
    phone_number = twilio_service.format_phone_number(request.phone_number)
    return await twilio_service.verify_code(phone_number, request.code)

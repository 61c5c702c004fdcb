"""
User routes
The authenticated caller's local profile
"""
from fastapi import APIRouter, Depends, status

from closet.api.v1.schemas.user import UserResponse
from closet.core.dependencies import get_current_user
from closet.models.user import User

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
    description="Local record of the authenticated user, including the saved outfit generator mode.",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "User retrieved successfully"},
        401: {"description": "Unauthorized - authentication required"},
    },
)
async def get_me(
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    return current_user

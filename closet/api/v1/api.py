"""
API v1 router aggregation
Combines all v1 route handlers into a single router
Reference: https://fastapi.tiangolo.com/tutorial/bigger-applications/
"""
from fastapi import APIRouter

from closet.api.v1.routes import auth, clothes, events, health, images, outfits, user, weather
from closet.core.config import settings


# All v1 routes are prefixed with /api/v1
api_router = APIRouter(prefix=settings.API_V1_PREFIX)

api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(clothes.router)
api_router.include_router(events.router)
api_router.include_router(outfits.router)
api_router.include_router(images.router)
api_router.include_router(user.router)
api_router.include_router(weather.router)

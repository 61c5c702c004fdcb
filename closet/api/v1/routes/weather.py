"""
Weather routes
Current conditions and a week forecast for the home screen
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from closet.api.v1.schemas.weather import Coordinates, WeatherData
from closet.core.dependencies import get_current_user
from closet.models.user import User
from closet.services.weather import WeatherService, get_weather_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/weather",
    tags=["weather"],
)


@router.get(
    "",
    response_model=WeatherData,
    summary="Get weather",
    description=(
        "Location name, current conditions and a daily forecast. "
        "Falls back to synthetic data when the weather provider is unavailable."
    ),
    status_code=status.HTTP_200_OK,
)
async def get_weather(
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Latitude"),
    lon: Optional[float] = Query(None, ge=-180, le=180, description="Longitude"),
    location: Optional[str] = Query(None, max_length=200, description="Saved location name to display"),
    current_user: User = Depends(get_current_user),
    weather_service: WeatherService = Depends(get_weather_service),
) -> WeatherData:
    """
    Weather for the given coordinates.

    Both lat and lon are needed; otherwise Paris is used.
    """
    coords = None
    if lat is not None and lon is not None:
        coords = Coordinates(latitude=lat, longitude=lon)
    return await weather_service.get_complete_weather_data(coords, location)

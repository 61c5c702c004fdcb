"""
Weather service backed by OpenWeatherMap, with synthetic fallback data
Reference: https://openweathermap.org/current, https://openweathermap.org/forecast5
"""
import asyncio
import logging
import random
from datetime import date, datetime, timedelta
from functools import lru_cache
from typing import Dict, List, Optional

import httpx
from pydantic import BaseModel, ValidationError

from closet.api.v1.schemas.weather import Coordinates, CurrentWeather, ForecastDay, WeatherData
from closet.core.config import is_valid_weather_api_key, settings

logger = logging.getLogger(__name__)

DEFAULT_COORDINATES = Coordinates(latitude=48.8566, longitude=2.3522)  # Paris
DEFAULT_LOCATION = "Paris"
UNKNOWN_LOCATION = "Localisation inconnue"
FORECAST_DAYS = 7

FALLBACK_CURRENT = CurrentWeather(temperature=22, condition="Ensoleillé", icon="☀️")

# Index matches date.weekday() (Monday == 0)
DAY_NAMES = ["Lun", "Mar", "Mer", "Jeu", "Ven", "Sam", "Dim"]

WEATHER_ICONS = {
    "01d": "☀️", "01n": "🌙",
    "02d": "⛅", "02n": "☁️",
    "03d": "☁️", "03n": "☁️",
    "04d": "☁️", "04n": "☁️",
    "09d": "🌧️", "09n": "🌧️",
    "10d": "🌦️", "10n": "🌧️",
    "11d": "⛈️", "11n": "⛈️",
    "13d": "❄️", "13n": "❄️",
    "50d": "🌫️", "50n": "🌫️",
}


class _Condition(BaseModel):
    description: str = ""
    icon: str = ""


class _Main(BaseModel):
    temp: float


class _CurrentPayload(BaseModel):
    name: Optional[str] = None
    main: _Main
    weather: List[_Condition] = []


class _ForecastEntry(BaseModel):
    dt: int
    main: _Main
    weather: List[_Condition] = []


class _ForecastPayload(BaseModel):
    list: List[_ForecastEntry]


def get_weather_icon(icon_code: str) -> str:
    return WEATHER_ICONS.get(icon_code, "☀️")


def get_day_name(day: date) -> str:
    return DAY_NAMES[day.weekday()]


@lru_cache()
def get_weather_service() -> 'WeatherService':
    return WeatherService()


class WeatherService:
    """
    Current conditions and a daily forecast for a pair of coordinates.

    Never raises on upstream problems: an unconfigured key or any failure
    yields synthetic data so the client always has something to render.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        rng: Optional[random.Random] = None,
    ):
        self.api_key = api_key if api_key is not None else (settings.OPENWEATHER_API_KEY or "")
        self.base_url = (base_url or settings.OPENWEATHER_BASE_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self.rng = rng or random.Random()

    def is_valid_api_key(self) -> bool:
        return is_valid_weather_api_key(self.api_key)

    async def _fetch(self, endpoint: str, coords: Coordinates) -> dict:
        params = {
            "lat": coords.latitude,
            "lon": coords.longitude,
            "appid": self.api_key,
            "units": "metric",
            "lang": "fr",
        }
        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            response = await client.get(f"{self.base_url}/{endpoint}", params=params)
            response.raise_for_status()
            return response.json()

    def get_fallback_forecast(self, today: Optional[date] = None) -> List[ForecastDay]:
        today = today or date.today()
        forecast = []
        for offset in range(FORECAST_DAYS):
            day = today + timedelta(days=offset)
            forecast.append(
                ForecastDay(
                    day=get_day_name(day),
                    date=str(day.day),
                    high=round(20 + self.rng.random() * 15),
                    low=round(10 + self.rng.random() * 10),
                    condition="Ensoleillé",
                    icon="☀️",
                )
            )
        return forecast

    async def get_location_name(self, coords: Coordinates) -> str:
        if not self.is_valid_api_key():
            logger.warning("OpenWeatherMap API key not configured, using fallback location")
            return DEFAULT_LOCATION

        try:
            payload = _CurrentPayload.model_validate(await self._fetch("weather", coords))
            return payload.name or UNKNOWN_LOCATION
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            logger.error(f"Error getting location name: {e}")
            return DEFAULT_LOCATION

    async def get_current_weather(self, coords: Coordinates) -> CurrentWeather:
        if not self.is_valid_api_key():
            logger.warning("OpenWeatherMap API key not configured, using fallback weather data")
            return FALLBACK_CURRENT.model_copy()

        try:
            payload = _CurrentPayload.model_validate(await self._fetch("weather", coords))
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            logger.error(f"Error fetching current weather: {e}")
            return FALLBACK_CURRENT.model_copy()

        condition = payload.weather[0] if payload.weather else _Condition()
        return CurrentWeather(
            temperature=round(payload.main.temp),
            condition=condition.description,
            icon=get_weather_icon(condition.icon),
        )

    def process_forecast_data(self, entries: List[_ForecastEntry]) -> List[ForecastDay]:
        """
        Group 3-hourly entries by calendar day.

        Each day keeps its rounded high/low and the first condition seen.
        """
        daily: Dict[date, dict] = {}
        for entry in entries:
            day = datetime.fromtimestamp(entry.dt).date()
            bucket = daily.setdefault(day, {"temps": [], "conditions": []})
            bucket["temps"].append(entry.main.temp)
            if entry.weather:
                bucket["conditions"].append(entry.weather[0])

        forecast = []
        for day, data in daily.items():
            first = data["conditions"][0] if data["conditions"] else _Condition()
            forecast.append(
                ForecastDay(
                    day=get_day_name(day),
                    date=str(day.day),
                    high=round(max(data["temps"])),
                    low=round(min(data["temps"])),
                    condition=first.description,
                    icon=get_weather_icon(first.icon),
                )
            )
        return forecast

    async def get_weather_forecast(self, coords: Coordinates) -> List[ForecastDay]:
        if not self.is_valid_api_key():
            logger.warning("OpenWeatherMap API key not configured, using fallback forecast data")
            return self.get_fallback_forecast()

        try:
            payload = _ForecastPayload.model_validate(await self._fetch("forecast", coords))
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            logger.error(f"Error fetching weather forecast: {e}")
            return self.get_fallback_forecast()

        return self.process_forecast_data(payload.list)[:FORECAST_DAYS]

    async def get_complete_weather_data(
        self,
        coords: Optional[Coordinates] = None,
        user_location: Optional[str] = None,
    ) -> WeatherData:
        """
        Location name, current conditions and forecast in one payload.

        A saved user location is used as the display name as-is; coordinates
        default to Paris when the client could not provide any.
        """
        coords = coords or DEFAULT_COORDINATES

        if user_location:
            location_name = user_location
            current, forecast = await asyncio.gather(
                self.get_current_weather(coords),
                self.get_weather_forecast(coords),
            )
        else:
            location_name, current, forecast = await asyncio.gather(
                self.get_location_name(coords),
                self.get_current_weather(coords),
                self.get_weather_forecast(coords),
            )

        return WeatherData(location=location_name, current=current, forecast=forecast)

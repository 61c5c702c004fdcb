"""
Weather schemas returned to the client
"""
from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class CurrentWeather(BaseModel):
    temperature: int = Field(..., description="Rounded temperature in °C")
    condition: str = Field(..., description="Localized description (French)")
    icon: str = Field(..., description="Emoji icon")


class ForecastDay(BaseModel):
    day: str = Field(..., description="Short French day name (Lun, Mar, ...)")
    date: str = Field(..., description="Day of month")
    high: int
    low: int
    condition: str
    icon: str


class WeatherData(BaseModel):
    location: str
    current: CurrentWeather
    forecast: list[ForecastDay]

import random
from datetime import date, datetime

import httpx
import pytest

from closet.api.v1.schemas.weather import Coordinates
from closet.services.weather import (
    DEFAULT_LOCATION,
    WeatherService,
    get_day_name,
    get_weather_icon,
)

API_KEY = "0123456789abcdef"
LYON = Coordinates(latitude=45.76, longitude=4.84)


def _ts(year, month, day, hour) -> int:
    return int(datetime(year, month, day, hour).timestamp())


CURRENT_PAYLOAD = {
    "name": "Lyon",
    "main": {"temp": 17.6},
    "weather": [{"description": "peu nuageux", "icon": "02d"}],
}

FORECAST_PAYLOAD = {
    "list": [
        {"dt": _ts(2026, 3, 16, 9), "main": {"temp": 11.2}, "weather": [{"description": "pluie légère", "icon": "10d"}]},
        {"dt": _ts(2026, 3, 16, 15), "main": {"temp": 18.7}, "weather": [{"description": "ciel dégagé", "icon": "01d"}]},
        {"dt": _ts(2026, 3, 17, 12), "main": {"temp": 14.4}, "weather": [{"description": "couvert", "icon": "04d"}]},
    ]
}


def make_service(handler, api_key=API_KEY) -> tuple[WeatherService, list[httpx.Request]]:
    requests = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    service = WeatherService(
        api_key=api_key,
        base_url="https://weather.test/data/2.5",
        transport=httpx.MockTransport(recording_handler),
        rng=random.Random(1),
    )
    return service, requests


def ok_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/forecast"):
        return httpx.Response(200, json=FORECAST_PAYLOAD)
    return httpx.Response(200, json=CURRENT_PAYLOAD)


@pytest.mark.parametrize("api_key", ["", "short", "your_openweather_api_key"])
async def test_invalid_key_uses_fallback_without_calling_api(api_key):
    service, requests = make_service(ok_handler, api_key=api_key)

    data = await service.get_complete_weather_data(LYON)

    assert requests == []
    assert data.location == DEFAULT_LOCATION
    assert data.current.temperature == 22
    assert data.current.condition == "Ensoleillé"
    assert data.current.icon == "☀️"
    assert len(data.forecast) == 7
    assert all(20 <= day.high <= 35 and 10 <= day.low <= 20 for day in data.forecast)


async def test_current_weather_is_rounded_and_localized():
    service, requests = make_service(ok_handler)

    current = await service.get_current_weather(LYON)

    assert current.temperature == 18
    assert current.condition == "peu nuageux"
    assert current.icon == "⛅"
    params = requests[0].url.params
    assert params["units"] == "metric"
    assert params["lang"] == "fr"
    assert params["appid"] == API_KEY


async def test_forecast_is_grouped_by_day():
    service, _ = make_service(ok_handler)

    forecast = await service.get_weather_forecast(LYON)

    assert len(forecast) == 2
    monday, tuesday = forecast
    assert (monday.day, monday.date) == ("Lun", "16")
    assert (monday.high, monday.low) == (19, 11)
    assert monday.condition == "pluie légère"
    assert monday.icon == "🌦️"
    assert (tuesday.day, tuesday.high, tuesday.low) == ("Mar", 14, 14)


async def test_forecast_is_capped_at_seven_days():
    entries = [
        {"dt": _ts(2026, 3, day, 12), "main": {"temp": 10}, "weather": [{"description": "x", "icon": "01d"}]}
        for day in range(1, 11)
    ]
    service, _ = make_service(lambda request: httpx.Response(200, json={"list": entries}))

    assert len(await service.get_weather_forecast(LYON)) == 7


async def test_http_error_falls_back():
    service, _ = make_service(lambda request: httpx.Response(401, json={"message": "Invalid API key"}))

    current = await service.get_current_weather(LYON)
    location = await service.get_location_name(LYON)

    assert current.temperature == 22
    assert location == DEFAULT_LOCATION


async def test_malformed_payload_falls_back():
    service, _ = make_service(lambda request: httpx.Response(200, json={"unexpected": True}))

    forecast = await service.get_weather_forecast(LYON)
    current = await service.get_current_weather(LYON)

    assert len(forecast) == 7
    assert current.condition == "Ensoleillé"


async def test_saved_location_name_skips_reverse_lookup():
    service, requests = make_service(ok_handler)

    data = await service.get_complete_weather_data(LYON, user_location="Maison")

    assert data.location == "Maison"
    assert len(requests) == 2


async def test_defaults_to_paris_coordinates():
    service, requests = make_service(ok_handler)

    data = await service.get_complete_weather_data()

    assert data.location == "Lyon"
    assert {request.url.params["lat"] for request in requests} == {"48.8566"}


def test_icon_and_day_helpers():
    assert get_weather_icon("13n") == "❄️"
    assert get_weather_icon("unknown") == "☀️"
    assert get_day_name(date(2026, 3, 15)) == "Dim"

import pytest

from closet.core.config import is_valid_weather_api_key, settings


@pytest.mark.parametrize("api_key", [None, "", "short", "your_openweather_api_key"])
def test_weather_integration_reports_fallback_for_unusable_keys(api_key):
    configured = settings.model_copy(update={"OPENWEATHER_API_KEY": api_key})

    assert is_valid_weather_api_key(api_key) is False
    assert configured.integrations()["weather"] == "fallback"


def test_weather_integration_reports_live_for_real_key():
    configured = settings.model_copy(update={"OPENWEATHER_API_KEY": "0123456789abcdef0123456789abcdef"})

    assert configured.integrations()["weather"] == "live"


def test_cache_integration_needs_both_upstash_settings():
    half = settings.model_copy(
        update={"UPSTASH_REDIS_REST_URL": "https://redis.test", "UPSTASH_REDIS_REST_TOKEN": None}
    )
    full = settings.model_copy(
        update={"UPSTASH_REDIS_REST_URL": "https://redis.test", "UPSTASH_REDIS_REST_TOKEN": "token"}
    )

    assert half.integrations()["cache"] == "memory"
    assert full.integrations()["cache"] == "redis"

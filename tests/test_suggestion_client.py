import json

import httpx
import pytest

from closet.api.v1.schemas.outfit import SuggestionClothes, SuggestOutfitRequest
from closet.core.exceptions import SuggestionServiceException
from closet.services.suggestion import SuggestionClient

TAG_URL = "https://functions.test/tag-clothes"
SUGGEST_URL = "https://functions.test/suggest-outfit"


def make_client(handler) -> tuple[SuggestionClient, list[httpx.Request]]:
    requests = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    client = SuggestionClient(
        tag_clothes_url=TAG_URL,
        suggest_outfit_url=SUGGEST_URL,
        timeout=5,
        transport=httpx.MockTransport(recording_handler),
    )
    return client, requests


async def test_tag_clothes():
    client, requests = make_client(
        lambda request: httpx.Response(200, json={"type": "top", "color": "red", "tags": ["casual"], "confidence": 0.7})
    )

    tagged = await client.tag_clothes("https://cdn.test/shirt.jpg")

    assert tagged.type == "top"
    assert tagged.tags == ["casual"]
    assert json.loads(requests[0].content) == {"image_url": "https://cdn.test/shirt.jpg"}


async def test_suggest_outfit_posts_serialized_wardrobe():
    client, requests = make_client(
        lambda request: httpx.Response(200, json={"suggested_clothes_ids": ["a"], "reasoning": "ok"})
    )
    request = SuggestOutfitRequest(
        clothes=[SuggestionClothes(id="a", type="top", color="unknown", style="casual", season="all")],
        context="work",
    )

    response = await client.suggest_outfit(request)

    assert response.suggested_clothes_ids == ["a"]
    assert response.confidence is None
    body = json.loads(requests[0].content)
    assert str(requests[0].url) == SUGGEST_URL
    assert body["context"] == "work"
    assert "season" not in body


async def test_non_2xx_raises_api_error():
    client, _ = make_client(lambda request: httpx.Response(503, text="unavailable"))

    with pytest.raises(SuggestionServiceException) as exc_info:
        await client.tag_clothes("https://cdn.test/shirt.jpg")

    assert exc_info.value.message == "API Error: 503"
    assert exc_info.value.status_code == 503


async def test_invalid_json_raises():
    client, _ = make_client(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(SuggestionServiceException):
        await client.tag_clothes("https://cdn.test/shirt.jpg")


async def test_unconfigured_url_raises():
    client = SuggestionClient(tag_clothes_url=None, suggest_outfit_url=None)
    client.suggest_outfit_url = None

    with pytest.raises(SuggestionServiceException):
        await client.suggest_outfit(SuggestOutfitRequest(clothes=[]))

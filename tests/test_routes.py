import random

import httpx
import pytest
from httpx import ASGITransport
from sqlalchemy.exc import OperationalError

from closet.api.v1.schemas.auth import PhoneVerificationResponse
from closet.core.database import get_db
from closet.core.dependencies import get_current_user
from closet.core.exceptions import StorageException
from closet.core.redis import InMemoryCache
from closet.main import app
from closet.models import ClothingItem
from closet.services.outfit_generator import OutfitGenerator, get_outfit_generator
from closet.services.storage import StorageService, get_storage_service
from closet.services.twilio import TwilioService, get_twilio_service
from closet.services.weather import WeatherService, get_weather_service

BASE_URL = "https://clothes-images.s3.eu-west-3.amazonaws.com"


class FakeStorage:
    """In-memory replacement for StorageService"""

    generate_file_name = staticmethod(StorageService.generate_file_name)

    def __init__(self, fail_delete: bool = False):
        self.uploaded = {}
        self.deleted = []
        self.fail_delete = fail_delete

    async def upload_image(self, file_content, file_name, content_type="image/jpeg"):
        self.uploaded[file_name] = (file_content, content_type)
        return f"{BASE_URL}/{file_name}"

    async def delete_image(self, file_name):
        if self.fail_delete:
            raise StorageException("Impossible de supprimer l'image.", code="AccessDenied")
        self.deleted.append(file_name)

    def key_from_url(self, url):
        prefix = f"{BASE_URL}/"
        return url[len(prefix):] if url.startswith(prefix) else None


class FakeTwilio(TwilioService):
    """Keeps the number helpers, records sends instead of calling Twilio"""

    def __init__(self):
        super().__init__(account_sid="AC123", auth_token="secret", service_sid="VA456")
        self.sent = []

    async def send_verification_code(self, phone_number):
        self.sent.append(phone_number)
        return PhoneVerificationResponse(success=True)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def twilio():
    return FakeTwilio()


@pytest.fixture
async def client(db, user, storage, twilio):
    async def override_get_db():
        yield db
        await db.commit()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_storage_service] = lambda: storage
    app.dependency_overrides[get_twilio_service] = lambda: twilio
    app.dependency_overrides[get_outfit_generator] = lambda: OutfitGenerator(
        cache=InMemoryCache(), rng=random.Random(0)
    )
    app.dependency_overrides[get_weather_service] = lambda: WeatherService(api_key="", rng=random.Random(0))

    async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def clothing_payload(**overrides):
    payload = {"image_url": f"{BASE_URL}/user_01/1.jpg", "type": "top", "color": "blue", "tags": ["work"]}
    payload.update(overrides)
    return payload


EVENT_PAYLOAD = {
    "title": "Dîner",
    "event_date": "2026-03-20",
    "event_time": "20:30",
    "event_type": "formal",
    "icon": "🍽️",
}


async def test_health(client):
    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_requires_bearer_token(client):
    del app.dependency_overrides[get_current_user]

    response = await client.get("/api/v1/clothes")

    assert response.status_code in (401, 403)


async def test_clothes_crud(client, storage):
    created = await client.post("/api/v1/clothes", json=clothing_payload())
    assert created.status_code == 201
    item = created.json()
    assert item["user_id"] == "user_01"

    await client.post("/api/v1/clothes", json=clothing_payload(type="shoes", color="black"))

    listed = await client.get("/api/v1/clothes")
    assert len(listed.json()) == 2

    filtered = await client.get("/api/v1/clothes", params={"type": "shoes"})
    assert [entry["type"] for entry in filtered.json()] == ["shoes"]

    updated = await client.patch(f"/api/v1/clothes/{item['id']}", json={"color": "navy"})
    assert updated.json()["color"] == "navy"

    deleted = await client.delete(f"/api/v1/clothes/{item['id']}")
    assert deleted.status_code == 204
    assert storage.deleted == ["user_01/1.jpg"]
    assert (await client.get(f"/api/v1/clothes/{item['id']}")).status_code == 404


async def test_clothes_unknown_id_is_404(client):
    assert (await client.patch("/api/v1/clothes/missing", json={"color": "red"})).status_code == 404
    assert (await client.delete("/api/v1/clothes/missing")).status_code == 404


async def test_clothes_delete_survives_storage_failure(client, storage):
    storage.fail_delete = True
    item = (await client.post("/api/v1/clothes", json=clothing_payload())).json()

    response = await client.delete(f"/api/v1/clothes/{item['id']}")

    assert response.status_code == 204


async def test_clothes_delete_keeps_photo_when_commit_fails(client, db, storage, monkeypatch):
    item = (await client.post("/api/v1/clothes", json=clothing_payload())).json()
    real_commit = db.commit

    async def failing_commit():
        # Only the route's own commit fails; later commits go through
        monkeypatch.setattr(db, "commit", real_commit)
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", failing_commit)

    response = await client.delete(f"/api/v1/clothes/{item['id']}")

    assert response.status_code == 500
    assert storage.deleted == []
    assert await db.get(ClothingItem, item["id"]) is not None


async def test_event_status_cycle(client):
    event = (await client.post("/api/v1/events", json=EVENT_PAYLOAD)).json()
    assert event["status"] == "generate"

    statuses = []
    for _ in range(3):
        response = await client.post(f"/api/v1/events/{event['id']}/status/cycle")
        statuses.append(response.json()["status"])

    assert statuses == ["preparing", "ready", "generate"]


async def test_events_by_month(client):
    await client.post("/api/v1/events", json=EVENT_PAYLOAD)

    march = await client.get("/api/v1/events/month/2026/3")
    bad_month = await client.get("/api/v1/events/month/2026/13")

    assert [event["title"] for event in march.json()] == ["Dîner"]
    assert bad_month.status_code == 400


async def test_event_status_on_unknown_id_is_404(client):
    response = await client.patch("/api/v1/events/missing/status", json={"status": "ready"})

    assert response.status_code == 404


async def test_generate_heuristic_outfit(client):
    for item_type in ("top", "bottom", "shoes", "accessories"):
        await client.post("/api/v1/clothes", json=clothing_payload(type=item_type))

    response = await client.post("/api/v1/outfits/generate", json={"occasion": "work"})

    assert response.status_code == 200
    body = response.json()
    assert body["mode"] == "heuristic"
    assert body["cached"] is False
    assert [item["type"] for item in body["outfit"]["clothes"]] == ["top", "bottom", "shoes"]
    assert body["outfit"]["id"].startswith("local-")


async def test_generate_with_empty_wardrobe_returns_no_outfit(client):
    response = await client.post("/api/v1/outfits/generate", json={})

    assert response.status_code == 200
    assert response.json()["outfit"] is None


async def test_switch_outfit_mode(client):
    assert (await client.get("/api/v1/outfits/mode")).json() == {"mode": "heuristic"}

    response = await client.put("/api/v1/outfits/mode", json={"mode": "ai"})

    assert response.json() == {"mode": "ai"}
    assert (await client.get("/api/v1/outfits/mode")).json() == {"mode": "ai"}


async def test_image_upload(client, storage):
    response = await client.post(
        "/api/v1/images/upload",
        files={"file": ("shirt.png", b"png-bytes", "image/png")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["path"].startswith("user_01/")
    assert body["path"].endswith(".png")
    assert body["url"] == f"{BASE_URL}/{body['path']}"
    assert storage.uploaded[body["path"]] == (b"png-bytes", "image/png")


async def test_image_upload_rejects_unsupported_format(client, storage):
    response = await client.post(
        "/api/v1/images/upload",
        files={"file": ("anim.gif", b"gif-bytes", "image/gif")},
    )

    assert response.status_code == 400
    assert "JPEG, PNG ou WebP" in response.json()["detail"]
    assert storage.uploaded == {}


async def test_image_delete_enforces_ownership(client, storage):
    missing = await client.delete("/api/v1/images")
    foreign = await client.delete("/api/v1/images", params={"path": "user_02/1.jpg"})
    own = await client.delete("/api/v1/images", params={"url": f"{BASE_URL}/user_01/1.jpg"})

    assert missing.status_code == 400
    assert foreign.status_code == 403
    assert own.status_code == 204
    assert storage.deleted == ["user_01/1.jpg"]


async def test_send_phone_code_formats_number(client, twilio):
    response = await client.post("/api/v1/auth/phone/send-code", json={"phone_number": "06 12 34 56 78"})

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert twilio.sent == ["+33612345678"]


async def test_weather_falls_back_without_api_key(client):
    response = await client.get("/api/v1/weather", params={"lat": 45.76, "lon": 4.84})

    assert response.status_code == 200
    body = response.json()
    assert body["location"] == "Paris"
    assert body["current"]["temperature"] == 22
    assert len(body["forecast"]) == 7


async def test_get_me(client):
    response = await client.get("/api/v1/users/me")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "user_01"
    assert body["outfit_generator_mode"] == "heuristic"


async def test_readiness_lists_integrations(client):
    response = await client.get("/api/v1/health/ready")

    assert response.status_code == 200
    integrations = response.json()["integrations"]
    assert integrations["cache"] == "memory"
    assert integrations["storage"] == "clothes-images"

import time
from datetime import datetime, timezone
from types import SimpleNamespace

import httpx
import pytest
from authlib.jose import JsonWebKey, jwt

from closet.api.v1.schemas.auth import LoginRequest, SignupRequest
from closet.services.auth import AuthService, full_name_of

JWKS_URL = "https://api.workos.test/sso/jwks/client_test_closet"
SIGNING_KEY = JsonWebKey.generate_key("RSA", 2048, is_private=True, options={"kid": "key-1"})


def workos_user(user_id="user_01", first_name="Alice", last_name="Martin"):
    now = datetime(2026, 3, 14, tzinfo=timezone.utc)
    return SimpleNamespace(
        object="user",
        id=user_id,
        email="alice@example.com",
        first_name=first_name,
        last_name=last_name,
        email_verified=True,
        profile_picture_url=None,
        created_at=now,
        updated_at=now,
    )


class FakeUserManagement:
    def __init__(self):
        self.created = []
        self.deleted = []
        self.revoked = []

    def get_jwks_url(self):
        return JWKS_URL

    def create_user(self, **payload):
        self.created.append(payload)
        return workos_user(first_name=payload.get("first_name"), last_name=payload.get("last_name"))

    def delete_user(self, user_id):
        self.deleted.append(user_id)

    def authenticate_with_password(self, email, password):
        return SimpleNamespace(user=workos_user(), access_token="access", refresh_token="refresh")

    def revoke_session(self, session_id):
        self.revoked.append(session_id)


class FakeUserService:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.ensured = []

    async def ensure_user_exists(self, db, user_id, email, full_name=None, avatar_url=None):
        if self.fail:
            raise RuntimeError("insert failed")
        self.ensured.append((user_id, email, full_name))


def jwks_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"keys": [SIGNING_KEY.as_dict(is_private=False)]})


def make_service(user_service=None):
    management = FakeUserManagement()
    service = AuthService(
        workos_client=SimpleNamespace(user_management=management),
        user_service=user_service or FakeUserService(),
        transport=httpx.MockTransport(jwks_handler),
    )
    return service, management


def make_token(**claims) -> str:
    now = int(time.time())
    payload = {"sub": "user_01", "sid": "session_01", "iat": now, "exp": now + 300}
    payload.update(claims)
    return jwt.encode({"alg": "RS256", "kid": "key-1"}, payload, SIGNING_KEY).decode()


def test_full_name_of():
    assert full_name_of(workos_user()) == "Alice Martin"
    assert full_name_of(workos_user(first_name=None, last_name=None)) is None


async def test_verify_session_returns_claims():
    service, _ = make_service()

    session = await service.verify_session(make_token())

    assert session["user_id"] == "user_01"
    assert session["session_id"] == "session_01"


async def test_expired_token_is_rejected():
    service, _ = make_service()
    past = int(time.time()) - 3600

    with pytest.raises(ValueError, match="expired"):
        await service.verify_session(make_token(iat=past - 300, exp=past))


async def test_garbage_token_is_rejected():
    service, _ = make_service()

    with pytest.raises(ValueError):
        await service.verify_session("not-a-jwt")


async def test_signup_splits_full_name():
    user_service = FakeUserService()
    service, management = make_service(user_service)
    request = SignupRequest(
        email="alice@example.com",
        password="s3cret-pass",
        confirm_password="s3cret-pass",
        full_name="Alice Martin",
    )

    response = await service.signup(None, request)

    assert management.created[0]["first_name"] == "Alice"
    assert management.created[0]["last_name"] == "Martin"
    assert user_service.ensured == [("user_01", "alice@example.com", "Alice Martin")]
    assert response.user.id == "user_01"


async def test_signup_removes_identity_when_local_insert_fails():
    service, management = make_service(FakeUserService(fail=True))
    request = SignupRequest(email="alice@example.com", password="s3cret-pass", confirm_password="s3cret-pass")

    with pytest.raises(RuntimeError):
        await service.signup(None, request)

    assert management.deleted == ["user_01"]


async def test_login_creates_local_user():
    user_service = FakeUserService()
    service, _ = make_service(user_service)

    response = await service.login(None, LoginRequest(email="alice@example.com", password="s3cret-pass"))

    assert response.access_token == "access"
    assert user_service.ensured[0][0] == "user_01"


async def test_logout_revokes_session():
    service, management = make_service()

    assert await service.logout(make_token()) is True
    assert management.revoked == ["session_01"]


async def test_logout_without_session_id_fails():
    service, management = make_service()

    with pytest.raises(ValueError, match="session"):
        await service.logout(make_token(sid=None))

    assert management.revoked == []

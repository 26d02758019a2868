from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.exceptions import ConfigurationError, DatabaseError, ProviderUnavailableError
from core.providers.base import BaseGenerationProvider
from features.billing.db_models import UserApiLimit, UserSubscription
from features.billing.dependencies import get_billing_session
from features.generation.dependencies import get_generation_service
from features.generation.gateway import GenerationGateway
from features.generation.models import MediaKind
from main import create_app


class FakeProvider(BaseGenerationProvider):
    provider_name = "fake"

    def __init__(self, outputs: Mapping[str, Any]):
        self.outputs = dict(outputs)
        self.calls: list[str] = []

    async def run(self, model: str, input: Mapping[str, Any]) -> Any:
        self.calls.append(model)
        result = self.outputs[model]
        if isinstance(result, Exception):
            raise result
        return result


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(UserApiLimit.__table__.create)
        await conn.run_sync(UserSubscription.__table__.create)
    factory = async_sessionmaker(engine, expire_on_commit=False)
    yield factory
    await engine.dispose()


def _build_app(monkeypatch: pytest.MonkeyPatch, session_factory, provider: FakeProvider) -> FastAPI:
    app = create_app()

    async def fake_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    def fake_gateways(provider_name=None):
        return {
            MediaKind.AUDIO: GenerationGateway(provider, media_kind=MediaKind.AUDIO, model="music:v1"),
            MediaKind.VIDEO: GenerationGateway(
                provider,
                media_kind=MediaKind.VIDEO,
                model="luma/ray",
                fallback_model="zeroscope:v1",
            ),
        }

    app.dependency_overrides[get_billing_session] = fake_session
    monkeypatch.setattr("features.generation.dependencies.build_gateways", fake_gateways)
    return app


async def _usage_count(session_factory, caller_id: int) -> int:
    async with session_factory() as session:
        result = await session.execute(select(UserApiLimit.count).where(UserApiLimit.user_id == caller_id))
        return int(result.scalar_one_or_none() or 0)


async def _seed(session_factory, *objects) -> None:
    async with session_factory() as session:
        session.add_all(objects)
        await session.commit()


@pytest.mark.asyncio
async def test_music_success_charges_free_tier(monkeypatch, session_factory, auth_token_factory):
    provider = FakeProvider({"music:v1": {"url": lambda: "http://cdn/x.wav"}})
    app = _build_app(monkeypatch, session_factory, provider)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/api/music",
            json={"prompt": "ambient drone"},
            headers={"Authorization": f"Bearer {auth_token_factory(caller_id=11)}"},
        )

    assert response.status_code == 200
    assert response.json() == {"url": "http://cdn/x.wav", "media_kind": "audio"}
    assert response.headers["X-Quota-Refresh"] == "true"
    assert await _usage_count(session_factory, 11) == 1


@pytest.mark.asyncio
async def test_entitled_caller_is_not_charged(monkeypatch, session_factory, auth_token_factory):
    await _seed(
        session_factory,
        UserSubscription(
            user_id=12,
            stripe_price_id="price_pro",
            stripe_current_period_end=datetime.now(timezone.utc) + timedelta(days=30),
        ),
        UserApiLimit(user_id=12, count=5),
    )
    provider = FakeProvider({"music:v1": ["https://cdn.test/drone.wav"]})
    app = _build_app(monkeypatch, session_factory, provider)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/api/music",
            json={"prompt": "ambient drone"},
            headers={"Authorization": f"Bearer {auth_token_factory(caller_id=12)}"},
        )

    assert response.status_code == 200
    assert response.json()["url"] == "https://cdn.test/drone.wav"
    assert await _usage_count(session_factory, 12) == 5


@pytest.mark.asyncio
async def test_quota_exhausted_returns_403_without_generating(monkeypatch, session_factory, auth_token_factory):
    await _seed(session_factory, UserApiLimit(user_id=13, count=5))
    provider = FakeProvider({"music:v1": ["https://cdn.test/a.wav"]})
    app = _build_app(monkeypatch, session_factory, provider)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/api/music",
            json={"prompt": "ambient drone"},
            headers={"Authorization": f"Bearer {auth_token_factory(caller_id=13)}"},
        )

    assert response.status_code == 403
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Free trial has expired. Please upgrade to pro."
    assert body["data"]["context"] == {"upgrade_required": True}
    assert response.headers["X-Quota-Refresh"] == "true"
    assert provider.calls == []
    assert await _usage_count(session_factory, 13) == 5


@pytest.mark.asyncio
async def test_missing_token_returns_401(monkeypatch, session_factory):
    provider = FakeProvider({})
    app = _build_app(monkeypatch, session_factory, provider)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/api/video", json={"prompt": "waves"})

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized"
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.headers["X-Quota-Refresh"] == "true"
    assert provider.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"prompt": ""}, {"prompt": "   "}])
async def test_missing_prompt_returns_400(monkeypatch, session_factory, auth_token_factory, payload):
    provider = FakeProvider({})
    app = _build_app(monkeypatch, session_factory, provider)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/api/video",
            json=payload,
            headers={"Authorization": f"Bearer {auth_token_factory(caller_id=14)}"},
        )

    assert response.status_code == 400
    assert response.json()["data"]["context"] == {"field": "prompt"}
    assert provider.calls == []


@pytest.mark.asyncio
async def test_video_falls_back_once_and_charges(monkeypatch, session_factory, auth_token_factory):
    provider = FakeProvider(
        {
            "luma/ray": ProviderUnavailableError("Replicate API error 500", provider="fake"),
            "zeroscope:v1": ["https://cdn.test/fallback.mp4"],
        }
    )
    app = _build_app(monkeypatch, session_factory, provider)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/api/video",
            json={"prompt": "waves"},
            headers={"Authorization": f"Bearer {auth_token_factory(caller_id=15)}"},
        )

    assert response.status_code == 200
    assert response.json() == {"url": "https://cdn.test/fallback.mp4", "media_kind": "video"}
    assert provider.calls == ["luma/ray", "zeroscope:v1"]
    assert await _usage_count(session_factory, 15) == 1


@pytest.mark.asyncio
async def test_unusable_output_returns_500_without_charge(monkeypatch, session_factory, auth_token_factory):
    provider = FakeProvider({"music:v1": {"status": "done"}})
    app = _build_app(monkeypatch, session_factory, provider)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/api/music",
            json={"prompt": "ambient drone"},
            headers={"Authorization": f"Bearer {auth_token_factory(caller_id=16)}"},
        )

    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "Failed to generate audio URL"
    assert body["data"]["error"] == "empty_provider_response"
    assert response.headers["X-Quota-Refresh"] == "true"
    assert await _usage_count(session_factory, 16) == 0


@pytest.mark.asyncio
async def test_failed_video_fallback_returns_500_without_charge(monkeypatch, session_factory, auth_token_factory):
    provider = FakeProvider(
        {
            "luma/ray": ProviderUnavailableError("Replicate API error 503", provider="fake"),
            "zeroscope:v1": [],
        }
    )
    app = _build_app(monkeypatch, session_factory, provider)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/api/video",
            json={"prompt": "waves"},
            headers={"Authorization": f"Bearer {auth_token_factory(caller_id=17)}"},
        )

    assert response.status_code == 500
    assert response.json()["message"] == "Failed to generate video"
    assert provider.calls == ["luma/ray", "zeroscope:v1"]
    assert await _usage_count(session_factory, 17) == 0


@pytest.mark.asyncio
async def test_video_primary_crash_still_falls_back(monkeypatch, session_factory, auth_token_factory):
    provider = FakeProvider(
        {
            "luma/ray": AttributeError("'int' object has no attribute 'lower'"),
            "zeroscope:v1": ["https://cdn.test/fallback.mp4"],
        }
    )
    app = _build_app(monkeypatch, session_factory, provider)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/api/video",
            json={"prompt": "waves"},
            headers={"Authorization": f"Bearer {auth_token_factory(caller_id=18)}"},
        )

    assert response.status_code == 200
    assert response.json()["url"] == "https://cdn.test/fallback.mp4"
    assert provider.calls == ["luma/ray", "zeroscope:v1"]
    assert await _usage_count(session_factory, 18) == 1


@pytest.mark.asyncio
async def test_unexpected_service_failure_returns_500_envelope(monkeypatch, session_factory, auth_token_factory):
    class CrashingService:
        async def generate(self, caller_id, prompt, media_kind):
            raise RuntimeError("connection pool exhausted")

    app = _build_app(monkeypatch, session_factory, FakeProvider({}))
    app.dependency_overrides[get_generation_service] = lambda: CrashingService()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/api/music",
            json={"prompt": "drone"},
            headers={"Authorization": f"Bearer {auth_token_factory(caller_id=19)}"},
        )

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert response.json()["message"] == "Failed to generate audio"
    assert "pool" not in response.text
    assert response.headers["X-Quota-Refresh"] == "true"


@pytest.mark.asyncio
async def test_malformed_body_returns_400_with_refresh_header(monkeypatch, session_factory, auth_token_factory):
    app = _build_app(monkeypatch, session_factory, FakeProvider({}))

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/api/music",
            content=b"{not json",
            headers={
                "Authorization": f"Bearer {auth_token_factory(caller_id=20)}",
                "Content-Type": "application/json",
            },
        )

    assert response.status_code == 400
    assert response.json()["data"]["error"] == "bad_request"
    assert response.headers["X-Quota-Refresh"] == "true"


@pytest.mark.asyncio
async def test_missing_provider_config_returns_500_with_refresh_header(
    monkeypatch, session_factory, auth_token_factory
):
    app = _build_app(monkeypatch, session_factory, FakeProvider({}))

    def missing_token(provider_name=None):
        raise ConfigurationError(
            "Required environment variable REPLICATE_API_TOKEN not set",
            key="REPLICATE_API_TOKEN",
        )

    monkeypatch.setattr("features.generation.dependencies.build_gateways", missing_token)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/api/video",
            json={"prompt": "waves"},
            headers={"Authorization": f"Bearer {auth_token_factory(caller_id=21)}"},
        )

    assert response.status_code == 500
    assert response.json()["data"] == {"key": "REPLICATE_API_TOKEN"}
    assert response.headers["X-Quota-Refresh"] == "true"


@pytest.mark.asyncio
async def test_database_failure_returns_500_with_refresh_header(monkeypatch, session_factory, auth_token_factory):
    app = _build_app(monkeypatch, session_factory, FakeProvider({}))

    async def unavailable_session():
        raise DatabaseError("could not connect", operation="open_session")
        yield  # pragma: no cover

    app.dependency_overrides[get_billing_session] = unavailable_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post(
            "/api/music",
            json={"prompt": "drone"},
            headers={"Authorization": f"Bearer {auth_token_factory(caller_id=22)}"},
        )

    assert response.status_code == 500
    assert response.json()["message"] == "Internal error"
    assert response.headers["X-Quota-Refresh"] == "true"


@pytest.mark.asyncio
async def test_health_check_has_no_refresh_header():
    app = create_app()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Quota-Refresh" not in response.headers

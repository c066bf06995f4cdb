"""Shared test fixtures for backend tests."""

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_chat_service
from app.core.config import Settings
from app.core.config import settings as app_settings
from app.services.chat import ChatService
from app.services.history import HistoryStore
from app.services.rate_limiter import RateLimiter
from app.services.request_queue import SerialRequestQueue
from app.services.retry import FallbackScheduler
from tests.fakes import FakeImageProvider, FakeTextProvider, no_sleep


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        data_dir=tmp_path / "data",
        gemini_api_key="test-gemini-key",
        stability_api_key="test-stability-key",
        inter_request_delay_ms=0,
        base_delay_ms=0,
    )


@pytest.fixture
def direct_provider() -> FakeTextProvider:
    return FakeTextProvider(reply="Hello from the direct API")


@pytest.fixture
def legacy_provider() -> FakeTextProvider:
    return FakeTextProvider()


@pytest.fixture
def image_provider() -> FakeImageProvider:
    return FakeImageProvider()


@pytest.fixture
def make_service(test_settings, direct_provider, legacy_provider, image_provider):
    """Factory so tests can swap out providers while keeping fresh limiter/queue state."""

    def _make(text_providers="default", image="default") -> ChatService:
        limiter = RateLimiter()
        return ChatService(
            settings=test_settings,
            history=HistoryStore(test_settings.history_dir),
            rate_limiter=limiter,
            scheduler=FallbackScheduler(limiter, max_retries=2, base_delay_ms=0, sleep=no_sleep),
            queue=SerialRequestQueue(delay_ms=0, sleep=no_sleep),
            text_providers=(direct_provider, legacy_provider) if text_providers == "default" else text_providers,
            image_provider=image_provider if image == "default" else image,
        )

    return _make


@pytest.fixture
def chat_service(make_service) -> ChatService:
    return make_service()


@pytest.fixture
def client(chat_service, test_settings, monkeypatch):
    """FastAPI TestClient with the chat service swapped for one backed by fakes."""
    monkeypatch.setattr(app_settings, "data_dir", test_settings.data_dir)
    from app.main import app

    app.dependency_overrides[get_chat_service] = lambda: chat_service

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()

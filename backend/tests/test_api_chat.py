"""Tests for the chat endpoint."""

import base64

import httpx

from app.api.deps import get_chat_service
from app.models.conversation import ConversationMessage
from app.models.profiles import MODEL_PROFILES
from tests.fakes import PNG_BYTES, FakeImageProvider


def test_chat_requires_user_id_and_message(client):
    assert client.post("/api/chat", json={"message": "hi"}).status_code == 400
    assert client.post("/api/chat", json={"userId": "u1"}).status_code == 400
    assert client.post("/api/chat", json={"userId": "u1", "message": ""}).status_code == 400


def test_chat_text_turn_appends_user_and_assistant(client, legacy_provider):
    response = client.post("/api/chat", json={"userId": "u1", "message": "what is terraform"})
    assert response.status_code == 200
    data = response.json()

    assert data["reply"] == "Hello from Gemini"
    assert [m["role"] for m in data["history"][-2:]] == ["user", "assistant"]
    assert data["history"][-2]["content"] == "what is terraform"
    assert data["history"][-1]["content"] == "Hello from Gemini"
    assert "imageData" not in data

    # Persisted history matches what was returned
    stored = client.get("/api/history/u1").json()["history"]
    assert stored == data["history"]

    model, _, prompt = legacy_provider.calls[0]
    assert model == "gemini-2.0-flash"
    assert prompt.endswith("what is terraform")


def test_chat_sends_only_recent_history_to_provider(client, chat_service, legacy_provider):
    chat_service.history.write(
        "long",
        [
            ConversationMessage(role="user" if i % 2 == 0 else "assistant", content=f"m{i}", timestamp=i)
            for i in range(80)
        ],
    )

    response = client.post("/api/chat", json={"userId": "long", "message": "next question"})
    assert response.status_code == 200

    _, context, _ = legacy_provider.calls[0]
    assert len(context) == 50
    assert [m.content for m in context] == [f"m{i}" for i in range(30, 80)]

    # The file keeps everything; only the model context is capped
    assert len(response.json()["history"]) == 82


def test_chat_unknown_model_uses_default(client, legacy_provider):
    client.post("/api/chat", json={"userId": "u2", "message": "explain helm", "selectedModel": "gpt-9"})
    assert legacy_provider.calls[0][0] == "gemini-2.0-flash"


def test_chat_pro_model_prefers_direct_api(client, direct_provider, legacy_provider):
    response = client.post(
        "/api/chat", json={"userId": "u3", "message": "explain helm", "selectedModel": "gemini-2.5-pro"}
    )
    assert response.json()["reply"] == "Hello from the direct API"
    assert direct_provider.calls[0][0] == "gemini-2.5-pro"
    assert legacy_provider.calls == []


def test_chat_pro_model_falls_back_to_legacy_api(client, direct_provider, legacy_provider):
    direct_provider.error = ValueError("invalid argument")
    response = client.post(
        "/api/chat", json={"userId": "u4", "message": "explain helm", "selectedModel": "gemini-2.5-pro"}
    )
    assert response.json()["reply"] == "Hello from Gemini"
    assert legacy_provider.calls[0][0] == "gemini-2.5-pro"


def test_chat_throttled_everywhere_returns_rate_limit_reply(client, legacy_provider):
    legacy_provider.error = RuntimeError("429 Resource has been exhausted (e.g. check quota).")
    response = client.post("/api/chat", json={"userId": "u5", "message": "explain helm"})

    assert response.status_code == 200
    data = response.json()
    assert "Rate Limit Exceeded" in data["reply"]
    assert len(legacy_provider.calls) == 6
    assert data["history"][-1]["content"] == data["reply"]


def test_chat_provider_error_returns_fallback_reply(client, legacy_provider):
    legacy_provider.error = PermissionError("API key not valid")
    response = client.post("/api/chat", json={"userId": "u6", "message": "tell me about kubernetes"})

    assert response.status_code == 200
    data = response.json()
    assert "container orchestration" in data["reply"]
    # One attempt per candidate model, no retries
    assert [c[0] for c in legacy_provider.calls] == ["gemini-2.0-flash", "gemini-1.5-pro", "gemini-2.5-pro"]
    assert client.get("/api/history/u6").json()["history"][-1]["content"] == data["reply"]


def test_chat_missing_gemini_key_is_500(client, make_service):
    service = make_service(text_providers=None)
    client.app.dependency_overrides[get_chat_service] = lambda: service

    response = client.post("/api/chat", json={"userId": "u7", "message": "what is terraform"})
    assert response.status_code == 500
    assert client.get("/api/history/u7").json()["history"] == []


def test_chat_image_turn(client, image_provider, chat_service):
    response = client.post("/api/chat", json={"userId": "artist", "message": "please draw a cat"})
    assert response.status_code == 200
    data = response.json()

    assert image_provider.prompts == ["please draw a cat"]
    assert base64.b64decode(data["imageData"]) == PNG_BYTES
    assert data["imageFilename"].startswith("image_")
    assert f"/api/images/{data['imageFilename']}" in data["reply"]
    assert data["history"][-2]["content"] == "please draw a cat"

    image = client.get(f"/api/images/{data['imageFilename']}")
    assert image.status_code == 200
    assert image.content == PNG_BYTES


def test_chat_image_failure_still_recorded(client, make_service):
    from app.core.errors import ImageGenerationError

    service = make_service(image=FakeImageProvider(error=ImageGenerationError("content moderation", 400)))
    client.app.dependency_overrides[get_chat_service] = lambda: service

    response = client.post("/api/chat", json={"userId": "artist2", "message": "draw a dragon"})
    assert response.status_code == 200
    data = response.json()
    assert "Image Generation Failed" in data["reply"]
    assert "content moderation" in data["reply"]
    assert "Try These Working Prompts" in data["reply"]
    assert "imageData" not in data
    assert [m["role"] for m in data["history"]] == ["user", "assistant"]


def test_chat_image_missing_key_is_500(client, make_service):
    service = make_service(image=None)
    client.app.dependency_overrides[get_chat_service] = lambda: service

    response = client.post("/api/chat", json={"userId": "u8", "message": "draw a logo"})
    assert response.status_code == 500


def test_chat_multipart_with_text_file(client, legacy_provider):
    response = client.post(
        "/api/chat",
        data={"userId": "u9", "message": "summarize this"},
        files={"file": ("notes.txt", b"terraform apply failed", "text/plain")},
    )
    assert response.status_code == 200

    _, _, prompt = legacy_provider.calls[0]
    assert "File Content:\nterraform apply failed\n\nUser Question: summarize this" in prompt
    # Only the plain message is stored
    assert response.json()["history"][-2]["content"] == "summarize this"


def test_chat_multipart_rejects_unsupported_file(client):
    response = client.post(
        "/api/chat",
        data={"userId": "u10", "message": "run this"},
        files={"file": ("tool.exe", b"MZ", "application/x-msdownload")},
    )
    assert response.status_code == 400


def test_chat_truncates_long_messages(client, test_settings):
    long_message = "x" * (test_settings.max_message_chars + 500)
    data = client.post("/api/chat", json={"userId": "u11", "message": long_message}).json()
    assert len(data["history"][-2]["content"]) == test_settings.max_message_chars


def test_chat_turns_for_same_user_accumulate(client):
    for text in ("first", "second", "third"):
        client.post("/api/chat", json={"userId": "multi", "message": text})

    history = client.get("/api/history/multi").json()["history"]
    assert len(history) == 6
    assert [m["content"] for m in history if m["role"] == "user"] == ["first", "second", "third"]


def test_chat_local_limit_on_every_model_returns_rate_limit_reply(client, chat_service, legacy_provider):
    for name, profile in MODEL_PROFILES.items():
        for _ in range(profile.requests_per_minute):
            chat_service.rate_limiter.check_and_consume(name)

    response = client.post("/api/chat", json={"userId": "busy", "message": "explain helm"})

    assert response.status_code == 200
    data = response.json()
    assert "Rate Limit Exceeded" in data["reply"]
    assert legacy_provider.calls == []
    assert [m["role"] for m in data["history"]] == ["user", "assistant"]


def test_chat_pro_model_throttled_on_direct_api_uses_legacy(client, direct_provider, legacy_provider):
    direct_provider.error = RuntimeError("429 Resource has been exhausted (e.g. check quota).")
    response = client.post(
        "/api/chat", json={"userId": "u12", "message": "explain helm", "selectedModel": "gemini-2.5-pro"}
    )

    assert response.status_code == 200
    assert response.json()["reply"] == "Hello from Gemini"
    # Direct API exhausted every candidate before the legacy path took over
    assert len(direct_provider.calls) == 6
    assert [c[0] for c in legacy_provider.calls] == ["gemini-2.5-pro"]


def test_chat_image_transport_failure_has_no_example_prompts(client, make_service):
    service = make_service(image=FakeImageProvider(error=httpx.ConnectError("connection refused")))
    client.app.dependency_overrides[get_chat_service] = lambda: service

    response = client.post("/api/chat", json={"userId": "artist3", "message": "draw a dragon"})
    assert response.status_code == 200
    data = response.json()
    assert "Image Generation Failed" in data["reply"]
    assert "connection refused" in data["reply"]
    assert "Try These Working Prompts" not in data["reply"]
    assert "imageData" not in data

    stored = client.get("/api/history/artist3").json()["history"]
    assert [m["content"] for m in stored] == ["draw a dragon", data["reply"]]


def test_chat_rejects_oversized_upload(client, test_settings, legacy_provider):
    test_settings.max_upload_bytes = 16
    response = client.post(
        "/api/chat",
        data={"userId": "u13", "message": "summarize this"},
        files={"file": ("notes.txt", b"x" * 64, "text/plain")},
    )
    assert response.status_code == 400
    assert "File too large" in response.json()["detail"]
    assert legacy_provider.calls == []


def test_chat_rejects_user_id_with_null_byte(client, legacy_provider):
    response = client.post("/api/chat", json={"userId": "a\x00b", "message": "what is terraform"})
    assert response.status_code == 400
    assert legacy_provider.calls == []


def test_chat_rejects_overlong_user_id(client, legacy_provider):
    response = client.post("/api/chat", json={"userId": "u" * 300, "message": "what is terraform"})
    assert response.status_code == 400
    assert legacy_provider.calls == []

"""Tests for provider request translation."""

import json

import httpx
import pytest

from app.core.errors import ImageGenerationError
from app.services.image.stability import StabilityImageProvider
from app.services.llm.base import Message
from app.services.llm.gemini import GeminiProvider
from app.services.llm.gemini_legacy import LegacyGeminiProvider

HISTORY = [Message(role="user", content="hi"), Message(role="assistant", content="hello")]


def test_legacy_history_uses_model_role():
    assert LegacyGeminiProvider.build_history(HISTORY) == [
        {"role": "user", "parts": ["hi"]},
        {"role": "model", "parts": ["hello"]},
    ]


def test_direct_contents_append_prompt_as_user_turn():
    contents = GeminiProvider.build_contents(HISTORY, "next")
    assert [c.role for c in contents] == ["user", "model", "user"]
    assert contents[-1].parts[0].text == "next"


def _provider(handler) -> StabilityImageProvider:
    return StabilityImageProvider("sk-test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_stability_request_and_success():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"artifacts": [{"base64": "aGVsbG8="}]})

    assert await _provider(handler).generate("a red fox") == "aGVsbG8="
    assert seen["url"].endswith("/generation/stable-diffusion-xl-1024-v1-0/text-to-image")
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["text_prompts"] == [{"text": "a red fox"}]
    assert (seen["body"]["width"], seen["body"]["height"]) == (1024, 1024)
    assert (seen["body"]["samples"], seen["body"]["steps"]) == (1, 30)


@pytest.mark.asyncio
async def test_stability_error_message_is_surfaced():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "invalid prompts detected"})

    with pytest.raises(ImageGenerationError, match="invalid prompts detected") as exc_info:
        await _provider(handler).generate("something")
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_stability_non_json_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    with pytest.raises(ImageGenerationError, match="Bad Gateway"):
        await _provider(handler).generate("something")

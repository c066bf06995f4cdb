"""Stability AI text-to-image provider."""

import logging

import httpx

from app.core.errors import ImageGenerationError
from app.services.image.base import BaseImageProvider

logger = logging.getLogger(__name__)


class StabilityImageProvider(BaseImageProvider):
    """Text-to-image using the Stability AI v1 generation API."""

    BASE_URL = "https://api.stability.ai/v1"
    ENGINE_ID = "stable-diffusion-xl-1024-v1-0"

    def __init__(
        self,
        api_key: str,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def build_payload(self, prompt: str) -> dict:
        return {
            "text_prompts": [{"text": prompt}],
            "cfg_scale": 7,
            "height": 1024,
            "width": 1024,
            "samples": 1,
            "steps": 30,
        }

    async def generate(self, prompt: str) -> str:
        async with httpx.AsyncClient(transport=self._transport) as client:
            resp = await client.post(
                f"{self.BASE_URL}/generation/{self.ENGINE_ID}/text-to-image",
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
                json=self.build_payload(prompt),
                timeout=self._timeout,
            )

        if resp.is_success:
            return resp.json()["artifacts"][0]["base64"]

        message = _error_message(resp)
        logger.warning(f"Stability API returned {resp.status_code}: {message}")
        raise ImageGenerationError(message, status_code=resp.status_code)


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text or "Unknown error"
    if isinstance(data, dict):
        return data.get("message") or data.get("error") or "Unknown error"
    return resp.text or "Unknown error"

"""Abstract image provider interface."""

from abc import ABC, abstractmethod


class BaseImageProvider(ABC):
    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Generate one image for prompt. Returns the PNG as a base64 string."""
        ...

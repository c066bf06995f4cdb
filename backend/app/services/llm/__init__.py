"""Text provider factory."""

from app.core.config import Settings
from app.services.llm.base import BaseLLMProvider

# Model routed to the google-genai client first; everything else goes straight to the legacy chat API.
DIRECT_API_MODEL = "gemini-2.5-pro"


def get_text_providers(settings: Settings) -> tuple[BaseLLMProvider, BaseLLMProvider] | None:
    """Return (direct, legacy) providers, or None when no Gemini key is configured."""
    if not settings.gemini_api_key:
        return None

    from app.services.llm.gemini import GeminiProvider
    from app.services.llm.gemini_legacy import LegacyGeminiProvider
    return GeminiProvider(settings.gemini_api_key), LegacyGeminiProvider(settings.gemini_api_key)

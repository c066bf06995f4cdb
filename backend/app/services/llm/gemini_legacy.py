"""Google Gemini provider on the legacy google-generativeai chat API."""

import google.generativeai as legacy_genai

from app.services.llm.base import BaseLLMProvider, Message, to_gemini_role

GENERATION_CONFIG = {
    "temperature": 0.7,
    "top_p": 0.8,
    "top_k": 40,
}


class LegacyGeminiProvider(BaseLLMProvider):
    def __init__(self, api_key: str):
        legacy_genai.configure(api_key=api_key)

    @staticmethod
    def build_history(history: list[Message]) -> list[dict]:
        return [{"role": to_gemini_role(m.role), "parts": [m.content]} for m in history]

    async def generate(self, model: str, history: list[Message], prompt: str) -> str:
        chat = legacy_genai.GenerativeModel(model, generation_config=GENERATION_CONFIG).start_chat(
            history=self.build_history(history)
        )
        response = await chat.send_message_async(prompt)
        return response.text

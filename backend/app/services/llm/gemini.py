"""Google Gemini provider on the google-genai SDK (generate_content)."""

from google import genai
from google.genai import types

from app.models.profiles import get_profile
from app.services.llm.base import BaseLLMProvider, Message, to_gemini_role


class GeminiProvider(BaseLLMProvider):
    def __init__(self, api_key: str):
        self.client = genai.Client(api_key=api_key)

    @staticmethod
    def build_contents(history: list[Message], prompt: str) -> list[types.Content]:
        contents = [
            types.Content(role=to_gemini_role(m.role), parts=[types.Part(text=m.content)])
            for m in history
        ]
        contents.append(types.Content(role="user", parts=[types.Part(text=prompt)]))
        return contents

    async def generate(self, model: str, history: list[Message], prompt: str) -> str:
        profile = get_profile(model)
        response = await self.client.aio.models.generate_content(
            model=model,
            contents=self.build_contents(history, prompt),
            config=types.GenerateContentConfig(
                temperature=profile.temperature,
                top_p=profile.top_p,
                top_k=profile.top_k,
                max_output_tokens=profile.max_tokens,
            ),
        )
        return response.text or ""

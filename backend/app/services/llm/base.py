"""Abstract text provider interface. All providers must implement this."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from app.models.conversation import ConversationMessage


@dataclass
class Message:
    role: str  # "user" | "assistant"
    content: str


def to_gemini_role(role: str) -> str:
    return "model" if role == "assistant" else "user"


def messages_from_history(history: list[ConversationMessage]) -> list[Message]:
    return [Message(role=m.role, content=m.content) for m in history]


class BaseLLMProvider(ABC):
    @abstractmethod
    async def generate(self, model: str, history: list[Message], prompt: str) -> str:
        """Send prompt on top of history to model and return the reply text."""
        ...

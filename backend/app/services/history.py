"""Per-conversation history persisted as one pretty-printed JSON file per id."""

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from app.core.sandbox import resolve_sandboxed_file
from app.models.conversation import ConversationMessage, now_ms

logger = logging.getLogger(__name__)

_messages_adapter = TypeAdapter(list[ConversationMessage])


class HistoryStore:
    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def _ensure_dir(self) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def file_for(self, conversation_id: str) -> Path:
        return resolve_sandboxed_file(self.base_dir, f"{conversation_id}.json")

    def read(self, conversation_id: str) -> list[ConversationMessage]:
        """Load the stored history. Missing or malformed files read as empty."""
        self._ensure_dir()
        path = self.file_for(conversation_id)

        try:
            if not path.exists():
                return []
            raw = json.loads(path.read_text(encoding="utf-8"))
            return _messages_adapter.validate_python(raw)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Unreadable history for {conversation_id!r}, treating as empty: {e}")
            return []

    def write(self, conversation_id: str, messages: list[ConversationMessage]) -> None:
        self._ensure_dir()
        path = self.file_for(conversation_id)
        payload = [m.model_dump() for m in messages]
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")

    def delete(self, conversation_id: str) -> None:
        path = self.file_for(conversation_id)
        path.unlink(missing_ok=True)
        logger.debug(f"Cleared history for {conversation_id!r}")

    def append_turn(
        self, conversation_id: str, user_text: str, assistant_text: str
    ) -> list[ConversationMessage]:
        """Append a user/assistant pair in a single write and return the new history."""
        history = self.read(conversation_id)
        stamp = now_ms()
        history.append(ConversationMessage(role="user", content=user_text, timestamp=stamp))
        history.append(ConversationMessage(role="assistant", content=assistant_text, timestamp=stamp))
        self.write(conversation_id, history)
        return history

    @staticmethod
    def recent(messages: list[ConversationMessage], limit: int) -> list[ConversationMessage]:
        if limit <= 0:
            return []
        return messages[-limit:]

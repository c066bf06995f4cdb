"""Conversation message model for per-user chat history files."""

import time
from typing import Literal

from pydantic import BaseModel


def now_ms() -> int:
    return int(time.time() * 1000)


class ConversationMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: int  # epoch milliseconds

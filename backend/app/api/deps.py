from fastapi import Depends, Request

from app.services.chat import ChatService
from app.services.history import HistoryStore


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


def get_history_store(service: ChatService = Depends(get_chat_service)) -> HistoryStore:
    return service.history

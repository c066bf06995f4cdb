"""REST API for per-user conversation history."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_history_store
from app.core.sandbox import SandboxError
from app.services.history import HistoryStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/{user_id}")
async def get_history(user_id: str, store: HistoryStore = Depends(get_history_store)):
    try:
        history = store.read(user_id)
    except SandboxError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"userId": user_id, "history": [m.model_dump() for m in history]}


@router.delete("/{user_id}")
async def clear_history(user_id: str, store: HistoryStore = Depends(get_history_store)):
    try:
        store.delete(user_id)
    except SandboxError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OSError as e:
        logger.error(f"Failed to clear history for {user_id!r}: {e}")
        raise HTTPException(status_code=500, detail="failed to clear history")
    return {"ok": True}

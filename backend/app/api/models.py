from fastapi import APIRouter, Depends

from app.api.deps import get_chat_service
from app.models.profiles import MODEL_PROFILES
from app.services.chat import ChatService

router = APIRouter()


@router.get("/models")
async def list_models(service: ChatService = Depends(get_chat_service)):
    return {
        "models": {model_id: profile.to_dict() for model_id, profile in MODEL_PROFILES.items()},
        "defaultModel": service.resolve_model(None),
    }

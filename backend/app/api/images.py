from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from app.api.deps import get_chat_service
from app.core.sandbox import SandboxError, resolve_sandboxed_file
from app.services.chat import ChatService

router = APIRouter()


@router.get("/images/{filename}")
async def get_image(filename: str, service: ChatService = Depends(get_chat_service)):
    try:
        image_path = resolve_sandboxed_file(service.images_dir, filename)
    except SandboxError:
        raise HTTPException(status_code=404, detail="Image not found")

    if not image_path.is_file():
        raise HTTPException(status_code=404, detail="Image not found")

    return FileResponse(image_path, media_type="image/png")

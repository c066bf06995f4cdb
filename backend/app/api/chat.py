import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from starlette.datastructures import UploadFile

from app.api.deps import get_chat_service
from app.core.errors import ChatValidationError, ConfigurationError
from app.services.chat import ChatService
from app.services.uploads import Attachment

router = APIRouter()
logger = logging.getLogger(__name__)

_FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


@router.post("/chat")
async def chat(request: Request, service: ChatService = Depends(get_chat_service)):
    """Run one chat turn. Accepts a JSON body or a multipart form with an optional file."""
    fields, attachment = await _read_payload(request, service.settings.max_upload_bytes)

    try:
        result = await service.handle_turn(
            user_id=_text_field(fields, "userId"),
            message=_text_field(fields, "message"),
            selected_model=_text_field(fields, "selectedModel"),
            attachment=attachment,
        )
    except ChatValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConfigurationError as e:
        logger.error(f"Chat unavailable: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    body = {
        "reply": result.reply,
        "history": [m.model_dump() for m in result.history],
    }
    if result.image_data is not None:
        body["imageData"] = result.image_data
        body["imageFilename"] = result.image_filename
    return body


async def _read_payload(request: Request, max_upload_bytes: int) -> tuple[dict, Attachment | None]:
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        fields = {k: v for k, v in form.items() if isinstance(v, str)}
        upload = form.get("file")
        attachment = None
        if isinstance(upload, UploadFile) and upload.filename:
            # Refuse oversized files before pulling them into memory
            if upload.size is not None and upload.size > max_upload_bytes:
                raise HTTPException(
                    status_code=400, detail=f"File too large (max {max_upload_bytes // (1024 * 1024)}MB)"
                )
            attachment = Attachment(
                filename=upload.filename,
                content_type=upload.content_type or "application/octet-stream",
                data=await upload.read(),
            )
            logger.info(f"Processing uploaded file: {upload.filename}")
        return fields, attachment

    try:
        data = await request.json()
    except ValueError:
        data = {}
    return (data if isinstance(data, dict) else {}), None


def _text_field(fields: dict, name: str) -> str | None:
    value = fields.get(name)
    return value if isinstance(value, str) else None

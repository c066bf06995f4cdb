"""Validation and text extraction for files attached to a chat message."""

import logging
from dataclasses import dataclass

from app.core.errors import ChatValidationError

logger = logging.getLogger(__name__)

ALLOWED_TYPES = frozenset({
    "application/pdf",
    "text/plain",
    "text/markdown",
    "text/csv",
    "application/json",
    "application/xml",
    "text/html",
    "text/css",
    "text/javascript",
    "application/javascript",
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
})

_OFFICE_MARKERS = ("word", "excel", "powerpoint", "officedocument")


@dataclass
class Attachment:
    filename: str
    content_type: str
    data: bytes


def validate_attachment(attachment: Attachment, max_bytes: int) -> None:
    if attachment.content_type not in ALLOWED_TYPES:
        raise ChatValidationError("File type not supported")
    if len(attachment.data) > max_bytes:
        raise ChatValidationError(f"File too large (max {max_bytes // (1024 * 1024)}MB)")


def extract_text(attachment: Attachment) -> str:
    """Text handed to the model for an attachment; binary formats get a placeholder."""
    mime = attachment.content_type
    name = attachment.filename

    if mime == "application/pdf":
        return f"[PDF File: {name}] - Content will be processed by AI model"
    if mime.startswith("image/"):
        return f"[Image File: {name}] - Image content will be analyzed by AI model"
    # OOXML types contain "xml", so check them before the text branch
    if any(marker in mime for marker in _OFFICE_MARKERS):
        return f"[Office Document: {name}] - Document content will be processed by AI model"
    if mime.startswith("text/") or "json" in mime or "xml" in mime or mime == "application/javascript":
        return attachment.data.decode("utf-8", errors="replace")

    logger.debug(f"No extractor for {mime}, ignoring attachment {name}")
    return ""


def compose_message(message: str, file_content: str) -> str:
    if not file_content:
        return message
    return f"File Content:\n{file_content}\n\nUser Question: {message}"

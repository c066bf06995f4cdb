"""Heuristic routing of a chat message to image generation or text generation."""

import re

IMAGE_KEYWORDS: tuple[str, ...] = (
    "draw", "paint", "create image", "generate image", "make picture", "show me",
    "picture of", "image of", "photo of", "drawing of", "painting of",
    "visualize", "illustrate", "sketch", "design", "logo", "banner",
    "portrait", "landscape", "still life", "abstract", "cartoon", "anime",
    "realistic", "artistic", "creative", "visual", "graphic",
)

IMAGE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"create.*image",
        r"generate.*picture",
        r"draw.*for me",
        r"show.*image",
        r"make.*visual",
        r"design.*logo",
        r"create.*art",
    )
)


def is_image_request(text: str) -> bool:
    lowered = text.lower()
    if any(keyword in lowered for keyword in IMAGE_KEYWORDS):
        return True
    return any(pattern.search(text) for pattern in IMAGE_PATTERNS)

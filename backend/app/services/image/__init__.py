"""Image provider factory."""

from app.core.config import Settings
from app.services.image.base import BaseImageProvider


def get_image_provider(settings: Settings) -> BaseImageProvider | None:
    """Returns the Stability provider, or None when no key is configured."""
    if not settings.stability_api_key:
        return None

    from app.services.image.stability import StabilityImageProvider
    return StabilityImageProvider(settings.stability_api_key)

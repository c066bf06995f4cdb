"""Exceptions raised by the chat services and translated at the API layer."""


class ChatValidationError(Exception):
    """Request is missing required input or carries something we refuse."""


class ConfigurationError(Exception):
    """A provider credential needed for this request is not configured."""


class RateLimitExceeded(Exception):
    """Local per-model quota for the current window is used up."""

    def __init__(self, model: str, wait_seconds: int):
        self.model = model
        self.wait_seconds = wait_seconds
        super().__init__(
            f"Rate limit exceeded for {model}. Please wait {wait_seconds} seconds."
        )


class AllModelsRateLimited(Exception):
    """Every candidate model was tried without success."""

    def __init__(self, last_error: Exception | None = None):
        self.last_error = last_error
        super().__init__("All models are rate limited. Please try again later.")


class ImageGenerationError(Exception):
    """The image provider answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)

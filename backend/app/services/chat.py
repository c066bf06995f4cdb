"""Chat turn orchestration - routes a message to image or text generation and
records the turn in the user's history.

Text turns go through the serial queue, the per-model rate limiter and the
retry/fallback scheduler. Image turns call the image provider directly.
"""

import asyncio
import base64
import logging
from dataclasses import dataclass
from pathlib import Path

from app.core.config import Settings
from app.core.errors import (
    AllModelsRateLimited,
    ChatValidationError,
    ConfigurationError,
    ImageGenerationError,
    RateLimitExceeded,
)
from app.core.sandbox import SandboxError
from app.models.conversation import ConversationMessage, now_ms
from app.models.profiles import DEFAULT_MODEL, MODEL_PROFILES
from app.services.classifier import is_image_request
from app.services.fallback import generate_fallback_response
from app.services.history import HistoryStore
from app.services.image import get_image_provider
from app.services.image.base import BaseImageProvider
from app.services.llm import DIRECT_API_MODEL, get_text_providers
from app.services.llm.base import BaseLLMProvider, Message, messages_from_history
from app.services.rate_limiter import RateLimiter
from app.services.replies import fallback_block, image_block, image_failure_block, rate_limit_block
from app.services.request_queue import SerialRequestQueue
from app.services.retry import FallbackScheduler, is_throttling_error
from app.services.uploads import Attachment, compose_message, extract_text, validate_attachment

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_TEMPLATE = """You are {name}, a specialized AI assistant focused on senior-level DevOps, Platform Engineering, and Cloud Infrastructure topics.

IMPORTANT: You are NOT ChatGPT. You are {name}. If anyone calls you ChatGPT, politely correct them and say "I'm not ChatGPT, I'm {name}, your specialized DevOps and Cloud Infrastructure AI assistant."

Your expertise areas include:
- CI/CD pipelines, GitOps and Infrastructure as Code (Terraform, CloudFormation, Pulumi)
- Container orchestration (Kubernetes, Docker, Helm) and service mesh (Istio, Linkerd, Consul)
- Monitoring and observability (Prometheus, Grafana, ELK Stack, Jaeger)
- Platform architecture, microservices, API gateways, databases and caching
- Security architecture, IAM, zero-trust networking and compliance (SOC2, ISO27001, GDPR)
- Network architecture, SDN, load balancing and troubleshooting
- AWS, Azure and GCP, including EKS, AKS, GKE and serverless offerings
- Technical leadership, architecture decisions and cost optimization

Always provide practical, production-ready solutions with security and scalability in mind. Include code examples when relevant and explain trade-offs.

FORMATTING:
- Use markdown: ### headers, **bold** key terms, `inline code` for commands and file names
- Use fenced code blocks with a language for code examples
- Use bullet points for lists and numbered lists for step-by-step instructions
- Use blockquotes (>) for important notes or warnings
- Keep blank lines between sections

Remember: You are {name}, not ChatGPT."""


@dataclass
class ChatResult:
    reply: str
    history: list[ConversationMessage]
    image_data: str | None = None
    image_filename: str | None = None


class ChatService:
    def __init__(
        self,
        settings: Settings,
        history: HistoryStore,
        rate_limiter: RateLimiter,
        scheduler: FallbackScheduler,
        queue: SerialRequestQueue,
        text_providers: tuple[BaseLLMProvider, BaseLLMProvider] | None,
        image_provider: BaseImageProvider | None,
    ):
        self.settings = settings
        self.history = history
        self.rate_limiter = rate_limiter
        self.scheduler = scheduler
        self.queue = queue
        self.text_providers = text_providers
        self.image_provider = image_provider
        self.system_prompt = SYSTEM_PROMPT_TEMPLATE.format(name=settings.assistant_name)

    @property
    def images_dir(self) -> Path:
        return self.settings.images_dir

    def resolve_model(self, selected: str | None) -> str:
        default = self.settings.default_model if self.settings.default_model in MODEL_PROFILES else DEFAULT_MODEL
        if not selected:
            return default
        if selected not in MODEL_PROFILES:
            logger.warning(f"Unknown model {selected!r}, using {default}")
            return default
        return selected

    async def handle_turn(
        self,
        user_id: str | None,
        message: str | None,
        selected_model: str | None = None,
        attachment: Attachment | None = None,
    ) -> ChatResult:
        if not user_id or not message:
            raise ChatValidationError("userId and message are required")
        try:
            self.history.file_for(user_id)
        except SandboxError:
            raise ChatValidationError("Invalid userId")
        if attachment is not None:
            validate_attachment(attachment, self.settings.max_upload_bytes)

        model = self.resolve_model(selected_model)
        user_message = message[: self.settings.max_message_chars]
        logger.info(f"Chat turn for {user_id!r} using {model}")

        if is_image_request(user_message):
            if self.image_provider is None:
                raise ConfigurationError("Missing STABILITY_API_KEY for image generation")
            return await self._image_turn(user_id, user_message)

        if self.text_providers is None:
            raise ConfigurationError("Missing Gemini API key")

        file_content = extract_text(attachment) if attachment is not None else ""
        future = self.queue.enqueue(
            lambda: self._text_turn(user_id, user_message, model, file_content)
        )
        # The queued turn still completes and persists if the client goes away.
        return await asyncio.shield(future)

    # -- text ------------------------------------------------------------

    async def _text_turn(self, user_id: str, user_message: str, model: str, file_content: str) -> ChatResult:
        stored = self.history.read(user_id)
        context = messages_from_history(HistoryStore.recent(stored, self.settings.history_limit))
        prompt = f"{self.system_prompt}\n\n{compose_message(user_message, file_content)}"

        try:
            reply = await self._generate(model, context, prompt)
        except Exception as e:
            logger.error(f"Text generation failed for {user_id!r}: {e}")
            reply = self._failure_reply(user_message, e)

        history = self.history.append_turn(user_id, user_message, reply)
        return ChatResult(reply=reply, history=history)

    async def _generate(self, model: str, context: list[Message], prompt: str) -> str:
        direct, legacy = self.text_providers  # type: ignore[misc]

        if model == DIRECT_API_MODEL:
            try:
                return await self.scheduler.execute(
                    lambda m: direct.generate(m, context, prompt), model
                )
            except Exception as e:
                logger.info(f"Direct Gemini API failed, falling back to legacy API: {e}")

        return await self.scheduler.execute(lambda m: legacy.generate(m, context, prompt), model)

    def _failure_reply(self, user_message: str, err: Exception) -> str:
        if _is_throttled(err):
            return rate_limit_block(str(err))
        return fallback_block(generate_fallback_response(user_message, self.settings.assistant_name))

    # -- image -----------------------------------------------------------

    async def _image_turn(self, user_id: str, user_message: str) -> ChatResult:
        logger.info(f"Generating image for {user_id!r}")
        try:
            image_b64 = await self.image_provider.generate(user_message)  # type: ignore[union-attr]
            filename = self._save_image(image_b64)
        except ImageGenerationError as e:
            reply = image_failure_block(str(e), with_examples=True)
            return ChatResult(reply=reply, history=self.history.append_turn(user_id, user_message, reply))
        except Exception as e:
            logger.error(f"Image generation error: {e}")
            reply = image_failure_block(str(e), with_examples=False)
            return ChatResult(reply=reply, history=self.history.append_turn(user_id, user_message, reply))

        url = f"{self.settings.public_base_url.rstrip('/')}/api/images/{filename}"
        reply = image_block(user_message, url, self.settings.assistant_name)
        history = self.history.append_turn(user_id, user_message, reply)
        return ChatResult(reply=reply, history=history, image_data=image_b64, image_filename=filename)

    def _save_image(self, image_b64: str) -> str:
        self.images_dir.mkdir(parents=True, exist_ok=True)
        stamp = now_ms()
        path = self.images_dir / f"image_{stamp}.png"
        suffix = 1
        while path.exists():
            path = self.images_dir / f"image_{stamp}_{suffix}.png"
            suffix += 1
        path.write_bytes(base64.b64decode(image_b64))
        return path.name


def _is_throttled(err: Exception) -> bool:
    if isinstance(err, AllModelsRateLimited):
        last = err.last_error
        return last is None or isinstance(last, RateLimitExceeded) or is_throttling_error(last)
    return isinstance(err, RateLimitExceeded) or is_throttling_error(err)


def build_chat_service(settings: Settings) -> ChatService:
    """Composition root for the chat pipeline."""
    rate_limiter = RateLimiter()
    return ChatService(
        settings=settings,
        history=HistoryStore(settings.history_dir),
        rate_limiter=rate_limiter,
        scheduler=FallbackScheduler(
            rate_limiter,
            max_retries=settings.max_retries,
            base_delay_ms=settings.base_delay_ms,
            max_delay_ms=settings.max_delay_ms,
        ),
        queue=SerialRequestQueue(delay_ms=settings.inter_request_delay_ms),
        text_providers=get_text_providers(settings),
        image_provider=get_image_provider(settings),
    )

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.api import chat, history, images, models
from app.services.chat import build_chat_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Configure logging based on debug setting
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s" if settings.debug
        else "%(levelname)-8s %(name)s: %(message)s",
    )
    logger = logging.getLogger(__name__)
    logger.info(f"Gemini API key: {'SET' if settings.gemini_api_key else 'NOT SET'}")
    logger.info(f"Stability API key: {'SET' if settings.stability_api_key else 'NOT SET'}")

    settings.history_dir.mkdir(parents=True, exist_ok=True)
    settings.images_dir.mkdir(parents=True, exist_ok=True)

    service = build_chat_service(settings)
    app.state.chat_service = service

    # Daily reset of per-model usage counters
    reset_task = asyncio.create_task(service.rate_limiter.run_daily_reset())

    yield

    await service.queue.close()
    reset_task.cancel()
    try:
        await reset_task
    except asyncio.CancelledError:
        pass


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(chat.router, prefix="/api", tags=["chat"])
app.include_router(history.router, prefix="/api/history", tags=["history"])
app.include_router(models.router, prefix="/api", tags=["models"])
app.include_router(images.router, prefix="/api", tags=["images"])


@app.get("/api/health")
async def health():
    return {"ok": True, "service": settings.app_name}

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Gemini Chat"
    debug: bool = False

    # Paths
    data_dir: Path = Path(__file__).resolve().parent.parent.parent / "data"

    # Providers
    gemini_api_key: str = ""
    stability_api_key: str = ""
    default_model: str = "gemini-2.0-flash"
    assistant_name: str = "LashivGPT"

    # Conversation
    history_limit: int = 50
    max_message_chars: int = 8000
    max_upload_bytes: int = 10 * 1024 * 1024

    # Retry / throttling
    max_retries: int = 2
    base_delay_ms: int = 1000
    max_delay_ms: int = 30000
    inter_request_delay_ms: int = 2000

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    public_base_url: str = ""
    cors_origins: list[str] = ["*"]

    model_config = {
        "env_file": str(Path(__file__).resolve().parent.parent.parent / ".env"),
        "env_prefix": "CHAT_",
    }

    @property
    def history_dir(self) -> Path:
        return self.data_dir / "history"

    @property
    def images_dir(self) -> Path:
        return self.data_dir / "images"


settings = Settings()

"""Static per-model configuration: display info, sampling and quotas."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelProfile:
    name: str
    description: str
    max_tokens: int
    temperature: float
    top_p: float
    top_k: int
    requests_per_minute: int
    requests_per_day: int
    cooldown_ms: int

    def to_dict(self) -> dict:
        """Wire shape used by the model selector."""
        return {
            "name": self.name,
            "description": self.description,
            "maxTokens": self.max_tokens,
            "temperature": self.temperature,
            "topP": self.top_p,
            "topK": self.top_k,
            "requestsPerMinute": self.requests_per_minute,
            "requestsPerDay": self.requests_per_day,
            "cooldownMs": self.cooldown_ms,
        }


DEFAULT_MODEL = "gemini-2.0-flash"

MODEL_PROFILES: dict[str, ModelProfile] = {
    "gemini-2.0-flash": ModelProfile(
        name="LashivGPT Fast",
        description="Quick and efficient responses for fast interactions",
        max_tokens=8192,
        temperature=0.7,
        top_p=0.8,
        top_k=40,
        requests_per_minute=60,
        requests_per_day=5000,
        cooldown_ms=30000,
    ),
    "gemini-2.5-pro": ModelProfile(
        name="LashivGPT Pro",
        description="Most advanced AI with enhanced reasoning capabilities",
        max_tokens=32768,
        temperature=0.7,
        top_p=0.8,
        top_k=40,
        requests_per_minute=30,
        requests_per_day=3000,
        cooldown_ms=45000,
    ),
    "gemini-1.5-pro": ModelProfile(
        name="LashivGPT Standard",
        description="Balanced performance with good cost efficiency",
        max_tokens=16384,
        temperature=0.7,
        top_p=0.8,
        top_k=40,
        requests_per_minute=15,
        requests_per_day=1500,
        cooldown_ms=60000,
    ),
}


def get_profile(model: str) -> ModelProfile:
    """Profile for model, falling back to the default model's profile."""
    return MODEL_PROFILES.get(model) or MODEL_PROFILES[DEFAULT_MODEL]

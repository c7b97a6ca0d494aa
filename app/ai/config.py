from dataclasses import dataclass

from app.core.config import settings


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    enabled: bool = True
    api_key: str | None = None
    base_url: str | None = None
    timeout_s: float = 20.0
    max_retries: int = 2
    max_input_chars: int = 24000


def load_ai_config() -> AIConfig:
    return AIConfig(
        provider=settings.ai_provider,
        model=settings.ai_model,
        enabled=settings.llm_enabled,
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout_s=settings.extraction_timeout_s,
        max_retries=settings.openai_max_retries,
        max_input_chars=settings.extraction_max_chars,
    )

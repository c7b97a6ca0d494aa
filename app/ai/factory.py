import logging

from app.ai.config import AIConfig, load_ai_config
from app.ai.types import AssistantError, DraftProfileAssistant

from app.ai.providers.null_provider import NullDraftAssistant
from app.ai.providers.openai_provider import OpenAIDraftAssistant

logger = logging.getLogger(__name__)


def get_draft_assistant(config: AIConfig | None = None) -> DraftProfileAssistant:
    cfg = config or load_ai_config()

    if not cfg.enabled or cfg.provider == "none":
        return NullDraftAssistant()

    if cfg.provider == "openai":
        try:
            return OpenAIDraftAssistant(
                model=cfg.model,
                api_key=cfg.api_key,
                base_url=cfg.base_url,
                timeout_s=cfg.timeout_s,
                max_retries=cfg.max_retries,
                max_input_chars=cfg.max_input_chars,
            )
        except AssistantError as exc:
            logger.warning("draft_assistant_unavailable provider=%s code=%s: %s", cfg.provider, exc.code, exc)
            return NullDraftAssistant()

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")

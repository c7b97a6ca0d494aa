from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional

from openai import OpenAI

from app.ai.prompts import DRAFT_PROFILE_SYSTEM_PROMPT, build_draft_profile_user_prompt
from app.ai.types import AssistantError

logger = logging.getLogger(__name__)


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


class OpenAIDraftAssistant:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 20.0,
        max_retries: int = 2,
        temperature: float = 0.1,
        max_input_chars: int = 24000,
        max_output_tokens: int = 900,
        client: Any = None,
    ):
        self._model = model
        self._temperature = temperature
        self._max_input_chars = max_input_chars
        self._max_output_tokens = max_output_tokens
        if client is None:
            key = (api_key or "").strip()
            if not key or _looks_like_placeholder(key):
                raise AssistantError("OPENAI_API_KEY is missing", code="llm_disabled")
            client = OpenAI(
                api_key=key,
                base_url=base_url or None,
                timeout=timeout_s,
                max_retries=max_retries,
            )
        self._client = client

    def produce_draft_profile(self, text: str) -> dict[str, Any] | None:
        resume_text = (text or "").strip()
        if not resume_text:
            return None

        started = time.perf_counter()
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": DRAFT_PROFILE_SYSTEM_PROMPT},
                    {"role": "user", "content": build_draft_profile_user_prompt(resume_text[: self._max_input_chars])},
                ],
                temperature=self._temperature,
                response_format={"type": "json_object"},
                max_tokens=self._max_output_tokens,
            )
            content = response.choices[0].message.content if response.choices else ""
            if not content:
                logger.warning("draft_assistant_empty model=%s", self._model)
                return None
            parsed = json.loads(content)
        except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
            logger.warning(
                "draft_assistant_failed model=%s text_chars=%s: %s",
                self._model,
                len(resume_text),
                exc,
            )
            return None

        latency_ms = int((time.perf_counter() - started) * 1000)
        if not isinstance(parsed, dict):
            logger.warning("draft_assistant_invalid_schema model=%s type=%s", self._model, type(parsed).__name__)
            return None
        logger.info("draft_assistant_completed model=%s latency_ms=%s", self._model, latency_ms)
        return parsed

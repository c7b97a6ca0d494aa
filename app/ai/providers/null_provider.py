from typing import Any


class NullDraftAssistant:
    """Used when no extraction assistant is configured; profiles fall back to degraded mode."""

    def produce_draft_profile(self, text: str) -> dict[str, Any] | None:
        _ = text
        return None

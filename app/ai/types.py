from typing import Any, Protocol


class AssistantError(RuntimeError):
    def __init__(self, message: str, *, code: str = "assistant_unavailable"):
        super().__init__(message)
        self.code = code


class DraftProfileAssistant(Protocol):
    def produce_draft_profile(self, text: str) -> dict[str, Any] | None:
        """Return a best-effort draft profile for resume text, or None on failure or timeout."""

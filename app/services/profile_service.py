from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass

from app.ai.factory import get_draft_assistant
from app.ai.types import DraftProfileAssistant
from app.normalize import normalize_profile
from app.parsing import ParsedDoc, parse_resume_document
from app.schemas.profile import CandidateProfile

logger = logging.getLogger(__name__)

_DATA_URL_PREFIX_RE = re.compile(r"^data:[^;,]*(?:;[^,]*)?,", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class ResumeParseResult:
    document: ParsedDoc
    profile: CandidateProfile
    assistant_used: bool


def decode_resume_base64(value: str) -> bytes:
    """Decode the upload payload, tolerating a data URL prefix and line breaks."""
    cleaned = _DATA_URL_PREFIX_RE.sub("", (value or "").strip())
    cleaned = re.sub(r"\s+", "", cleaned)
    if not cleaned:
        raise ValueError("resumeBase64 is required")
    try:
        return base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("resumeBase64 is not valid base64") from exc


def _request_draft(assistant: DraftProfileAssistant, text: str) -> dict | None:
    try:
        return assistant.produce_draft_profile(text)
    except Exception as exc:  # noqa: BLE001 - the assistant is an untrusted collaborator
        logger.warning("draft_assistant_raised type=%s: %s", type(assistant).__name__, exc)
        return None


def parse_resume(
    content: bytes,
    *,
    filename: str = "resume.pdf",
    mime_type: str | None = None,
    assistant: DraftProfileAssistant | None = None,
) -> ResumeParseResult:
    """Run the upload pipeline: PDF text, optional assistant draft, normalization.

    UnreadableDocument from the extractor propagates; every later failure
    degrades into a partial profile instead.
    """
    document = parse_resume_document(content, filename=filename, declared_mime_type=mime_type)
    draft = _request_draft(assistant or get_draft_assistant(), document.text)
    profile = normalize_profile(document.text, draft)
    logger.info(
        "resume_profile_built doc_id=%s assistant_used=%s skills=%s",
        document.doc_id,
        draft is not None,
        len(profile.skills),
    )
    return ResumeParseResult(document=document, profile=profile, assistant_used=draft is not None)

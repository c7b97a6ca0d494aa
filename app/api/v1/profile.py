from functools import lru_cache

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from app.ai.factory import get_draft_assistant
from app.ai.types import DraftProfileAssistant
from app.core.config import settings
from app.core.rate_limit import rate_limit
from app.normalize import normalize_profile
from app.parsing import UnreadableDocument
from app.schemas.api import NormalizeProfileRequest, ParseResumeRequest, ParseResumeResponse
from app.schemas.profile import CandidateProfile
from app.services.profile_service import ResumeParseResult, decode_resume_base64, parse_resume

router = APIRouter()


@lru_cache(maxsize=1)
def draft_assistant() -> DraftProfileAssistant:
    return get_draft_assistant()


def _too_large() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail=f"File too large. Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB.",
    )


def _parse_or_422(
    content: bytes,
    *,
    filename: str,
    mime_type: str | None,
    assistant: DraftProfileAssistant,
) -> ParseResumeResponse:
    try:
        result = parse_resume(content, filename=filename, mime_type=mime_type, assistant=assistant)
    except UnreadableDocument as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return _to_response(result)


def _to_response(result: ResumeParseResult) -> ParseResumeResponse:
    return ParseResumeResponse(
        **result.profile.model_dump(),
        doc_id=result.document.doc_id,
        page_count=result.document.page_count,
        parsing_warnings=list(result.document.parsing_warnings),
        assistant_used=result.assistant_used,
    )


@router.post("/profile/parse-resume", response_model=ParseResumeResponse)
@rate_limit()
def parse_resume_endpoint(
    request: Request,
    payload: ParseResumeRequest,
    assistant: DraftProfileAssistant = Depends(draft_assistant),
):
    _ = request
    try:
        content = decode_resume_base64(payload.resume_base64)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if len(content) > settings.max_upload_bytes:
        raise _too_large()
    return _parse_or_422(content, filename=payload.filename, mime_type=payload.mime_type, assistant=assistant)


@router.post("/profile/parse-resume-file", response_model=ParseResumeResponse)
@rate_limit()
async def parse_resume_file_endpoint(
    request: Request,
    file: UploadFile = File(...),
    assistant: DraftProfileAssistant = Depends(draft_assistant),
):
    _ = request
    filename = file.filename or "resume.pdf"
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise _too_large()
        chunks.append(chunk)
    return _parse_or_422(
        b"".join(chunks),
        filename=filename,
        mime_type=file.content_type,
        assistant=assistant,
    )


@router.post("/profile/normalize", response_model=CandidateProfile)
@rate_limit()
def normalize_profile_endpoint(request: Request, payload: NormalizeProfileRequest):
    _ = request
    return normalize_profile(payload.raw_text, payload.draft)

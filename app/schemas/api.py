from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.scoring.weights import ScoringWeights

from .job import JobPosting
from .profile import CandidateProfile
from .scoring import RankedJob


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ParseResumeRequest(_ApiModel):
    resume_base64: str = ""
    filename: str = Field(default="resume.pdf", max_length=255)
    mime_type: str | None = Field(default=None, max_length=120)


class ParseResumeResponse(CandidateProfile):
    """The normalized profile plus upload metadata, flat like the web client expects."""

    doc_id: str
    page_count: int = 0
    parsing_warnings: list[str] = Field(default_factory=list)
    assistant_used: bool = False


class NormalizeProfileRequest(_ApiModel):
    raw_text: str = Field(default="", max_length=200000)
    draft: Any = None


class ScoreJobsRequest(_ApiModel):
    # The profile is re-normalized server side, so any client-held shape is accepted.
    profile: dict[str, Any] = Field(default_factory=dict)
    jobs: list[JobPosting] = Field(default_factory=list, max_length=500)
    weights: dict[str, Any] | None = None


class ScoreJobsResponse(_ApiModel):
    weights: ScoringWeights
    results: list[RankedJob] = Field(default_factory=list)

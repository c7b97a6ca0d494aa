from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

CompanyTier = Literal["none", "notable", "top"]
SponsorshipSignal = Literal["none", "mentioned", "confirmed"]

COMPANY_TIERS: tuple[CompanyTier, ...] = ("none", "notable", "top")
SPONSORSHIP_SIGNALS: tuple[SponsorshipSignal, ...] = ("none", "mentioned", "confirmed")


def _normalize_term(value: Any) -> str:
    return re.sub(r"\s+", " ", str(value or "").strip().lower())


def _term_set(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        items: list[Any] = re.split(r"[,;\n]", value)
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = list(value)
    else:
        raise ValueError("expected a list of strings")
    return tuple(sorted({term for term in (_normalize_term(item) for item in items) if term}))


class JobPosting(BaseModel):
    """A job posting as supplied by the job feed. Read-only for scoring."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    job_id: str | None = None
    title: str = ""
    location: str = ""
    company_tier: CompanyTier = "none"
    required_skills: tuple[str, ...] = ()
    sponsorship_signal: SponsorshipSignal = "none"
    posted_at: datetime | None = None
    culture_signals: tuple[str, ...] = ()
    quality_signals: tuple[str, ...] = ()

    @field_validator("company_tier", mode="before")
    @classmethod
    def _coerce_company_tier(cls, value: Any) -> str:
        normalized = _normalize_term(value)
        return normalized if normalized in COMPANY_TIERS else "none"

    @field_validator("sponsorship_signal", mode="before")
    @classmethod
    def _coerce_sponsorship(cls, value: Any) -> str:
        normalized = _normalize_term(value)
        return normalized if normalized in SPONSORSHIP_SIGNALS else "none"

    @field_validator("required_skills", "culture_signals", "quality_signals", mode="before")
    @classmethod
    def _coerce_term_sets(cls, value: Any) -> tuple[str, ...]:
        return _term_set(value)

    @field_validator("title", "location", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return re.sub(r"\s+", " ", str(value)).strip()

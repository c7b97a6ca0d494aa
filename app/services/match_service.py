from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from app.normalize import normalize_profile
from app.normalize.utils import first_present
from app.schemas.api import ScoreJobsRequest, ScoreJobsResponse
from app.schemas.profile import CandidateProfile
from app.scoring import normalize_weights, rank_jobs

logger = logging.getLogger(__name__)


def profile_from_client(payload: Mapping[str, Any] | None) -> CandidateProfile:
    """Rebuild a trusted profile from whatever the client echoed back."""
    data = dict(payload or {})
    raw_text = first_present(data, "rawText", "raw_text")
    return normalize_profile(raw_text if isinstance(raw_text, str) else "", data)


def score_jobs(payload: ScoreJobsRequest, *, now: datetime | None = None) -> ScoreJobsResponse:
    profile = profile_from_client(payload.profile)
    if not profile.has_structured_data():
        logger.info("match_profile_degraded text_chars=%s", len(profile.raw_text))
    weights = normalize_weights(payload.weights)
    ranked = rank_jobs(profile, payload.jobs, weights, now=now)
    if ranked:
        logger.info(
            "match_scored jobs=%s top_total=%.3f",
            len(ranked),
            ranked[0].result.total,
        )
    return ScoreJobsResponse(weights=weights, results=ranked)

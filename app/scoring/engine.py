from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from functools import partial
from typing import Any

from app.core.config import settings
from app.schemas.job import JobPosting
from app.schemas.profile import CandidateProfile
from app.schemas.scoring import RankedJob, ScoreResult
from app.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

from .factors import (
    FactorScore,
    company_tier_score,
    location_score,
    recency_score,
    signal_score,
    skills_score,
    sponsorship_score,
    title_match_score,
)
from .weights import FACTORS, ScoringWeights, clamp_weight, normalize_weights

logger = logging.getLogger(__name__)

WeightsInput = ScoringWeights | Mapping[str, Any] | None


def compute_sub_scores(
    profile: CandidateProfile,
    job: JobPosting,
    *,
    now: datetime,
    taxonomy: TaxonomyProvider,
) -> dict[str, FactorScore]:
    return {
        "company_tier": company_tier_score(job),
        "location": location_score(profile, job, taxonomy),
        "title_match": title_match_score(profile, job),
        "skills": skills_score(profile, job, taxonomy),
        "sponsorship": sponsorship_score(job),
        "recency": recency_score(job, now),
        "culture": signal_score(job.culture_signals, "culture"),
        "quality": signal_score(job.quality_signals, "quality"),
    }


def score(
    profile: CandidateProfile,
    job: JobPosting,
    weights: WeightsInput = None,
    *,
    now: datetime | None = None,
    taxonomy: TaxonomyProvider | None = None,
) -> ScoreResult:
    """Score one job for one profile.

    Every factor yields a sub-score in [0, 1]; the breakdown entry is that
    sub-score times the factor weight clamped to [0, 2], and the total is the
    sum of the breakdown. Deterministic for a fixed ``now``.
    """
    snapshot = weights if isinstance(weights, ScoringWeights) else normalize_weights(weights)
    current = now or datetime.now(timezone.utc)
    sub_scores = compute_sub_scores(
        profile,
        job,
        now=current,
        taxonomy=taxonomy or get_default_taxonomy_provider(),
    )

    breakdown: dict[str, float] = {}
    for factor in FACTORS:
        breakdown[factor] = sub_scores[factor].value * clamp_weight(snapshot.weight(factor))

    skills = sub_scores["skills"]
    return ScoreResult(
        total=sum(breakdown.values()),
        breakdown=breakdown,
        sub_scores={factor: sub_scores[factor].value for factor in FACTORS},
        explanations={factor: sub_scores[factor].explanation for factor in FACTORS},
        matched_skills=skills.matched,
        missing_skills=skills.missing,
    )


def matches_suggested_role(profile: CandidateProfile, job: JobPosting, taxonomy: TaxonomyProvider) -> bool:
    job_families = set(taxonomy.role_families_for_title(job.title))
    if not job_families:
        return False
    return any(job_families & set(taxonomy.role_families_for_title(role)) for role in profile.suggested_roles)


def rank_jobs(
    profile: CandidateProfile,
    jobs: Iterable[JobPosting],
    weights: WeightsInput = None,
    *,
    now: datetime | None = None,
    max_workers: int | None = None,
    taxonomy: TaxonomyProvider | None = None,
) -> list[RankedJob]:
    """Score a batch of jobs and return them best first.

    The weights and clock are captured once, so every job in the batch is scored
    against the same snapshot. Ties on total prefer jobs matching one of the
    profile's suggested roles, then input order.
    """
    job_list = list(jobs)
    if not job_list:
        return []

    snapshot = normalize_weights(weights)
    current = now or datetime.now(timezone.utc)
    provider = taxonomy or get_default_taxonomy_provider()
    scorer = partial(score, profile, weights=snapshot, now=current, taxonomy=provider)

    workers = max(1, min(max_workers or settings.score_max_workers, len(job_list)))
    if workers == 1:
        results = [scorer(job) for job in job_list]
    else:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="score") as pool:
            results = list(pool.map(scorer, job_list))

    hints = [matches_suggested_role(profile, job, provider) for job in job_list]
    order = sorted(range(len(job_list)), key=lambda index: (-results[index].total, not hints[index], index))
    logger.info("jobs_ranked count=%s workers=%s", len(job_list), workers)
    return [
        RankedJob(
            rank=position,
            job_id=job_list[index].job_id,
            title=job_list[index].title,
            role_hint=hints[index],
            result=results[index],
        )
        for position, index in enumerate(order, start=1)
    ]

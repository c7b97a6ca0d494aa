from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from app.core.config.scoring import get_scoring_value
from app.schemas.job import JobPosting
from app.schemas.profile import CandidateProfile
from app.taxonomy import TaxonomyProvider

_TITLE_TOKEN_RE = re.compile(r"[a-z0-9][a-z0-9+#.]*")
_SECONDS_PER_DAY = 86400.0

_DEFAULT_COMPANY_TIER = {"top": 1.0, "notable": 0.6, "none": 0.2}
_DEFAULT_SPONSORSHIP = {"confirmed": 1.0, "mentioned": 0.6, "none": 0.25}
_DEFAULT_SKILL_TIERS = {"core": 1.0, "strong": 0.75, "peripheral": 0.5}


@dataclass(frozen=True, slots=True)
class FactorScore:
    value: float
    explanation: str
    matched: tuple[str, ...] = ()
    missing: tuple[str, ...] = ()


def _bounded(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number:
        return 0.0
    return max(0.0, min(1.0, number))


def neutral_score() -> float:
    return _bounded(get_scoring_value("neutral_score", 0.5))


def _config(path: str) -> dict[str, Any]:
    value = get_scoring_value(path, {})
    return value if isinstance(value, dict) else {}


def _neutral(reason: str) -> FactorScore:
    return FactorScore(value=neutral_score(), explanation=f"neutral: {reason}")


def _normalize(text: str) -> str:
    return re.sub(r"\s+", " ", (text or "").strip().lower())


def contains_phrase(text: str, phrase: str) -> bool:
    if not text or not phrase:
        return False
    return re.search(rf"(?<![a-z0-9]){re.escape(phrase)}(?![a-z0-9])", text) is not None


def company_tier_score(job: JobPosting) -> FactorScore:
    table = _config("factors.company_tier")
    value = _bounded(table.get(job.company_tier, _DEFAULT_COMPANY_TIER[job.company_tier]))
    return FactorScore(value=value, explanation=f"company tier '{job.company_tier}'")


def sponsorship_score(job: JobPosting) -> FactorScore:
    table = _config("factors.sponsorship")
    value = _bounded(table.get(job.sponsorship_signal, _DEFAULT_SPONSORSHIP[job.sponsorship_signal]))
    return FactorScore(value=value, explanation=f"sponsorship signal '{job.sponsorship_signal}'")


def location_score(profile: CandidateProfile, job: JobPosting, taxonomy: TaxonomyProvider) -> FactorScore:
    cfg = _config("factors.location")
    candidates = [loc for loc in (_normalize(item) for item in profile.suggested_locations) if loc]
    job_location = _normalize(job.location)
    if not candidates:
        return _neutral("no preferred locations in profile")
    if not job_location:
        return _neutral("job has no location")

    markers = [_normalize(marker) for marker in cfg.get("remote_markers", ["remote"])]
    job_remote = any(contains_phrase(job_location, marker) for marker in markers)
    remote_candidates = [loc for loc in candidates if any(contains_phrase(loc, marker) for marker in markers)]
    place_candidates = [loc for loc in candidates if loc not in remote_candidates]

    if job_location in candidates:
        return FactorScore(value=_bounded(cfg.get("exact", 1.0)), explanation=f"exact location match '{job.location}'")
    if job_remote and remote_candidates:
        return FactorScore(value=_bounded(cfg.get("remote_preferred", 1.0)), explanation="remote role, remote preferred")
    for loc in place_candidates:
        if contains_phrase(job_location, loc) or contains_phrase(loc, job_location):
            return FactorScore(value=_bounded(cfg.get("substring", 0.9)), explanation=f"location overlaps '{loc}'")
    if job_remote:
        return FactorScore(value=_bounded(cfg.get("remote_other", 0.7)), explanation="remote role")

    job_region = taxonomy.region_for(job_location)
    if job_region:
        for loc in place_candidates:
            if taxonomy.region_for(loc) == job_region:
                return FactorScore(
                    value=_bounded(cfg.get("same_region", 0.5)),
                    explanation=f"same region as '{loc}' ({job_region})",
                )
    return FactorScore(value=_bounded(cfg.get("no_match", 0.0)), explanation="no location overlap")


def _title_tokens(text: str, ignored: set[str]) -> list[str]:
    tokens = [token.rstrip(".") for token in _TITLE_TOKEN_RE.findall(_normalize(text))]
    return [token for token in tokens if token and token not in ignored]


def _longest_common_run(left: list[str], right: list[str]) -> int:
    best = 0
    previous = [0] * (len(right) + 1)
    for left_token in left:
        current = [0] * (len(right) + 1)
        for index, right_token in enumerate(right, start=1):
            if left_token == right_token:
                current[index] = previous[index - 1] + 1
                best = max(best, current[index])
        previous = current
    return best


def title_match_score(profile: CandidateProfile, job: JobPosting) -> FactorScore:
    cfg = _config("factors.title_match")
    ignored = {_normalize(token) for token in cfg.get("ignored_tokens", [])}
    job_tokens = _title_tokens(job.title, ignored)
    if not job_tokens:
        return _neutral("job title has no comparable words")
    if not profile.titles and not profile.keywords:
        return _neutral("no titles or keywords in profile")

    contained_value = _bounded(cfg.get("contained", 1.0))
    best_value = 0.0
    best_run = 0
    best_title: str | None = None
    for title in profile.titles:
        title_tokens = _title_tokens(title, ignored)
        if not title_tokens:
            continue
        run = _longest_common_run(job_tokens, title_tokens)
        if run == 0:
            continue
        value = contained_value if run == len(title_tokens) else run / len(job_tokens)
        if (value, run) > (best_value, best_run):
            best_value, best_run, best_title = value, run, title

    keyword_tokens: set[str] = set()
    for keyword in profile.keywords:
        keyword_tokens.update(_title_tokens(keyword, ignored))
    unique_job_tokens = set(job_tokens)
    overlap = sorted(unique_job_tokens & keyword_tokens)
    keyword_value = len(overlap) / len(unique_job_tokens) * _bounded(cfg.get("keyword_factor", 0.6))

    if best_title is not None and best_value >= keyword_value:
        return FactorScore(
            value=_bounded(best_value),
            explanation=f"title '{best_title}' matches {best_run} of {len(job_tokens)} title words",
            matched=(best_title,),
        )
    if overlap:
        return FactorScore(
            value=_bounded(keyword_value),
            explanation=f"keywords match title words: {', '.join(overlap)}",
            matched=tuple(overlap),
        )
    return FactorScore(value=0.0, explanation="no title overlap")


def skills_score(profile: CandidateProfile, job: JobPosting, taxonomy: TaxonomyProvider) -> FactorScore:
    """Mean per-skill credit over the job's required skills.

    Structured skills earn credit by tier; otherwise keywords, then a raw-text
    mention, earn fixed partial credit. A profile with no skills and no keywords
    is scored around the neutral value so text evidence can only add.
    """
    cfg = _config("factors.skills")
    required: list[str] = []
    for raw in job.required_skills:
        name = taxonomy.canonical_skill(raw)
        if name and name not in required:
            required.append(name)
    if not required:
        return _neutral("job lists no required skills")

    degraded = not profile.skills and not profile.keywords
    raw_text = _normalize(profile.raw_text)
    if degraded and not raw_text:
        return _neutral("no skills in profile")

    tier_credit = {**_DEFAULT_SKILL_TIERS, **(cfg.get("tiers") or {})}
    keyword_credit = _bounded(cfg.get("keyword_credit", 0.4))
    raw_text_credit = _bounded(cfg.get("raw_text_credit", 0.25))
    tiers = {taxonomy.canonical_skill(skill.name): skill.tier for skill in profile.skills}
    keywords = {taxonomy.canonical_skill(keyword) for keyword in profile.keywords}

    credits: list[float] = []
    matched: list[str] = []
    missing: list[str] = []
    for skill in required:
        if skill in tiers:
            credits.append(_bounded(tier_credit[tiers[skill]]))
        elif skill in keywords:
            credits.append(keyword_credit)
        elif contains_phrase(raw_text, skill):
            credits.append(raw_text_credit)
        else:
            credits.append(0.0)
            missing.append(skill)
            continue
        matched.append(skill)

    coverage = sum(credits) / len(required)
    if degraded:
        neutral = neutral_score()
        value = neutral + (1.0 - neutral) * coverage
        explanation = f"{len(matched)} of {len(required)} required skills found in resume text"
    else:
        value = coverage
        explanation = f"{len(matched)} of {len(required)} required skills matched"
    return FactorScore(
        value=_bounded(value),
        explanation=explanation,
        matched=tuple(matched),
        missing=tuple(missing),
    )


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def recency_score(job: JobPosting, now: datetime) -> FactorScore:
    if job.posted_at is None:
        return _neutral("posting date unknown")
    cfg = _config("factors.recency")
    half_life = float(cfg.get("half_life_days", 14) or 14)
    floor = _bounded(cfg.get("floor", 0.1))
    age_days = (_as_utc(now) - _as_utc(job.posted_at)).total_seconds() / _SECONDS_PER_DAY
    if age_days <= 0:
        return FactorScore(value=1.0, explanation="posted today")
    value = max(floor, 0.5 ** (age_days / half_life))
    return FactorScore(value=_bounded(value), explanation=f"posted {int(age_days)} days ago")


def signal_score(signals: tuple[str, ...], factor: str) -> FactorScore:
    vocabulary = [_normalize(str(term)) for term in get_scoring_value(f"factors.{factor}.vocabulary", []) or []]
    if not signals:
        return FactorScore(value=0.0, explanation=f"no {factor} signals declared")
    matched = tuple(
        signal for signal in signals if any(contains_phrase(_normalize(signal), term) for term in vocabulary if term)
    )
    return FactorScore(
        value=_bounded(len(matched) / len(signals)),
        explanation=f"{len(matched)} of {len(signals)} {factor} signals recognized",
        matched=matched,
    )

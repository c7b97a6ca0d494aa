from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from app.core.config.scoring import get_scoring_value
from app.schemas.profile import (
    EXPERIENCE_LEVELS,
    SKILL_TIERS,
    TIER_RANK,
    CandidateProfile,
    Experience,
    ExperienceLevel,
    Skill,
    SkillTier,
)
from app.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

from .utils import first_present, normalize_line, normalize_term, safe_non_negative_int, split_terms

logger = logging.getLogger(__name__)

_TIER_SYNONYMS: dict[str, SkillTier] = {
    "primary": "core",
    "expert": "core",
    "advanced": "core",
    "main": "core",
    "intermediate": "strong",
    "proficient": "strong",
    "secondary": "strong",
    "working": "strong",
    "basic": "peripheral",
    "familiar": "peripheral",
    "beginner": "peripheral",
    "exposure": "peripheral",
}
_LEVEL_SYNONYMS: dict[str, ExperienceLevel] = {
    "graduate": "entry",
    "grad": "entry",
    "intern": "entry",
    "entry-level": "entry",
    "entry level": "entry",
    "junior-level": "junior",
    "jr": "junior",
    "mid-level": "mid",
    "mid level": "mid",
    "intermediate": "mid",
    "sr": "senior",
    "senior-level": "senior",
    "principal": "lead",
    "staff": "lead",
    "manager": "lead",
    "head": "lead",
    "director": "lead",
}
_DEFAULT_LEVEL_MIN_YEARS = {"entry": 0, "junior": 1, "mid": 3, "senior": 6, "lead": 10}
_DEFAULT_LEVEL_TYPICAL_YEARS = {"entry": 0, "junior": 1, "mid": 4, "senior": 7, "lead": 10}
_PROFILE_FIELDS = ("skills", "titles", "jobTitles", "job_titles", "title", "keywords", "experience")
_MAX_SKILL_NAME_CHARS = 80
_MAX_SUGGESTED_LOCATIONS = 6
REMOTE_LOCATION = "Remote"


class MalformedDraftProfile(ValueError):
    """The assistant draft failed basic shape validation."""


def degraded_profile(raw_text: str) -> CandidateProfile:
    return CandidateProfile(raw_text=raw_text or "")


def profile_as_draft(profile: CandidateProfile) -> dict[str, Any]:
    return profile.model_dump(mode="json", by_alias=True)


def _coerce_draft(draft: Any) -> dict[str, Any]:
    if draft is None:
        raise MalformedDraftProfile("draft is empty")
    if isinstance(draft, BaseModel):
        draft = draft.model_dump(mode="json", by_alias=True)
    if isinstance(draft, (bytes, bytearray)):
        draft = draft.decode("utf-8", errors="replace")
    if isinstance(draft, str):
        if not draft.strip():
            raise MalformedDraftProfile("draft is empty")
        try:
            draft = json.loads(draft)
        except json.JSONDecodeError as exc:
            raise MalformedDraftProfile(f"draft is not valid JSON: {exc.msg}") from exc
    if not isinstance(draft, Mapping):
        raise MalformedDraftProfile(f"draft must be an object, got {type(draft).__name__}")

    payload = dict(draft)
    if not any(key in payload for key in _PROFILE_FIELDS):
        # Assistants sometimes wrap the profile in a single envelope key.
        nested = first_present(payload, "profile", "candidate", "candidateProfile", "candidate_profile")
        if isinstance(nested, Mapping):
            payload = dict(nested)
    if not any(key in payload for key in _PROFILE_FIELDS):
        raise MalformedDraftProfile("draft has no recognized profile fields")
    return payload


def coerce_tier(value: Any) -> SkillTier:
    normalized = normalize_term(value)
    if normalized in SKILL_TIERS:
        return normalized  # type: ignore[return-value]
    return _TIER_SYNONYMS.get(normalized, "peripheral")


def coerce_level(value: Any) -> ExperienceLevel | None:
    normalized = normalize_term(value)
    if normalized in EXPERIENCE_LEVELS:
        return normalized  # type: ignore[return-value]
    return _LEVEL_SYNONYMS.get(normalized)


def _skill_entries(value: Any) -> list[tuple[Any, Any]]:
    entries: list[tuple[Any, Any]] = []
    for item in split_terms(value):
        if isinstance(item, str):
            entries.append((item, None))
        elif isinstance(item, Mapping):
            entries.append((first_present(item, "name", "skill"), first_present(item, "tier", "confidence")))
    return entries


def normalize_skills(value: Any, taxonomy: TaxonomyProvider) -> tuple[Skill, ...]:
    """Merge skills case-insensitively, keeping first-seen order and the highest tier."""
    merged: dict[str, SkillTier] = {}
    for raw_name, raw_tier in _skill_entries(value):
        name = normalize_term(raw_name, max_len=_MAX_SKILL_NAME_CHARS)
        if not name:
            continue
        name = taxonomy.canonical_skill(name)
        tier = coerce_tier(raw_tier)
        current = merged.get(name)
        if current is None or TIER_RANK[tier] > TIER_RANK[current]:
            merged[name] = tier
    return tuple(Skill(name=name, tier=tier) for name, tier in merged.items())


def normalize_term_set(value: Any, taxonomy: TaxonomyProvider | None = None) -> tuple[str, ...]:
    terms: set[str] = set()
    for item in split_terms(value):
        term = normalize_term(item)
        if not term:
            continue
        terms.add(taxonomy.canonical_skill(term) if taxonomy else term)
    return tuple(sorted(terms))


def _level_from_years(years: int) -> ExperienceLevel:
    thresholds = get_scoring_value("experience.level_min_years", _DEFAULT_LEVEL_MIN_YEARS)
    level: ExperienceLevel = "entry"
    for candidate in EXPERIENCE_LEVELS:
        if years >= int(thresholds.get(candidate, _DEFAULT_LEVEL_MIN_YEARS[candidate])):
            level = candidate
    return level


def _typical_years(level: ExperienceLevel) -> int:
    typical = get_scoring_value("experience.level_typical_years", _DEFAULT_LEVEL_TYPICAL_YEARS)
    return int(typical.get(level, _DEFAULT_LEVEL_TYPICAL_YEARS[level]))


def normalize_experience(payload: Mapping[str, Any]) -> Experience | None:
    value = payload.get("experience")
    years_raw: Any = None
    level_raw: Any = None
    if isinstance(value, Mapping):
        years_raw = first_present(value, "years", "totalYears", "total_years")
        level_raw = first_present(value, "level", "seniority")
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        years_raw = value
    elif isinstance(value, str):
        if coerce_level(value):
            level_raw = value
        else:
            years_raw = value

    if years_raw is None:
        years_raw = first_present(payload, "yearsOfExperience", "years_of_experience")
    if level_raw is None:
        level_raw = first_present(payload, "experienceLevel", "experience_level", "seniority")

    years = safe_non_negative_int(years_raw)
    level = coerce_level(level_raw)
    if years is None and level is None:
        return None
    if level is None:
        level = _level_from_years(years or 0)
    if years is None:
        years = _typical_years(level)
    return Experience(years=years, level=level)


def derive_role_families(
    titles: tuple[str, ...],
    skills: tuple[Skill, ...],
    taxonomy: TaxonomyProvider,
) -> list[str]:
    order = taxonomy.family_order()
    from_titles: set[str] = set()
    for title in titles:
        from_titles.update(taxonomy.role_families_for_title(title))
    from_skills: set[str] = set()
    for skill in skills:
        if skill.tier in ("core", "strong"):
            from_skills.update(taxonomy.role_families_for_skill(skill.name))
    families = [family for family in order if family in from_titles]
    families.extend(family for family in order if family in from_skills and family not in from_titles)
    return families


def derive_suggested_roles(families: list[str], taxonomy: TaxonomyProvider) -> tuple[str, ...]:
    roles: list[str] = []
    for family in families:
        role = taxonomy.role_name(family)
        if role and role not in roles:
            roles.append(role)
    return tuple(roles)


def derive_suggested_locations(raw_text: str, families: list[str], taxonomy: TaxonomyProvider) -> tuple[str, ...]:
    locations = taxonomy.find_locations(raw_text)[:_MAX_SUGGESTED_LOCATIONS]
    mentions_remote = "remote" in normalize_line(raw_text).lower()
    if mentions_remote or any(taxonomy.is_remote_friendly(family) for family in families):
        locations.append(REMOTE_LOCATION)
    return tuple(locations)


def normalize_profile(
    raw_text: str,
    draft: Any,
    *,
    taxonomy: TaxonomyProvider | None = None,
) -> CandidateProfile:
    """Validate and repair an untrusted draft into a CandidateProfile.

    Never raises for bad drafts: an unusable draft yields a degraded profile that
    only carries the raw text, so scoring can still fall back to keyword scans.
    Suggested roles and locations are always re-derived, never copied from the
    draft, which keeps re-normalization idempotent.
    """
    text = raw_text or ""
    provider = taxonomy or get_default_taxonomy_provider()
    try:
        payload = _coerce_draft(draft)
    except MalformedDraftProfile as exc:
        logger.warning("profile_draft_malformed reason=%s text_chars=%s", exc, len(text))
        return degraded_profile(text)

    skills = normalize_skills(payload.get("skills"), provider)
    titles = normalize_term_set(first_present(payload, "titles", "jobTitles", "job_titles", "title"))
    keywords = normalize_term_set(payload.get("keywords"), provider)
    experience = normalize_experience(payload)
    if not (skills or titles or keywords or experience):
        logger.warning("profile_draft_empty text_chars=%s", len(text))
        return degraded_profile(text)

    families = derive_role_families(titles, skills, provider)

    profile = CandidateProfile(
        raw_text=text,
        skills=skills,
        titles=titles,
        keywords=keywords,
        experience=experience,
        suggested_locations=derive_suggested_locations(text, families, provider),
        suggested_roles=derive_suggested_roles(families, provider),
    )
    logger.info(
        "profile_normalized skills=%s titles=%s keywords=%s experience=%s",
        len(profile.skills),
        len(profile.titles),
        len(profile.keywords),
        profile.experience.level if profile.experience else "unknown",
    )
    return profile

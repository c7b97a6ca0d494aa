from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SkillTier = Literal["core", "strong", "peripheral"]
ExperienceLevel = Literal["entry", "junior", "mid", "senior", "lead"]

SKILL_TIERS: tuple[SkillTier, ...] = ("core", "strong", "peripheral")
EXPERIENCE_LEVELS: tuple[ExperienceLevel, ...] = ("entry", "junior", "mid", "senior", "lead")
TIER_RANK: dict[str, int] = {"core": 3, "strong": 2, "peripheral": 1}


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Skill(_FrozenModel):
    name: str = Field(min_length=1)
    tier: SkillTier = "peripheral"


class Experience(_FrozenModel):
    years: int = Field(ge=0)
    level: ExperienceLevel


class CandidateProfile(_FrozenModel):
    """Structured view of one resume.

    Set-like fields (titles, keywords) are stored deduplicated and sorted so two
    profiles built from the same draft compare equal. Only the normalizer is
    expected to build these.
    """

    raw_text: str = ""
    skills: tuple[Skill, ...] = ()
    titles: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    experience: Experience | None = None
    suggested_locations: tuple[str, ...] = ()
    suggested_roles: tuple[str, ...] = ()

    def has_structured_data(self) -> bool:
        return bool(self.skills or self.titles or self.keywords or self.experience)

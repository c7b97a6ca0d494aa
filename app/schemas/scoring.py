from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


class ScoreResult(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    total: float
    # Keys follow the canonical factor order; serialized with the same camelCase
    # names as ScoringWeights so clients can index one by the other.
    breakdown: dict[str, float]
    sub_scores: dict[str, float] = Field(default_factory=dict)
    explanations: dict[str, str] = Field(default_factory=dict)
    matched_skills: tuple[str, ...] = ()
    missing_skills: tuple[str, ...] = ()

    @field_serializer("breakdown", "sub_scores", "explanations")
    def _camel_factor_keys(self, value: dict) -> dict:
        return {to_camel(factor): item for factor, item in value.items()}


class RankedJob(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    rank: int = Field(ge=1)
    job_id: str | None = None
    title: str = ""
    role_hint: bool = False
    result: ScoreResult

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.core.config.scoring import get_scoring_value

logger = logging.getLogger(__name__)

# Canonical factor order; breakdowns and weight dumps follow it.
FACTORS: tuple[str, ...] = (
    "company_tier",
    "location",
    "title_match",
    "skills",
    "sponsorship",
    "recency",
    "culture",
    "quality",
)
# Fallbacks for the `weights` table in scoring.yaml.
WEIGHT_MIN = 0.0
WEIGHT_MAX = 2.0
DEFAULT_WEIGHT = 1.0

_FACTOR_ALIASES: dict[str, str] = {to_camel(factor): factor for factor in FACTORS}
_FACTOR_ALIASES.update({factor: factor for factor in FACTORS})


class InvalidWeight(ValueError):
    def __init__(self, factor: str, value: Any):
        super().__init__(f"invalid weight for '{factor}': {value!r}")
        self.factor = factor
        self.value = value


def _config_number(path: str, fallback: float) -> float:
    value = get_scoring_value(path, fallback)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        return fallback
    return float(value)


def weight_bounds() -> tuple[float, float]:
    low = _config_number("weights.min", WEIGHT_MIN)
    high = _config_number("weights.max", WEIGHT_MAX)
    if low > high:
        return WEIGHT_MIN, WEIGHT_MAX
    return low, high


def default_weight() -> float:
    return clamp_weight(_config_number("weights.default", DEFAULT_WEIGHT))


def clamp_weight(value: float) -> float:
    low, high = weight_bounds()
    return max(low, min(high, value))


def coerce_weight(factor: str, value: Any) -> float:
    """Return a clamped weight or raise InvalidWeight for non-numeric input."""
    if isinstance(value, bool) or value is None:
        raise InvalidWeight(factor, value)
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError as exc:
            raise InvalidWeight(factor, value) from exc
    if not isinstance(value, (int, float)):
        raise InvalidWeight(factor, value)
    number = float(value)
    if math.isnan(number):
        raise InvalidWeight(factor, value)
    return clamp_weight(number)


def _recover_weight(factor: str, value: Any) -> float:
    try:
        return coerce_weight(factor, value)
    except InvalidWeight as exc:
        fallback = default_weight()
        logger.warning("scoring_weight_invalid factor=%s fallback=%s: %s", factor, fallback, exc)
        return fallback


class ScoringWeights(BaseModel):
    """Immutable per-factor multipliers, clamped to the `weights` range in scoring.yaml ([0, 2]).

    The configured default (1.0) is neutral.

    Construction never fails on out-of-range or junk values: they are clamped or
    replaced by the default, since weights come straight from user sliders.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    company_tier: float = Field(default_factory=default_weight)
    location: float = Field(default_factory=default_weight)
    title_match: float = Field(default_factory=default_weight)
    skills: float = Field(default_factory=default_weight)
    sponsorship: float = Field(default_factory=default_weight)
    recency: float = Field(default_factory=default_weight)
    culture: float = Field(default_factory=default_weight)
    quality: float = Field(default_factory=default_weight)

    @field_validator(*FACTORS, mode="before")
    @classmethod
    def _clamp(cls, value: Any, info: Any) -> float:
        return _recover_weight(info.field_name, value)

    def weight(self, factor: str) -> float:
        name = _FACTOR_ALIASES.get(factor)
        if name is None:
            raise KeyError(f"unknown scoring factor '{factor}'")
        return float(getattr(self, name))

    def with_weight(self, factor: str, value: Any) -> ScoringWeights:
        name = _FACTOR_ALIASES.get(factor)
        if name is None:
            raise KeyError(f"unknown scoring factor '{factor}'")
        values = self.as_dict()
        values[name] = _recover_weight(name, value)
        return ScoringWeights(**values)

    def reset(self) -> ScoringWeights:
        return default_weights()

    def as_dict(self) -> dict[str, float]:
        return {factor: float(getattr(self, factor)) for factor in FACTORS}


def default_weights() -> ScoringWeights:
    return ScoringWeights()


def normalize_weights(raw: ScoringWeights | Mapping[str, Any] | None) -> ScoringWeights:
    """Build weights from user input: unknown keys ignored, missing keys take the configured default."""
    if raw is None:
        return default_weights()
    if isinstance(raw, ScoringWeights):
        return ScoringWeights(**raw.as_dict())
    if not isinstance(raw, Mapping):
        logger.warning("scoring_weights_malformed type=%s", type(raw).__name__)
        return default_weights()

    values: dict[str, Any] = {}
    for key, value in raw.items():
        factor = _FACTOR_ALIASES.get(str(key))
        if factor is None:
            continue
        values[factor] = value
    return ScoringWeights(**values)

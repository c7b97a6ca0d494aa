from .engine import rank_jobs, score
from .weights import (
    FACTORS,
    InvalidWeight,
    ScoringWeights,
    default_weights,
    normalize_weights,
)

__all__ = [
    "FACTORS",
    "InvalidWeight",
    "ScoringWeights",
    "default_weights",
    "normalize_weights",
    "rank_jobs",
    "score",
]

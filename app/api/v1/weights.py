from typing import Any

from fastapi import APIRouter, Body, Request

from app.core.rate_limit import rate_limit
from app.scoring import ScoringWeights, default_weights, normalize_weights

router = APIRouter()


@router.get("/weights/defaults", response_model=ScoringWeights)
async def weights_defaults():
    return default_weights()


@router.post(
    "/weights/normalize",
    response_model=ScoringWeights,
    description="Clamp client weights into range and fill missing factors with the default.",
)
@rate_limit()
async def weights_normalize(request: Request, payload: dict[str, Any] | None = Body(default=None)):
    _ = request
    return normalize_weights(payload)

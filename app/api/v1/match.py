from fastapi import APIRouter, Request

from app.core.rate_limit import rate_limit
from app.schemas.api import ScoreJobsRequest, ScoreJobsResponse
from app.services.match_service import score_jobs

router = APIRouter()


@router.post(
    "/match/score",
    response_model=ScoreJobsResponse,
    summary="Score jobs",
    description="Score and rank job postings for a candidate profile under the given factor weights.",
)
@rate_limit()
def score_jobs_endpoint(request: Request, payload: ScoreJobsRequest):
    _ = request
    return score_jobs(payload)

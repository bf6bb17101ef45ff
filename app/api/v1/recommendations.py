from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.ai.factory import get_completion_client
from app.ai.types import CompletionClient
from app.core.rate_limit import llm_rate_limit
from app.schemas.recommendations import RecommendationsRequest, RecommendationsResponse
from app.services.recommendation_service import recommend_jobs

router = APIRouter()


@router.post("/job-recommendations", response_model=RecommendationsResponse)
@llm_rate_limit()
async def job_recommendations(
    request: Request,
    payload: RecommendationsRequest,
    client: CompletionClient = Depends(get_completion_client),
):
    _ = request
    resume_text = (payload.resume_data.text or "").strip() if payload.resume_data else ""
    if not resume_text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Resume text is required")
    return await recommend_jobs(
        client,
        resume_text=resume_text,
        job_position=payload.job_position,
        job_field=payload.job_field,
    )

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.ai.factory import get_completion_client
from app.ai.types import CompletionClient
from app.core.rate_limit import llm_rate_limit
from app.schemas.interview import AnswerRequest, InterviewFeedback, QuestionRequest, QuestionResponse
from app.services.interview_service import analyze_answer, generate_question

router = APIRouter()


@router.post("/interview/question", response_model=QuestionResponse)
@router.post("/interview/generate-question", response_model=QuestionResponse, include_in_schema=False)
@llm_rate_limit()
async def interview_question(
    request: Request,
    payload: QuestionRequest,
    client: CompletionClient = Depends(get_completion_client),
):
    _ = request
    question = await generate_question(
        client,
        resume=payload.resume_data,
        previous_questions=payload.previous_questions,
        question_count=payload.question_count,
        job_position=payload.job_position,
        job_field=payload.job_field,
    )
    return QuestionResponse(question=question)


@router.post("/interview/analyze-response", response_model=InterviewFeedback)
@llm_rate_limit()
async def interview_analyze_response(
    request: Request,
    payload: AnswerRequest,
    client: CompletionClient = Depends(get_completion_client),
):
    _ = request
    if not payload.transcript.strip() or not payload.question.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Transcript and question are required",
        )
    return await analyze_answer(
        client,
        transcript=payload.transcript,
        question=payload.question,
        resume=payload.resume_data,
    )

from __future__ import annotations

import logging
import re
from typing import Any

from pydantic import ValidationError

from app.ai.errors import UpstreamServiceError, UpstreamTimeoutError
from app.ai.types import ChatMessage, CompletionClient
from app.schemas.recommendations import JobRecommendation, RecommendationsResponse
from app.services.completion_json import extract_json_payload, loads_or_none

logger = logging.getLogger(__name__)

RECOMMENDATION_TEMPERATURE = 0.5
RECOMMENDATION_MAX_TOKENS = 1000
MAX_RECOMMENDATIONS = 5
RESUME_EXCERPT_CHARS = 4000

_EMBEDDED_ARRAY_RE = re.compile(r"\[\s*\{.*\}\s*\]", re.DOTALL)

FALLBACK_RECOMMENDATIONS = (
    JobRecommendation(
        title="Software Engineering Intern",
        company="Google",
        description=(
            "A program designed for students to gain hands-on experience in software development, "
            "contributing to real projects under mentorship."
        ),
        match_score=85,
        skills=["Problem-solving", "Python", "Collaborative projects"],
        why_match=(
            "This role leverages your problem-solving skills and technical knowledge. It offers mentorship "
            "and hands-on experience, which is ideal for your career stage."
        ),
    ),
    JobRecommendation(
        title="Junior Software Developer",
        company="Microsoft",
        description=(
            "An entry-level position focused on developing and maintaining software solutions, requiring "
            "foundational programming skills and a collaborative mindset."
        ),
        match_score=80,
        skills=["Critical thinking", "Team collaboration", "Programming"],
        why_match=(
            "This role suits your technical background and critical thinking skills, offering growth "
            "opportunities in a collaborative environment."
        ),
    ),
)


def _fallback(note: str) -> RecommendationsResponse:
    return RecommendationsResponse(
        recommendations=list(FALLBACK_RECOMMENDATIONS),
        source="fallback",
        note=note,
    )


def _candidate_items(payload: Any) -> list[Any] | None:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        if "title" in payload:
            return [payload]
        if isinstance(payload.get("recommendations"), list):
            return payload["recommendations"]
        for value in payload.values():
            if isinstance(value, list):
                return value
    return None


def parse_recommendations(text: str) -> list[JobRecommendation]:
    """Accept an array, an object holding an array, or an array embedded in prose."""
    items = _candidate_items(extract_json_payload(text, prefer="["))
    if items is None:
        match = _EMBEDDED_ARRAY_RE.search(text or "")
        items = _candidate_items(loads_or_none(match.group(0))) if match else None
    if not items:
        return []

    recommendations: list[JobRecommendation] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            recommendations.append(JobRecommendation.model_validate(item))
        except ValidationError:
            logger.debug("job_recommendation_item_invalid keys=%s", sorted(item))
            continue
        if len(recommendations) >= MAX_RECOMMENDATIONS:
            break
    return recommendations


async def recommend_jobs(
    client: CompletionClient,
    *,
    resume_text: str,
    job_position: str = "",
    job_field: str = "",
) -> RecommendationsResponse:
    excerpt = resume_text.strip()[:RESUME_EXCERPT_CHARS]
    prompt = (
        "Analyze the resume text and preferences below and recommend the most suitable job positions.\n\n"
        f"RESUME TEXT:\n{excerpt}\n\n"
        "JOB PREFERENCES:\n"
        f"- Position Type: {job_position.strip() or 'Not specified'}\n"
        f"- Industry: {job_field.strip() or 'Not specified'}\n\n"
        'Respond with a JSON object of the form {"recommendations": [...]} holding 3 to 5 objects, each with:\n'
        "- title (string)\n"
        "- company (string)\n"
        "- description (string)\n"
        "- matchScore (number between 65-95)\n"
        "- skills (array of 3-5 strings)\n"
        "- whyMatch (string)"
    )
    messages = [
        ChatMessage(
            role="system",
            content=(
                "You are a job matching specialist who provides accurate job recommendations based on "
                "resume analysis. You respond with only valid JSON."
            ),
        ),
        ChatMessage(role="user", content=prompt),
    ]

    try:
        completion = await client.complete(
            messages,
            temperature=RECOMMENDATION_TEMPERATURE,
            max_tokens=RECOMMENDATION_MAX_TOKENS,
            json_mode=True,
        )
    except (UpstreamTimeoutError, UpstreamServiceError) as exc:
        logger.warning("job_recommendations_llm_failed code=%s: %s", exc.code, exc)
        return _fallback("Using fallback recommendations because the AI service is unavailable.")

    recommendations = parse_recommendations(completion)
    if not recommendations:
        logger.warning("job_recommendations_invalid_output output_chars=%s", len(completion))
        return _fallback("Using fallback recommendations due to invalid AI response.")

    logger.info("job_recommendations_ok count=%s", len(recommendations))
    return RecommendationsResponse(recommendations=recommendations, source="ai")

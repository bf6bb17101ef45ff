from __future__ import annotations

import logging
import time

from app.ai.types import CompletionClient
from app.analysis.parser import parse_completion
from app.analysis.prompt import build_roast_messages
from app.core.config import settings
from app.parsing.parse import extract_text
from app.schemas.analysis import AnalysisRequest, AnalysisResult

logger = logging.getLogger(__name__)

ANALYSIS_TEMPERATURE = 0.7
ANALYSIS_MAX_TOKENS = 1500


class EmptyResumeError(ValueError):
    code = "empty_resume"


def truncate_resume(text: str, max_chars: int | None = None) -> str:
    limit = max_chars if max_chars is not None else settings.max_resume_chars
    cleaned = text.strip()
    if limit <= 0 or len(cleaned) <= limit:
        return cleaned
    return cleaned[:limit].rstrip() + "\n[...]"


async def analyze_resume(client: CompletionClient, request: AnalysisRequest) -> AnalysisResult:
    started = time.perf_counter()
    messages = build_roast_messages(
        truncate_resume(request.resume_text),
        request.intensity,
        request.job_position,
        request.job_field,
    )
    completion = await client.complete(
        messages,
        temperature=ANALYSIS_TEMPERATURE,
        max_tokens=ANALYSIS_MAX_TOKENS,
    )
    result = parse_completion(completion, request.intensity, job_position=request.job_position)
    logger.info(
        "analysis_completed intensity=%s valid_resume=%s score=%s grade=%s latency_ms=%s",
        request.intensity,
        result.is_valid_resume,
        result.score,
        result.letter_grade.split()[0],
        int((time.perf_counter() - started) * 1000),
    )
    return result


async def analyze_upload(
    client: CompletionClient,
    *,
    filename: str,
    content: bytes,
    intensity: str = "medium",
    job_position: str | None = None,
    job_field: str | None = None,
) -> AnalysisResult:
    parsed = extract_text(filename, content)
    for warning in parsed.parsing_warnings:
        logger.warning("resume_extract_warning doc_id=%s source=%s: %s", parsed.doc_id, parsed.source_type, warning)
    if parsed.is_empty:
        raise EmptyResumeError("Could not extract text from the file.")

    logger.info(
        "resume_extracted doc_id=%s source=%s chars=%s",
        parsed.doc_id,
        parsed.source_type,
        len(parsed.text),
    )
    request = AnalysisRequest(
        resume_text=parsed.text,
        intensity=intensity,
        job_position=(job_position or "").strip() or None,
        job_field=(job_field or "").strip() or None,
    )
    return await analyze_resume(client, request)

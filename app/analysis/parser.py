"""Turns a free-form roast completion into an ``AnalysisResult``.

The model is asked for marker lines (``SCORE:``, ``LETTER GRADE:``, ``REJECTION LETTER:``,
``FEEDBACK POINTS:``, ``CONSTRUCTIVE FEEDBACK:``) but nothing about its output is trusted.
Score floors and the letter grade are recomputed here, and every section has a fallback,
so ``parse_completion`` always returns a complete result and never raises.
"""
from __future__ import annotations

import logging
import re

from app.analysis.cleaning import clean_items, strip_markdown
from app.analysis.grading import apply_score_floor, default_score, letter_grade_for
from app.analysis.letter import normalize_rejection_letter
from app.analysis.sections import (
    CONSTRUCTIVE_FEEDBACK,
    DEFAULT_CONSTRUCTIVE_FEEDBACK,
    DEFAULT_FEEDBACK_POINTS,
    FEEDBACK_POINTS,
    REJECTION_LETTER,
    extract_section,
)
from app.core.config.scoring import get_scoring_value
from app.schemas.analysis import AnalysisResult

logger = logging.getLogger(__name__)

_RESUME_GATE_RE = re.compile(r"IS\s+THIS\s+A\s+RESUME\s*\??[\s*_:\-]*(YES|NO)\b", re.IGNORECASE)
_SCORE_RE = re.compile(r"\bSCORE[ \t*_]*:[ \t*_]*(\d{1,3})(?!\d)", re.IGNORECASE)
_GRADE_LINE_RE = re.compile(r"\bLETTER\s+GRADE[ \t*_]*:[ \t*_]*(?P<rest>[^\n]*)", re.IGNORECASE)
_GRADE_TOKEN_RE = re.compile(r"^[A-F](?:[+\-−–](?![\w]))?(?![A-Za-z])")
_EXPLANATION_TRIM = " \t-–—:|,.*_"

NOT_A_RESUME_RESULT = AnalysisResult(
    score=0,
    letter_grade="F-",
    rejection_letter=(
        "Subject: Regarding Your Recent Submission\n\n"
        "Dear Applicant,\n\n"
        "Thank you for your submission. Unfortunately, the document you uploaded does not "
        "appear to be a resume, so there was nothing for us to review.\n\n"
        "Please upload your actual resume and we will be happy to reject it properly.\n\n"
        "Best regards,\nThe Rejection Bot"
    ),
    feedback_points=(
        "The uploaded document does not appear to be a resume.",
        "No work experience, education or skills sections were found.",
        "We cannot evaluate a document that is not a resume.",
    ),
    constructive_feedback=(
        "Upload your resume as a PDF or plain text file.",
        "Make sure the document includes your experience, education and skills.",
        "Check that the file is not empty, scanned or password protected.",
    ),
    is_valid_resume=False,
)


def is_not_a_resume(text: str) -> bool:
    return any(match.group(1).upper() == "NO" for match in _RESUME_GATE_RE.finditer(text))


def extract_score(text: str, intensity: str) -> int:
    match = _SCORE_RE.search(text)
    if match:
        score = int(match.group(1))
    else:
        score = default_score()
        logger.info("analysis_parse_degraded section=score tier=default")
    return apply_score_floor(score, intensity)


def grade_explanation(text: str) -> str:
    """Text the model wrote after its own grade letter on the LETTER GRADE line."""
    match = _GRADE_LINE_RE.search(text)
    if not match:
        return ""
    rest = strip_markdown(match.group("rest")).strip()
    rest = _GRADE_TOKEN_RE.sub("", rest).strip(_EXPLANATION_TRIM)
    if rest.startswith("(") and rest.endswith(")"):
        rest = rest[1:-1].strip(_EXPLANATION_TRIM)
    if not any(ch.isalnum() for ch in rest):
        return ""
    return rest


def derive_letter_grade(text: str, score: int) -> str:
    grade = letter_grade_for(score)
    explanation = grade_explanation(text)
    return f"{grade} - {explanation}" if explanation else grade


def _section_items(text: str, name: str, section: str, defaults: tuple[str, ...]) -> tuple[str, ...]:
    limit = int(get_scoring_value("sections.max_items", 5))

    def accept(body: str) -> bool:
        return bool(clean_items(body.splitlines(), section=section, limit=limit))

    match = extract_section(text, name, accept=accept)
    items = clean_items(match.text.splitlines(), section=section, limit=limit)
    return tuple(items) if items else defaults


def parse_completion(text: str, intensity: str = "medium", *, job_position: str | None = None) -> AnalysisResult:
    raw = text or ""
    if is_not_a_resume(raw):
        logger.info("analysis_not_a_resume")
        return NOT_A_RESUME_RESULT

    score = extract_score(raw, intensity)
    letter_grade = derive_letter_grade(raw, score)
    feedback_points = _section_items(raw, FEEDBACK_POINTS, "feedback_points", DEFAULT_FEEDBACK_POINTS)
    constructive = _section_items(raw, CONSTRUCTIVE_FEEDBACK, "constructive_feedback", DEFAULT_CONSTRUCTIVE_FEEDBACK)
    letter_match = extract_section(raw, REJECTION_LETTER)
    rejection_letter = normalize_rejection_letter(
        letter_match.text,
        letter_grade=letter_grade,
        job_position=job_position,
    )

    return AnalysisResult(
        score=score,
        letter_grade=letter_grade,
        rejection_letter=rejection_letter,
        feedback_points=feedback_points,
        constructive_feedback=constructive,
        is_valid_resume=True,
    )

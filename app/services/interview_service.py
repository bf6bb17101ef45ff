from __future__ import annotations

import logging
import random
import re
from typing import Sequence

from pydantic import ValidationError

from app.ai.errors import UpstreamServiceError, UpstreamTimeoutError
from app.ai.types import ChatMessage, CompletionClient
from app.schemas.interview import InterviewFeedback, ResumeContext
from app.services.completion_json import extract_json_payload

logger = logging.getLogger(__name__)

DEFAULT_QUESTIONS = (
    "Tell me about a challenging project you worked on and how you overcame obstacles.",
    "Describe a situation where you had to learn a new skill quickly. How did you approach it?",
    "What unique skills or perspectives do you bring to a team?",
    "How do you prioritize tasks when dealing with multiple deadlines?",
    "Describe a time when you received constructive criticism. How did you respond to it?",
    "Tell me about a time when you had to work with a difficult team member. How did you handle the situation?",
    "What do you consider your greatest professional achievement and why?",
    "Describe a situation where you had to make a difficult decision with limited information.",
    "How do you stay current with industry trends and developments in your field?",
    "Tell me about a time when you failed at something. What did you learn from the experience?",
)

_INAPPROPRIATE_TERMS = (
    "fuck", "shit", "ass", "bitch", "dick", "pussy", "cock", "cunt",
    "whore", "slut", "bastard", "damn", "hell", "sex", "porn",
)
_INAPPROPRIATE_RE = re.compile(
    r"\b(?:" + "|".join(_INAPPROPRIATE_TERMS) + r")(?:s|es|ing|ed|ty)?\b",
    re.IGNORECASE,
)

INAPPROPRIATE_FEEDBACK = InterviewFeedback(
    feedback=(
        "Your response contains inappropriate language or content. "
        "Please keep your answers professional and respectful."
    ),
    score=2,
    is_professional=False,
    strengths=["None identified due to inappropriate content"],
    improvements=[
        "Remove inappropriate language",
        "Focus on professional communication",
        "Address the question directly with relevant experience",
    ],
)

QUESTION_TEMPERATURE = 0.7
QUESTION_MAX_TOKENS = 150
ANSWER_TEMPERATURE = 0.5
ANSWER_MAX_TOKENS = 800


def _grade_letter(resume: ResumeContext | None) -> str:
    if resume is None or not resume.letter_grade:
        return ""
    parts = resume.letter_grade.split()
    return parts[0] if parts else ""


def _resume_summary(resume: ResumeContext | None) -> str:
    if resume is None:
        return ""
    summary = f"The candidate's resume scored {resume.score or 0}/100"
    grade = _grade_letter(resume)
    if grade:
        summary += f" (Grade: {grade})"
    summary += ". "
    if resume.feedback_points:
        summary += f"Key feedback points from their resume review: {'; '.join(resume.feedback_points[:3])}. "
    return summary


def _job_summary(job_position: str, job_field: str) -> str:
    if job_position and job_field:
        return f'The candidate is applying for a "{job_position}" position in the {job_field} field.'
    if job_position:
        return f'The candidate is applying for a "{job_position}" position.'
    if job_field:
        return f"The candidate is applying for a position in the {job_field} field."
    return ""


def fallback_question_pool(
    *,
    resume: ResumeContext | None,
    job_position: str,
    job_field: str,
) -> list[str]:
    pool: list[str] = []
    if job_position:
        pool += [
            f"What specifically attracts you to a {job_position} role?",
            f"What skills do you think are most important for success as a {job_position}?",
            f"Describe a challenge you might face as a {job_position} and how you would address it.",
        ]
    if job_field:
        pool += [
            f"How do you stay current with trends in the {job_field} industry?",
            f"What do you think is the biggest challenge facing the {job_field} industry today?",
            f"Where do you see the {job_field} field heading in the next 5 years?",
        ]
    if resume is not None and resume.score:
        grade = _grade_letter(resume) or "C"
        pool += [
            f"Your resume scored {resume.score}/100. What specific experiences would you highlight that weren't fully captured in your resume?",
            f"With a resume grade of {grade}, what areas of your professional background do you think are the strongest?",
            "Based on your resume analysis, what skills have you been developing recently to improve your professional profile?",
        ]
    pool += list(DEFAULT_QUESTIONS)
    return pool


def pick_fallback_question(
    pool: Sequence[str],
    previous_questions: Sequence[str],
    rng: random.Random | None = None,
) -> str:
    unused = [q for q in pool if not any(q[:20] in prev for prev in previous_questions)]
    chooser = rng or random
    return chooser.choice(unused or list(pool))


async def generate_question(
    client: CompletionClient,
    *,
    resume: ResumeContext | None = None,
    previous_questions: Sequence[str] = (),
    question_count: int = 1,
    job_position: str = "",
    job_field: str = "",
    rng: random.Random | None = None,
) -> str:
    job_position = job_position.strip()
    job_field = job_field.strip()
    system = (
        "You are an expert interviewer who crafts challenging and insightful interview questions "
        "tailored to a candidate's resume and the position they're applying for.\n\n"
        "Your questions should be directly relevant to the candidate's background and target role, "
        "address weaknesses identified in their resume analysis, be open-ended and behavioral, "
        "and never be answerable with a simple yes or no.\n\n"
        f"{_resume_summary(resume)}\n{_job_summary(job_position, job_field)}\n\n"
        "You must generate ONE interview question only in plain text - no additional commentary or explanation."
    )
    user = f"Generate interview question #{question_count} for this candidate."
    if previous_questions:
        user += f" Previous questions asked: {'; '.join(previous_questions)}"

    question = ""
    try:
        completion = await client.complete(
            [ChatMessage(role="system", content=system), ChatMessage(role="user", content=user)],
            temperature=QUESTION_TEMPERATURE,
            max_tokens=QUESTION_MAX_TOKENS,
        )
        question = completion.strip().strip('"').strip()
    except (UpstreamTimeoutError, UpstreamServiceError) as exc:
        logger.warning("interview_question_llm_failed code=%s: %s", exc.code, exc)

    if question:
        return question

    logger.info("interview_question_fallback previous=%s", len(previous_questions))
    pool = fallback_question_pool(resume=resume, job_position=job_position, job_field=job_field)
    return pick_fallback_question(pool, previous_questions, rng)


def is_inappropriate(transcript: str) -> bool:
    return bool(_INAPPROPRIATE_RE.search(transcript or ""))


def fallback_feedback(transcript: str) -> InterviewFeedback:
    if is_inappropriate(transcript):
        return INAPPROPRIATE_FEEDBACK
    if len(transcript.split()) < 20:
        return InterviewFeedback(
            feedback=(
                "Your response is very brief. For interview questions, it's typically better to provide "
                "more detailed answers that showcase your experience and skills."
            ),
            score=4,
            is_professional=True,
            strengths=["Concise communication"],
            improvements=[
                "Elaborate with specific examples",
                "Provide more context",
                "Structure answer with situation, task, action, result",
            ],
        )
    return InterviewFeedback(
        feedback=(
            "Your answer addressed the question, but could benefit from more specific examples and "
            "structured delivery. Consider using the STAR method (Situation, Task, Action, Result) "
            "for interview responses."
        ),
        score=6,
        is_professional=True,
        strengths=["Addressed the question", "Used professional language"],
        improvements=[
            "Include more specific examples",
            "Quantify achievements when possible",
            "Structure your answer more clearly",
        ],
    )


async def analyze_answer(
    client: CompletionClient,
    *,
    transcript: str,
    question: str,
    resume: ResumeContext | None = None,
) -> InterviewFeedback:
    if is_inappropriate(transcript):
        logger.info("interview_answer_inappropriate words=%s", len(transcript.split()))
        return INAPPROPRIATE_FEEDBACK

    if resume is not None:
        resume_context = (
            f"The user's resume has a score of {resume.score if resume.score is not None else 'unknown'}/100. "
            f"Resume feedback: {resume.feedback or '; '.join(resume.feedback_points[:3]) or 'No specific feedback available'}."
        )
    else:
        resume_context = "No resume data is available."

    system = (
        "You are an interview analysis assistant. Analyze the user's response to the given interview "
        "question. Provide constructive feedback, rate the answer out of 10, check if it's professional, "
        f"and list strengths and areas for improvement. {resume_context}"
    )
    user = (
        f'Question: "{question}"\n\nResponse: "{transcript}"\n\n'
        "Analyze this interview response in JSON format with the following structure:\n"
        "{\n"
        '  "feedback": "Overall feedback with 2-3 specific points",\n'
        '  "score": <number between 1-10>,\n'
        '  "isProfessional": <boolean>,\n'
        '  "strengths": ["strength1", "strength2"],\n'
        '  "improvements": ["improvement1", "improvement2"]\n'
        "}"
    )

    try:
        completion = await client.complete(
            [ChatMessage(role="system", content=system), ChatMessage(role="user", content=user)],
            temperature=ANSWER_TEMPERATURE,
            max_tokens=ANSWER_MAX_TOKENS,
            json_mode=True,
        )
    except (UpstreamTimeoutError, UpstreamServiceError) as exc:
        logger.warning("interview_answer_llm_failed code=%s: %s", exc.code, exc)
        return fallback_feedback(transcript)

    payload = extract_json_payload(completion)
    if not isinstance(payload, dict):
        logger.warning("interview_answer_invalid_json output_chars=%s", len(completion))
        return fallback_feedback(transcript)
    try:
        return InterviewFeedback.model_validate(payload)
    except ValidationError as exc:
        logger.warning("interview_answer_invalid_schema errors=%s", exc.error_count())
        return fallback_feedback(transcript)

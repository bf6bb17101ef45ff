from __future__ import annotations

from pydantic import Field, field_validator

from app.schemas.base import CamelModel


class ResumeContext(CamelModel):
    """Subset of a previous analysis the interview features can lean on."""

    score: int | None = None
    letter_grade: str | None = None
    feedback_points: list[str] = Field(default_factory=list)
    feedback: str | None = None
    text: str | None = None


class QuestionRequest(CamelModel):
    resume_data: ResumeContext | None = None
    previous_questions: list[str] = Field(default_factory=list, max_length=50)
    question_count: int = Field(default=1, ge=1, le=50)
    job_position: str = ""
    job_field: str = ""


class QuestionResponse(CamelModel):
    question: str


class AnswerRequest(CamelModel):
    transcript: str = Field(default="", max_length=20000)
    question: str = Field(default="", max_length=2000)
    resume_data: ResumeContext | None = None


class InterviewFeedback(CamelModel):
    feedback: str
    score: int = Field(ge=1, le=10)
    is_professional: bool = True
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)

    @field_validator("score", mode="before")
    @classmethod
    def _clamp_score(cls, value):
        try:
            number = int(round(float(value)))
        except (TypeError, ValueError):
            return value
        return max(1, min(10, number))

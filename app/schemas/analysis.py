from __future__ import annotations

from typing import Literal, get_args

from pydantic import ConfigDict, Field

from app.schemas.base import CamelModel

Intensity = Literal["mild", "medium", "savage"]
INTENSITIES: tuple[str, ...] = get_args(Intensity)


class AnalysisRequest(CamelModel):
    resume_text: str = Field(min_length=1)
    intensity: Intensity = "medium"
    job_position: str | None = None
    job_field: str | None = None


class AnalysisResult(CamelModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    letter_grade: str
    rejection_letter: str = Field(min_length=1)
    feedback_points: tuple[str, ...] = Field(min_length=1, max_length=5)
    constructive_feedback: tuple[str, ...] = Field(min_length=1, max_length=5)
    is_valid_resume: bool = True

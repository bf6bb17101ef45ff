from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator

from app.schemas.base import CamelModel
from app.schemas.interview import ResumeContext


class JobRecommendation(CamelModel):
    title: str = Field(min_length=1)
    company: str = ""
    description: str = ""
    match_score: int = Field(default=70, ge=0, le=100)
    skills: list[str] = Field(default_factory=list)
    why_match: str = ""

    @field_validator("match_score", mode="before")
    @classmethod
    def _clamp_match_score(cls, value):
        try:
            number = int(round(float(value)))
        except (TypeError, ValueError):
            return value
        return max(0, min(100, number))

    @field_validator("skills", mode="before")
    @classmethod
    def _coerce_skills(cls, value):
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


class RecommendationsRequest(CamelModel):
    resume_data: ResumeContext | None = None
    job_position: str = ""
    job_field: str = ""


class RecommendationsResponse(CamelModel):
    recommendations: list[JobRecommendation]
    source: Literal["ai", "fallback"]
    note: str | None = None

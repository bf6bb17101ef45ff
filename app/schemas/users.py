from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from app.schemas.base import CamelModel


class UserCreate(CamelModel):
    username: str = Field(min_length=1, max_length=80)
    email: str = Field(min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class User(CamelModel):
    id: int
    username: str
    email: str
    created_at: datetime


class SavedAnalysisCreate(CamelModel):
    resume_id: str = ""
    score: int | None = Field(default=None, ge=0, le=100)
    letter_grade: str = ""
    feedback: list[str] = Field(default_factory=list)
    rejection_letter: str = ""
    job_position: str | None = None
    job_field: str | None = None


class SavedAnalysis(SavedAnalysisCreate):
    created_at: datetime


class SavedAnalysesResponse(CamelModel):
    saved_resumes: list[SavedAnalysis]

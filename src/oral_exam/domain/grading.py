"""Models for LLM grading results."""

from pydantic import BaseModel, Field


class GradeResult(BaseModel):
    """Structured output for grading a defense."""

    grade: str = Field(min_length=1)
    comments: str


class GradeOutcome(BaseModel):
    """Per-session result of a batch grading run."""

    code: str
    success: bool
    grade: str | None = None
    error: str | None = None

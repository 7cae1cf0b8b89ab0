"""Pydantic models for inbound payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class SubmissionRequest(BaseModel):
    """Paper submitted from the student form."""

    name: str = ""
    essay: str = ""


class TranscriptData(BaseModel):
    """Conversation data posted by the voice agent platform."""

    model_config = ConfigDict(extra="ignore")

    conversation_id: str | None = None
    # A list of {role, message} entries; anything else is kept as its string form.
    transcript: Any


class TranscriptWebhook(BaseModel):
    """Post-call webhook envelope."""

    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    data: TranscriptData


class ReviewRequest(BaseModel):
    """Instructor decision recorded on a graded session."""

    final_grade: str
    instructor_notes: str | None = None

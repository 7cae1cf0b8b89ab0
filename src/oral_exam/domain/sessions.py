"""Domain models for defense sessions."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class SessionStatus(StrEnum):
    """Lifecycle states of a defense session, in their fixed order."""

    SUBMITTED = "Submitted"
    DEFENSE_STARTED = "DefenseStarted"
    DEFENSE_COMPLETE = "DefenseComplete"
    GRADED = "Graded"
    REVIEWED = "Reviewed"


STATUS_ORDER: tuple[SessionStatus, ...] = (
    SessionStatus.SUBMITTED,
    SessionStatus.DEFENSE_STARTED,
    SessionStatus.DEFENSE_COMPLETE,
    SessionStatus.GRADED,
    SessionStatus.REVIEWED,
)


@dataclass(frozen=True)
class SessionRecord:
    """Represents a persisted defense session keyed by its access code."""

    code: str
    student_name: str
    paper_text: str
    status: SessionStatus
    submitted_at: datetime
    defense_started_at: datetime | None = None
    defense_ended_at: datetime | None = None
    transcript_text: str | None = None
    grade: str | None = None
    comments: str | None = None
    instructor_notes: str | None = None
    final_grade: str | None = None

    @property
    def word_count(self) -> int:
        """Return the number of whitespace-separated words in the paper."""
        return len(self.paper_text.split())


@dataclass(frozen=True)
class EssayView:
    """What the examiner agent receives when it fetches a paper."""

    student_name: str
    essay: str
    word_count: int

"""LLM grading of completed defenses."""

import logging
from dataclasses import dataclass
from typing import Protocol

from oral_exam.domain.errors import InvalidTransition, OralExamError
from oral_exam.domain.grading import GradeOutcome, GradeResult
from oral_exam.domain.sessions import SessionRecord, SessionStatus
from oral_exam.services.sessions import SessionService

logger = logging.getLogger(__name__)

GRADE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "grade": {"type": "string"},
        "comments": {"type": "string"},
    },
    "required": ["grade", "comments"],
    "additionalProperties": False,
}

GRADING_INSTRUCTIONS = (
    "You are grading a student's oral defense of their paper. "
    "Judge whether the student understands and can defend what they wrote: "
    "the paper's content and their writing process. "
    "Return a letter grade (A, B, C, D or F) and concise comments that cite "
    "specific moments from the transcript."
)

_PENDING_BATCH_LIMIT = 500


class GradingClient(Protocol):
    """Interface for LLM grading calls."""

    async def grade(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        instructions: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Return structured grading data."""


@dataclass
class GradingService:
    """Builds grading prompts and records validated results."""

    client: GradingClient
    session_service: SessionService
    model: str
    reasoning_effort: str | None
    store: bool

    async def grade(self, code: str) -> SessionRecord:
        """Grade one completed defense and move it to Graded."""
        session = self.session_service.get_session(code)
        if session.status != SessionStatus.DEFENSE_COMPLETE:
            raise InvalidTransition(
                f"Session {code} is {session.status}, only completed defenses "
                "can be graded"
            )
        raw = await self.client.grade(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            instructions=GRADING_INSTRUCTIONS,
            prompt=build_grading_prompt(session),
            schema=GRADE_SCHEMA,
        )
        result = GradeResult.model_validate(raw)
        return self.session_service.record_grade(code, result.grade, result.comments)

    async def grade_pending(self) -> list[GradeOutcome]:
        """Grade every completed defense, continuing past failures."""
        pending = self.session_service.list_sessions(
            status=SessionStatus.DEFENSE_COMPLETE, limit=_PENDING_BATCH_LIMIT
        )
        outcomes = []
        for session in pending:
            try:
                graded = await self.grade(session.code)
            except OralExamError as exc:
                outcomes.append(
                    GradeOutcome(code=session.code, success=False, error=exc.message)
                )
            except Exception as exc:
                logger.exception("Grading failed", extra={"code": session.code})
                outcomes.append(
                    GradeOutcome(
                        code=session.code,
                        success=False,
                        error=f"{type(exc).__name__}: {exc}",
                    )
                )
            else:
                outcomes.append(
                    GradeOutcome(code=session.code, success=True, grade=graded.grade)
                )
        return outcomes


def build_grading_prompt(session: SessionRecord) -> str:
    """Combine the paper and the defense transcript into one prompt."""
    return (
        f"Student: {session.student_name}\n\n"
        f"=== PAPER ===\n{session.paper_text}\n\n"
        f"=== DEFENSE TRANSCRIPT ===\n{session.transcript_text or ''}"
    )

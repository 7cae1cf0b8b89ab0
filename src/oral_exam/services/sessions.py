"""Session lifecycle: submission, essay retrieval, transcripts and grading."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol

from oral_exam.domain.errors import (
    InvalidTransition,
    MissingCode,
    SessionAlreadyUsed,
    SessionNotFound,
    ValidationFailed,
)
from oral_exam.domain.sessions import EssayView, SessionRecord, SessionStatus
from oral_exam.services.audit import AuditService
from oral_exam.services.codes import CodeRegistry, is_valid_code
from oral_exam.services.lifecycle import (
    can_fetch_essay,
    can_ingest_transcript,
    can_transition,
)
from oral_exam.services.transcripts import extract_code, format_transcript

# Re-reads allowed when a conditional update loses a race.
_MAX_UPDATE_ATTEMPTS = 3

logger = logging.getLogger(__name__)


class SessionRepository(Protocol):
    """Persistence interface for defense sessions."""

    def create_session(self, record: SessionRecord) -> SessionRecord:
        """Persist a new session and return it."""

    def find_by_code(self, code: str) -> SessionRecord | None:
        """Return the session for a code, if present."""

    def update_by_code(
        self,
        code: str,
        fields: dict[str, object],
        expected_status: SessionStatus | None = None,
    ) -> bool:
        """Write fields for a session.

        When ``expected_status`` is given the write only applies if the stored
        status still equals it. Returns whether a row was updated.
        """

    def list_codes(self) -> set[str]:
        """Return every code already issued."""

    def list_sessions(
        self, status: SessionStatus | None = None, limit: int = 50
    ) -> list[SessionRecord]:
        """Return sessions, newest submissions first."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SessionService:
    """Drives sessions through Submitted -> ... -> Reviewed."""

    repository: SessionRepository
    code_registry: CodeRegistry
    audit_service: AuditService
    max_essay_length: int
    allow_transcript_overwrite: bool = True
    clock: Callable[[], datetime] = _utcnow

    def submit(self, name: str, essay: str) -> SessionRecord:
        """Validate a submission, issue a code and store the session."""
        student_name = (name or "").strip()
        if not student_name:
            raise ValidationFailed("Student name is required")
        if not (essay or "").strip():
            raise ValidationFailed("Essay text is required")
        if len(essay) > self.max_essay_length:
            raise ValidationFailed(
                f"Essay is too long ({len(essay)} characters). "
                f"The maximum is {self.max_essay_length} characters."
            )
        code = self.code_registry.generate(self.repository.list_codes())
        record = self.repository.create_session(
            SessionRecord(
                code=code,
                student_name=student_name,
                paper_text=essay,
                status=SessionStatus.SUBMITTED,
                submitted_at=self.clock(),
            )
        )
        self.audit_service.record_transition(
            code, "submitted", None, SessionStatus.SUBMITTED
        )
        logger.info("Essay submitted", extra={"code": code})
        return record

    def get_session(self, code: str) -> SessionRecord:
        """Return a session or raise ``SessionNotFound``."""
        session = self.repository.find_by_code(code)
        if session is None:
            raise SessionNotFound
        return session

    def list_sessions(
        self, status: SessionStatus | None = None, limit: int = 50
    ) -> list[SessionRecord]:
        """Return stored sessions, optionally filtered by status."""
        return self.repository.list_sessions(status=status, limit=limit)

    def fetch_essay(self, code: str) -> EssayView:
        """Return the paper for a code, starting the defense on first fetch.

        Repeated fetches during an active defense are served without writing.
        """
        code = (code or "").strip()
        if not code:
            raise MissingCode
        if not is_valid_code(code):
            raise SessionNotFound(f"No session found for code {code}")
        for _ in range(_MAX_UPDATE_ATTEMPTS):
            session = self.get_session(code)
            if not can_fetch_essay(session.status):
                logger.info(
                    "Essay fetch rejected",
                    extra={"code": code, "status": session.status},
                )
                raise SessionAlreadyUsed
            if session.status == SessionStatus.DEFENSE_STARTED:
                return _essay_view(session)
            started = self.repository.update_by_code(
                code,
                {
                    "status": SessionStatus.DEFENSE_STARTED,
                    "defense_started_at": self.clock(),
                },
                expected_status=SessionStatus.SUBMITTED,
            )
            if started:
                self.audit_service.record_transition(
                    code,
                    "defense_started",
                    session.status,
                    SessionStatus.DEFENSE_STARTED,
                )
                logger.info("Defense started", extra={"code": code})
                return _essay_view(session)
            logger.warning("Concurrent update on essay fetch", extra={"code": code})
        raise SessionAlreadyUsed

    def ingest_transcript(
        self, entries: object, conversation_id: str | None = None
    ) -> SessionRecord:
        """Store a defense transcript and complete the session it names."""
        transcript = format_transcript(entries)
        code = extract_code(transcript)
        if code is None:
            logger.warning(
                "No session code in transcript",
                extra={"conversation_id": conversation_id},
            )
            raise MissingCode(
                "Could not find a session code in the transcript",
                conversation_id=conversation_id,
            )
        for _ in range(_MAX_UPDATE_ATTEMPTS):
            session = self.repository.find_by_code(code)
            if session is None:
                raise SessionNotFound(
                    f"No session found for code {code}",
                    conversation_id=conversation_id,
                )
            if not can_ingest_transcript(
                session.status, allow_overwrite=self.allow_transcript_overwrite
            ):
                raise SessionAlreadyUsed(
                    f"Session {code} is already {session.status}",
                    conversation_id=conversation_id,
                )
            if session.status == SessionStatus.DEFENSE_COMPLETE:
                logger.warning(
                    "Overwriting stored transcript",
                    extra={"code": code, "conversation_id": conversation_id},
                )
            fields: dict[str, object] = {
                "status": SessionStatus.DEFENSE_COMPLETE,
                "defense_ended_at": self.clock(),
                "transcript_text": transcript,
            }
            if self.repository.update_by_code(
                code, fields, expected_status=session.status
            ):
                self.audit_service.record_transition(
                    code,
                    "defense_completed",
                    session.status,
                    SessionStatus.DEFENSE_COMPLETE,
                )
                logger.info(
                    "Transcript stored",
                    extra={"code": code, "conversation_id": conversation_id},
                )
                return replace(session, **fields)
            logger.warning(
                "Concurrent update on transcript ingestion", extra={"code": code}
            )
        raise SessionAlreadyUsed(
            f"Session {code} changed while storing the transcript",
            conversation_id=conversation_id,
        )

    def record_grade(self, code: str, grade: str, comments: str) -> SessionRecord:
        """Move a completed defense to Graded."""
        return self._advance(
            code,
            SessionStatus.GRADED,
            {"grade": grade, "comments": comments},
            event_type="graded",
        )

    def mark_reviewed(
        self, code: str, final_grade: str, instructor_notes: str | None = None
    ) -> SessionRecord:
        """Move a graded session to Reviewed with the instructor's decision."""
        return self._advance(
            code,
            SessionStatus.REVIEWED,
            {"final_grade": final_grade, "instructor_notes": instructor_notes},
            event_type="reviewed",
        )

    def _advance(
        self,
        code: str,
        target: SessionStatus,
        fields: dict[str, object],
        event_type: str,
    ) -> SessionRecord:
        for _ in range(_MAX_UPDATE_ATTEMPTS):
            session = self.get_session(code)
            if not can_transition(session.status, target):
                raise InvalidTransition(
                    f"Session {code} is {session.status}, cannot move to {target}"
                )
            payload = {"status": target, **fields}
            if self.repository.update_by_code(
                code, payload, expected_status=session.status
            ):
                self.audit_service.record_transition(
                    code, event_type, session.status, target
                )
                logger.info(
                    "Session status changed",
                    extra={"code": code, "status": target},
                )
                return replace(session, **payload)
        raise InvalidTransition(f"Session {code} changed during update")


def _essay_view(session: SessionRecord) -> EssayView:
    return EssayView(
        student_name=session.student_name,
        essay=session.paper_text,
        word_count=session.word_count,
    )

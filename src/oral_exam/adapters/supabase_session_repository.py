"""Supabase-backed session repository."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from supabase import Client

from oral_exam.domain.sessions import SessionRecord, SessionStatus
from oral_exam.services.sessions import SessionRepository

_COLUMNS = (
    "code, student_name, paper_text, status, submitted_at, defense_started_at, "
    "defense_ended_at, transcript_text, grade, comments, instructor_notes, "
    "final_grade"
)
_PAGE_SIZE = 1000


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for defense sessions."""

    client: Client
    table_name: str = "defense_sessions"

    def create_session(self, record: SessionRecord) -> SessionRecord:
        """Insert a session row and return it."""
        response = (
            self.client.table(self.table_name)
            .insert(
                {
                    "code": record.code,
                    "student_name": record.student_name,
                    "paper_text": record.paper_text,
                    "status": record.status.value,
                    "submitted_at": record.submitted_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create session")
        return _to_record(response.data[0])

    def find_by_code(self, code: str) -> SessionRecord | None:
        """Return a session by code, if present."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("code", code)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_record(response.data[0])

    def update_by_code(
        self,
        code: str,
        fields: dict[str, object],
        expected_status: SessionStatus | None = None,
    ) -> bool:
        """Update a session row, optionally only while it has a given status."""
        query = (
            self.client.table(self.table_name)
            .update({key: _serialize(value) for key, value in fields.items()})
            .eq("code", code)
        )
        if expected_status is not None:
            query = query.eq("status", expected_status.value)
        response = query.execute()
        return bool(response.data)

    def list_codes(self) -> set[str]:
        """Return all issued codes, paging past the API row limit."""
        codes: set[str] = set()
        start = 0
        while True:
            response = (
                self.client.table(self.table_name)
                .select("code")
                .order("code")
                .range(start, start + _PAGE_SIZE - 1)
                .execute()
            )
            rows = response.data or []
            codes.update(str(row["code"]) for row in rows)
            if len(rows) < _PAGE_SIZE:
                return codes
            start += _PAGE_SIZE

    def list_sessions(
        self, status: SessionStatus | None = None, limit: int = 50
    ) -> list[SessionRecord]:
        """Return sessions ordered by submission time, newest first."""
        query = self.client.table(self.table_name).select(_COLUMNS)
        if status is not None:
            query = query.eq("status", status.value)
        response = query.order("submitted_at", desc=True).limit(limit).execute()
        return [_to_record(row) for row in response.data or []]


def _serialize(value: object) -> object:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def _parse_datetime(value: object) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _to_record(row: dict[str, object]) -> SessionRecord:
    submitted_at = _parse_datetime(row.get("submitted_at"))
    if submitted_at is None:
        raise RuntimeError(f"Session {row.get('code')} has no submitted_at")
    return SessionRecord(
        code=str(row["code"]),
        student_name=str(row["student_name"]),
        paper_text=str(row["paper_text"]),
        status=SessionStatus(row["status"]),
        submitted_at=submitted_at,
        defense_started_at=_parse_datetime(row.get("defense_started_at")),
        defense_ended_at=_parse_datetime(row.get("defense_ended_at")),
        transcript_text=row.get("transcript_text"),
        grade=row.get("grade"),
        comments=row.get("comments"),
        instructor_notes=row.get("instructor_notes"),
        final_grade=row.get("final_grade"),
    )

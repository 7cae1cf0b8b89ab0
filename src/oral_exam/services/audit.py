"""Audit trail for session status changes."""

from dataclasses import dataclass
from typing import Protocol


class AuditRepository(Protocol):
    """Persistence interface for audit events."""

    def create_event(
        self,
        session_code: str,
        event_type: str,
        before: dict[str, object] | None,
        after: dict[str, object] | None,
    ) -> None:
        """Create an audit event row."""


@dataclass
class AuditService:
    """Service for recording session audit events."""

    repository: AuditRepository

    def record_transition(
        self, session_code: str, event_type: str, before: str | None, after: str
    ) -> None:
        """Persist a status change for a session."""
        self.repository.create_event(
            session_code=session_code,
            event_type=event_type,
            before={"status": before} if before is not None else None,
            after={"status": after},
        )

"""Supabase repository for audit events."""

from dataclasses import dataclass

from supabase import Client

from oral_exam.services.audit import AuditRepository


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Supabase-backed audit repository."""

    client: Client
    table_name: str = "audit_events"

    def create_event(
        self,
        session_code: str,
        event_type: str,
        before: dict[str, object] | None,
        after: dict[str, object] | None,
    ) -> None:
        """Create an audit event row."""
        self.client.table(self.table_name).insert(
            {
                "entity_type": "defense_session",
                "entity_id": session_code,
                "event_type": event_type,
                "before_json": before,
                "after_json": after,
            }
        ).execute()

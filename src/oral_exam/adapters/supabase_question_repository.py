"""Supabase repository for the question bank."""

from dataclasses import dataclass

from supabase import Client

from oral_exam.domain.questions import Question
from oral_exam.services.questions import QuestionRepository


@dataclass
class SupabaseQuestionRepository(QuestionRepository):
    """Supabase-backed question bank."""

    client: Client
    table_name: str = "defense_questions"

    def list_questions(self) -> list[Question]:
        """Return every question row."""
        response = (
            self.client.table(self.table_name).select("text, category").execute()
        )
        return [
            Question(
                text=str(row.get("text") or ""),
                category=str(row.get("category") or ""),
            )
            for row in response.data or []
        ]

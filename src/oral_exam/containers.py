"""Dependency container wiring for the application."""

import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from oral_exam.adapters.openai_grading_client import OpenAIGradingClient
from oral_exam.adapters.supabase_audit_repository import SupabaseAuditRepository
from oral_exam.adapters.supabase_question_repository import (
    SupabaseQuestionRepository,
)
from oral_exam.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from oral_exam.config import Settings
from oral_exam.services.audit import AuditService
from oral_exam.services.codes import CodeRegistry
from oral_exam.services.grading import GradingService
from oral_exam.services.questions import QuestionSampler, QuestionService
from oral_exam.services.sessions import SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_service: SessionService
    question_service: QuestionService
    grading_service: GradingService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_repository = SupabaseSessionRepository(
        supabase_client, table_name=resolved_settings.sessions_table
    )
    question_repository = SupabaseQuestionRepository(
        supabase_client, table_name=resolved_settings.questions_table
    )
    audit_repository = SupabaseAuditRepository(
        supabase_client, table_name=resolved_settings.audit_table
    )
    rng = random.SystemRandom()
    session_service = SessionService(
        repository=session_repository,
        code_registry=CodeRegistry(
            rng=rng, max_attempts=resolved_settings.code_max_attempts
        ),
        audit_service=AuditService(audit_repository),
        max_essay_length=resolved_settings.max_essay_length,
        allow_transcript_overwrite=resolved_settings.allow_transcript_overwrite,
    )
    question_service = QuestionService(
        repository=question_repository,
        sampler=QuestionSampler(rng=rng),
    )
    grading_client = OpenAIGradingClient.create(resolved_settings.openai_api_key)
    grading_service = GradingService(
        client=grading_client,
        session_service=session_service,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        await grading_client.client.close()

    return AppContainer(
        settings=resolved_settings,
        session_service=session_service,
        question_service=question_service,
        grading_service=grading_service,
        close_resources=close_resources,
    )

"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Header, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from oral_exam.api.admin import router as admin_router
from oral_exam.api.models import SubmissionRequest, TranscriptWebhook
from oral_exam.app_logging import configure_logging
from oral_exam.containers import AppContainer
from oral_exam.domain.errors import (
    GenerationExhausted,
    MalformedPayload,
    OralExamError,
)
from oral_exam.services.auth import require_secret


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(OralExamError)
    async def handle_oral_exam_error(
        request: Request, exc: OralExamError
    ) -> JSONResponse:
        if isinstance(exc, GenerationExhausted | MalformedPayload):
            logger.error(
                "%s: %s",
                exc.kind,
                exc.message,
                extra={"conversation_id": exc.conversation_id},
            )
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"success": False, "error": _describe_validation(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": _internal_error(container, exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/submit")
    async def submit(request: Request) -> JSONResponse:
        """Accept a paper from the submission form and issue its code."""
        state_container: AppContainer = request.app.state.container
        try:
            body = await request.json()
            submission = SubmissionRequest.model_validate(body)
        except (ValueError, ValidationError):
            return JSONResponse(
                status_code=400,
                content={"status": "error", "message": "Invalid submission payload"},
            )
        try:
            session = state_container.session_service.submit(
                submission.name, submission.essay
            )
        except OralExamError as exc:
            if isinstance(exc, GenerationExhausted):
                logger.error("Code generation exhausted on submission")
            return JSONResponse(
                status_code=exc.status_code,
                content={"status": "error", "message": exc.message},
            )
        except Exception:
            logger.exception("Failed to store submission")
            return JSONResponse(
                status_code=500,
                content={
                    "status": "error",
                    "message": "Could not store the submission",
                },
            )
        return JSONResponse(content={"status": "success", "code": session.code})

    @app.get("/agent/essay")
    async def fetch_essay(
        request: Request,
        code: str | None = None,
        secret: str | None = Query(default=None),
        x_agent_secret: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Serve the paper for a session code to the examiner agent."""
        state_container: AppContainer = request.app.state.container
        require_secret(secret or x_agent_secret, state_container.settings.agent_secret)
        essay = state_container.session_service.fetch_essay(code or "")
        return {
            "success": True,
            "studentName": essay.student_name,
            "essay": essay.essay,
            "wordCount": essay.word_count,
        }

    @app.get("/agent/questions")
    async def fetch_questions(
        request: Request,
        content_count: int | None = None,
        process_count: int | None = None,
        secret: str | None = Query(default=None),
        x_agent_secret: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Draw a fresh set of defense questions."""
        state_container: AppContainer = request.app.state.container
        settings = state_container.settings
        require_secret(secret or x_agent_secret, settings.agent_secret)
        selection = state_container.question_service.draw(
            content_count=(
                settings.default_content_questions
                if content_count is None
                else content_count
            ),
            process_count=(
                settings.default_process_questions
                if process_count is None
                else process_count
            ),
        )
        return {
            "success": True,
            "contentQuestions": selection.content,
            "processQuestions": selection.process,
            "totalQuestions": selection.total,
        }

    @app.post("/agent/transcript")
    async def ingest_transcript(
        request: Request,
        secret: str | None = Query(default=None),
        x_agent_secret: str | None = Header(default=None),
    ) -> dict[str, object]:
        """Handle the post-call transcript webhook."""
        state_container: AppContainer = request.app.state.container
        require_secret(secret or x_agent_secret, state_container.settings.agent_secret)
        webhook = await _parse_webhook(request)
        conversation_id = webhook.data.conversation_id
        session = state_container.session_service.ingest_transcript(
            webhook.data.transcript, conversation_id=conversation_id
        )
        return {
            "success": True,
            "message": f"Transcript stored for session {session.code}",
        }

    return app


async def _parse_webhook(request: Request) -> TranscriptWebhook:
    """Validate the webhook body, raising ``MalformedPayload`` on bad shape."""
    try:
        body = await request.json()
    except ValueError as exc:
        raise MalformedPayload("Webhook body is not valid JSON") from exc
    try:
        return TranscriptWebhook.model_validate(body)
    except ValidationError as exc:
        raise MalformedPayload(
            "Webhook payload must contain data.transcript",
            conversation_id=_conversation_id_from(body),
        ) from exc


def _conversation_id_from(body: object) -> str | None:
    """Best-effort conversation id lookup on a payload that failed validation."""
    if not isinstance(body, dict):
        return None
    data = body.get("data")
    if isinstance(data, dict) and isinstance(data.get("conversation_id"), str):
        return data["conversation_id"]
    return None


def _error_body(exc: OralExamError) -> dict[str, object]:
    body: dict[str, object] = {"success": False, "error": exc.message}
    if exc.conversation_id:
        body["conversation_id"] = exc.conversation_id
    return body


def _describe_validation(errors: list[dict[str, object]]) -> str:
    """Summarize request validation errors in one line."""
    parts = []
    for error in errors:
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg', 'invalid')}")
    return "Invalid request: " + "; ".join(parts)


def _internal_error(container: AppContainer, exc: Exception) -> str:
    """Return a generic error message with local debug info."""
    fallback = "Internal server error"
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback

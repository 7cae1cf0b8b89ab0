"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, Request

from oral_exam.api.models import ReviewRequest
from oral_exam.domain.sessions import SessionRecord, SessionStatus
from oral_exam.services.auth import require_secret

if TYPE_CHECKING:
    from oral_exam.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    require_secret(x_admin_token, admin_token)


@router.get("/sessions", dependencies=[Depends(require_admin)])
async def list_sessions(
    request: Request, status: SessionStatus | None = None, limit: int = 50
) -> dict[str, object]:
    """Return recent sessions, optionally filtered by status."""
    container: AppContainer = request.app.state.container
    sessions = container.session_service.list_sessions(status=status, limit=limit)
    return {"success": True, "sessions": [_summary(s) for s in sessions]}


@router.get("/sessions/{code}", dependencies=[Depends(require_admin)])
async def session_detail(code: str, request: Request) -> dict[str, object]:
    """Return the full record for one session."""
    container: AppContainer = request.app.state.container
    session = container.session_service.get_session(code)
    return {"success": True, "session": _detail(session)}


@router.post("/sessions/{code}/grade", dependencies=[Depends(require_admin)])
async def grade_session(code: str, request: Request) -> dict[str, object]:
    """Grade one completed defense with the LLM."""
    container: AppContainer = request.app.state.container
    session = await container.grading_service.grade(code)
    return {"success": True, "session": _summary(session)}


@router.post("/grade-pending", dependencies=[Depends(require_admin)])
async def grade_pending(request: Request) -> dict[str, object]:
    """Grade every completed defense that has not been graded yet."""
    container: AppContainer = request.app.state.container
    outcomes = await container.grading_service.grade_pending()
    return {
        "success": True,
        "graded": sum(1 for outcome in outcomes if outcome.success),
        "results": [outcome.model_dump() for outcome in outcomes],
    }


@router.post("/sessions/{code}/review", dependencies=[Depends(require_admin)])
async def review_session(
    code: str, review: ReviewRequest, request: Request
) -> dict[str, object]:
    """Record the instructor's final grade."""
    container: AppContainer = request.app.state.container
    session = container.session_service.mark_reviewed(
        code, review.final_grade, review.instructor_notes
    )
    return {"success": True, "session": _summary(session)}


def _summary(session: SessionRecord) -> dict[str, object]:
    return {
        "code": session.code,
        "studentName": session.student_name,
        "status": session.status.value,
        "submittedAt": session.submitted_at.isoformat(),
        "grade": session.grade,
        "finalGrade": session.final_grade,
    }


def _detail(session: SessionRecord) -> dict[str, object]:
    started = session.defense_started_at
    ended = session.defense_ended_at
    return {
        **_summary(session),
        "paperText": session.paper_text,
        "wordCount": session.word_count,
        "defenseStartedAt": started.isoformat() if started else None,
        "defenseEndedAt": ended.isoformat() if ended else None,
        "transcriptText": session.transcript_text,
        "comments": session.comments,
        "instructorNotes": session.instructor_notes,
    }

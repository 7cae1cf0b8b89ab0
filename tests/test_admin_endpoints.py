"""Tests for admin endpoints."""

from fastapi.testclient import TestClient

from oral_exam.api.app import create_app
from oral_exam.domain.sessions import SessionStatus
from tests.conftest import FakeGradingClient, InMemorySessionRepository

ADMIN = {"X-Admin-Token": "admin-token"}


def _completed_session(container) -> str:
    service = container.session_service
    code = service.submit("Ada", "Rivers shape the cities built beside them.").code
    service.fetch_essay(code)
    service.ingest_transcript([{"role": "user", "message": f"my code is {code}"}])
    return code


def test_admin_requires_token(container) -> None:
    client = TestClient(create_app(container))

    missing = client.get("/admin/sessions")
    wrong = client.get("/admin/sessions", headers={"X-Admin-Token": "nope"})

    assert missing.status_code == 401
    assert wrong.status_code == 401
    assert wrong.json() == {"success": False, "error": "Invalid secret"}


def test_admin_lists_sessions(container) -> None:
    client = TestClient(create_app(container))
    code = _completed_session(container)
    container.session_service.submit("Grace", "Compilers are translators.")

    response = client.get("/admin/sessions", headers=ADMIN)
    complete = client.get(
        "/admin/sessions", params={"status": "DefenseComplete"}, headers=ADMIN
    )

    assert response.status_code == 200
    assert len(response.json()["sessions"]) == 2
    sessions = complete.json()["sessions"]
    assert [session["code"] for session in sessions] == [code]
    assert sessions[0]["status"] == "DefenseComplete"


def test_admin_session_detail(container) -> None:
    client = TestClient(create_app(container))
    code = _completed_session(container)

    response = client.get(f"/admin/sessions/{code}", headers=ADMIN)

    session = response.json()["session"]
    assert session["studentName"] == "Ada"
    assert session["transcriptText"] == f"STUDENT: my code is {code}"
    assert session["defenseStartedAt"] is not None
    assert session["defenseEndedAt"] is not None


def test_admin_session_detail_not_found(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/admin/sessions/9999", headers=ADMIN)

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_admin_grade_and_review(
    container,
    session_repository: InMemorySessionRepository,
    grading_client: FakeGradingClient,
) -> None:
    client = TestClient(create_app(container))
    code = _completed_session(container)

    graded = client.post(f"/admin/sessions/{code}/grade", headers=ADMIN)
    reviewed = client.post(
        f"/admin/sessions/{code}/review",
        headers=ADMIN,
        json={"final_grade": "A", "instructor_notes": "Excellent"},
    )

    assert graded.json()["session"]["grade"] == "B"
    assert reviewed.json()["session"]["finalGrade"] == "A"
    stored = session_repository.sessions[code]
    assert stored.status == SessionStatus.REVIEWED
    assert stored.instructor_notes == "Excellent"
    assert len(grading_client.prompts) == 1


def test_admin_grade_rejects_incomplete_defense(container) -> None:
    client = TestClient(create_app(container))
    code = container.session_service.submit("Ada", "Draft").code

    response = client.post(f"/admin/sessions/{code}/grade", headers=ADMIN)

    assert response.status_code == 409
    assert response.json()["success"] is False


def test_admin_grade_pending(container) -> None:
    client = TestClient(create_app(container))
    code = _completed_session(container)

    response = client.post("/admin/grade-pending", headers=ADMIN)

    data = response.json()
    assert data["graded"] == 1
    assert data["results"] == [
        {"code": code, "success": True, "grade": "B", "error": None}
    ]


def test_admin_review_validates_body(container) -> None:
    client = TestClient(create_app(container))
    code = _completed_session(container)

    response = client.post(f"/admin/sessions/{code}/review", headers=ADMIN, json={})

    assert response.status_code == 422
    assert response.json()["success"] is False

"""Status transition rules for defense sessions."""

from oral_exam.domain.sessions import SessionStatus

TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.SUBMITTED: frozenset(
        {SessionStatus.DEFENSE_STARTED, SessionStatus.DEFENSE_COMPLETE}
    ),
    SessionStatus.DEFENSE_STARTED: frozenset({SessionStatus.DEFENSE_COMPLETE}),
    SessionStatus.DEFENSE_COMPLETE: frozenset({SessionStatus.GRADED}),
    SessionStatus.GRADED: frozenset({SessionStatus.REVIEWED}),
    SessionStatus.REVIEWED: frozenset(),
}

FETCHABLE_STATUSES = frozenset({SessionStatus.SUBMITTED, SessionStatus.DEFENSE_STARTED})
TRANSCRIPT_STATUSES = frozenset(
    {SessionStatus.SUBMITTED, SessionStatus.DEFENSE_STARTED}
)


def can_transition(current: SessionStatus, target: SessionStatus) -> bool:
    """Return true when ``target`` is a legal next status for ``current``."""
    return target in TRANSITIONS[current]


def can_fetch_essay(status: SessionStatus) -> bool:
    """Essays are served while the defense has not finished."""
    return status in FETCHABLE_STATUSES


def can_ingest_transcript(status: SessionStatus, *, allow_overwrite: bool) -> bool:
    """Return true when a transcript may be written for a session in ``status``.

    A completed defense may be re-ingested (overwriting the stored transcript)
    only when ``allow_overwrite`` is set; graded sessions never are.
    """
    if status in TRANSCRIPT_STATUSES:
        return True
    return allow_overwrite and status == SessionStatus.DEFENSE_COMPLETE

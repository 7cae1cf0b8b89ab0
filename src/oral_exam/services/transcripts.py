"""Transcript normalization and session code recovery."""

import re
from collections.abc import Mapping

EXAMINER_LABEL = "EXAMINER"
STUDENT_LABEL = "STUDENT"
EXAMINER_ROLES = frozenset({"agent"})
TURN_SEPARATOR = "\n\n"

_FOUR_DIGITS = r"(?<![0-9])([0-9]{4})(?![0-9])"
_CONTEXT_PATTERN = re.compile(r"code.*?" + _FOUR_DIGITS, re.IGNORECASE | re.DOTALL)
_DIGITS_PATTERN = re.compile(_FOUR_DIGITS)
_LABEL_PATTERN = re.compile(rf"^({EXAMINER_LABEL}|{STUDENT_LABEL}):")


def format_transcript(entries: object) -> str:
    """Render conversation entries as ``LABEL: message`` turns.

    Agent turns become ``EXAMINER``; every other role becomes ``STUDENT``.
    Turns keep their input order and are separated by a blank line. Input
    that is not a list is returned in its string form.
    """
    if not isinstance(entries, list):
        return "" if entries is None else str(entries)
    turns = []
    for entry in entries:
        if isinstance(entry, Mapping):
            role = entry.get("role")
            message = entry.get("message")
        else:
            role = getattr(entry, "role", None)
            message = getattr(entry, "message", None)
        label = _label_for(role)
        turns.append(f"{label}: {'' if message is None else message}")
    return TURN_SEPARATOR.join(turns)


def extract_code(transcript: str) -> str | None:
    """Recover the session code from normalized transcript text.

    Tiers, first match wins:
      1. the first 4-digit run after the word "code" (any case);
      2. the first 4-digit run on a student line;
      3. the first 4-digit run anywhere.
    """
    if not transcript:
        return None
    match = _CONTEXT_PATTERN.search(transcript)
    if match:
        return match.group(1)
    for line in _student_lines(transcript):
        match = _DIGITS_PATTERN.search(line)
        if match:
            return match.group(1)
    match = _DIGITS_PATTERN.search(transcript)
    return match.group(1) if match else None


def _label_for(role: object) -> str:
    if isinstance(role, str) and role.strip().lower() in EXAMINER_ROLES:
        return EXAMINER_LABEL
    return STUDENT_LABEL


def _student_lines(transcript: str) -> list[str]:
    """Return lines spoken by the student, in order.

    Unlabeled lines belong to the speaker of the last labeled line.
    """
    lines = []
    speaker: str | None = None
    for line in transcript.splitlines():
        label = _LABEL_PATTERN.match(line)
        if label:
            speaker = label.group(1)
        if speaker == STUDENT_LABEL:
            lines.append(line)
    return lines

"""Shared-secret checks for externally triggered calls."""

from oral_exam.domain.errors import InvalidSecret


def check_secret(provided: str | None, expected: str) -> bool:
    """Return true only when the provided secret equals the expected one."""
    if not provided or not expected:
        return False
    return provided == expected


def require_secret(provided: str | None, expected: str) -> None:
    """Raise ``InvalidSecret`` unless the secret matches.

    The error never carries the expected value.
    """
    if not check_secret(provided, expected):
        raise InvalidSecret

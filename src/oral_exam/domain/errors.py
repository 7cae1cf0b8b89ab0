"""Error kinds raised by the session lifecycle services."""

from http import HTTPStatus


class OralExamError(Exception):
    """Base class for expected, request-level failures."""

    kind = "OralExamError"
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Request failed"

    def __init__(
        self, message: str | None = None, *, conversation_id: str | None = None
    ) -> None:
        self.message = message or self.default_message
        self.conversation_id = conversation_id
        super().__init__(self.message)


class InvalidSecret(OralExamError):
    kind = "InvalidSecret"
    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "Invalid secret"


class MissingCode(OralExamError):
    kind = "MissingCode"
    default_message = "No session code found"


class SessionNotFound(OralExamError):
    kind = "SessionNotFound"
    status_code = HTTPStatus.NOT_FOUND
    default_message = "Session not found"


class SessionAlreadyUsed(OralExamError):
    kind = "SessionAlreadyUsed"
    status_code = HTTPStatus.CONFLICT
    default_message = "This code has already been used"


class InvalidTransition(OralExamError):
    """Raised when an operation needs a status the session is not in."""

    kind = "InvalidTransition"
    status_code = HTTPStatus.CONFLICT
    default_message = "Session is not in the required status"


class GenerationExhausted(OralExamError):
    kind = "GenerationExhausted"
    status_code = HTTPStatus.SERVICE_UNAVAILABLE
    default_message = "Could not generate a unique session code"


class ValidationFailed(OralExamError):
    kind = "ValidationFailed"
    default_message = "Invalid submission"


class MalformedPayload(OralExamError):
    kind = "MalformedPayload"
    default_message = "Malformed webhook payload"

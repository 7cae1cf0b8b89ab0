"""Logging configuration helpers."""

import logging

# Keys passed through ``extra=`` that are worth printing with the message.
CONTEXT_KEYS = ("code", "conversation_id", "status")


class ContextFormatter(logging.Formatter):
    """Formatter that appends session context fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = [
            f"{key}={getattr(record, key)}"
            for key in CONTEXT_KEYS
            if getattr(record, key, None) is not None
        ]
        if context:
            return f"{message} [{' '.join(context)}]"
        return message


def configure_logging(level: str = "INFO") -> None:
    """Configure the ``oral_exam`` logger with a single stream handler."""
    logger = logging.getLogger("oral_exam")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False

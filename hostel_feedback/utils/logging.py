"""Logging helpers shared by the store backends and the API."""

import logging
from typing import Optional

from litestar import Request

from hostel_feedback.config import is_debug

logger = logging.getLogger("HostelFeedback")


def debug_log(message: str, *args) -> None:
    """Debug line that is dropped unless APP_DEBUG=true, whatever the logger level."""
    if is_debug():
        logger.debug(message, *args)


def error_log(
    message: str,
    exc: Optional[Exception] = None,
    context: Optional[dict] = None,
) -> None:
    """
    Log one error line as ``message | Context: k=v, ... | Exception: ... | Cause: ...``.

    The traceback is attached through ``exc_info``. ``StoreError`` is always
    raised ``from`` the I/O or database error, so the cause is spelled out too.
    """
    parts = [message]
    if context:
        parts.append("Context: " + ", ".join(f"{k}={v}" for k, v in context.items()))
    if exc is not None:
        parts.append(f"Exception: {type(exc).__name__}: {exc}")
        if exc.__cause__ is not None:
            parts.append(f"Cause: {type(exc.__cause__).__name__}: {exc.__cause__}")

    logger.error(" | ".join(parts), exc_info=exc)


def log_request_error(request: Request, exc: Exception, message: Optional[str] = None) -> None:
    """Log an exception nothing else handled, tagged with the request line."""
    error_log(
        message or f"Unhandled {type(exc).__name__}",
        exc=exc,
        context={"method": request.method, "path": request.url.path},
    )

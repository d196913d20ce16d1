import logging
from typing import Optional

from hostel_feedback.config import load_env_file_fallback

# Load .env before anything reads the environment; real variables always win
load_env_file_fallback()

from litestar import Litestar, Request
from litestar.di import Provide
from litestar.exceptions import HTTPException
from litestar.response import Response
from litestar.status_codes import HTTP_500_INTERNAL_SERVER_ERROR

from hostel_feedback.config import is_debug
from hostel_feedback.routes import ROUTES
from hostel_feedback.store import FeedbackStore, store_from_env
from hostel_feedback.utils.logging import log_request_error

DEBUG = is_debug()

logging.basicConfig(
    level=logging.DEBUG if DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger("HostelFeedback")


# --- Exception handlers
def handle_http_exception(request: Request, exc: HTTPException) -> Response:
    """Render HTTP errors as ``{"error": ...}``."""
    summary = f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}"
    if exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(summary)
    else:
        logger.debug(summary)
    return Response(
        content={"error": exc.detail},
        status_code=exc.status_code,
        media_type="application/json",
        headers=exc.headers,
    )


def log_exceptions(request: Request, exc: Exception) -> Response:
    log_request_error(request, exc, message="Unhandled exception occurred")
    return Response(
        content={"error": "Internal Server Error"},
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        media_type="application/json"
    )


# --- App init
def create_app(store: Optional[FeedbackStore] = None, debug: Optional[bool] = None) -> Litestar:
    """Build the app around one store instance, chosen from the environment unless given."""
    debug = DEBUG if debug is None else debug
    if store is None:
        store = store_from_env()
    logger.info(f"Starting app in {'DEBUG' if debug else 'PRODUCTION'} mode with {type(store).__name__}")

    def provide_store() -> FeedbackStore:
        return store

    async def close_store() -> None:
        await store.close()

    return Litestar(
        route_handlers=ROUTES,
        debug=debug,
        dependencies={"store": Provide(provide_store, sync_to_thread=False)},
        on_shutdown=[close_store],
        exception_handlers={
            HTTPException: handle_http_exception,
            Exception: log_exceptions,
        },
    )


app = create_app()

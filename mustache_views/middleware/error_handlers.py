"""Exception handlers for the application."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from mustache_views.exceptions import ErrorCode, ViewException
from mustache_views.logging_config import get_logger, log_with_context
from mustache_views.routers.view_router import INDEX_VIEW

logger = get_logger(__name__)


def _view_name(request: Request) -> str | None:
    """View name from the matched route, or None outside the view routes."""
    view_name = request.path_params.get("view_name")
    if view_name is None and request.url.path == "/":
        return INDEX_VIEW
    return view_name


async def view_exception_handler(request: Request, exc: ViewException) -> JSONResponse:
    """Handle view exceptions with their HTTP status codes.

    Returns structured JSON error responses with error code, message and details.
    """
    log_with_context(
        logger,
        "warning",
        "View error",
        error_code=exc.code.value,
        error_message=exc.message,
        status_code=exc.status_code,
        method=request.method,
        url=str(request.url),
        view_name=_view_name(request),
        template=exc.details.get("path") or exc.details.get("template"),
        event_type="view_error",
    )

    error_content: dict[str, Any] = {"code": exc.code.value, "message": exc.message, "details": exc.details}

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": error_content},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle general exceptions with logging."""
    log_with_context(
        logger,
        "error",
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        method=request.method,
        url=str(request.url),
        path=request.url.path,
        view_name=_view_name(request),
        event_type="unhandled_error",
    )
    logger.error("Exception traceback:", exc_info=exc)

    # Don't expose internal error details to clients
    return JSONResponse(
        status_code=500,
        content={"error": {"code": ErrorCode.INTERNAL_ERROR.value, "message": "Internal server error"}},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the application."""
    app.add_exception_handler(ViewException, view_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

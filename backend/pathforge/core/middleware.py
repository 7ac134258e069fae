"""
PathForge - HTTP Middleware

Every API call is tagged with a request id before routing. The auth
dependency leaves the student's user id on request.state, and the
completion log line carries both, so one request can be followed from
the endpoint through the workflow and AI service logs. The log context
is cleared on both sides of the call.
"""

import time
from typing import Callable, FrozenSet

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from pathforge.core.config import settings
from pathforge.core.logging_config import (
    logger,
    set_request_id,
    set_user_id,
    set_team_id,
    generate_request_id,
)

REQUEST_ID_HEADER = "X-Request-ID"
API_PREFIX = "/api/"

# Liveness checks and API docs
QUIET_PATHS: FrozenSet[str] = frozenset({
    "/",
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
})


def is_quiet_path(path: str) -> bool:
    return path in QUIET_PATHS or path.startswith("/docs/")


def reset_log_context(request_id: str = "") -> None:
    set_request_id(request_id)
    set_user_id("")
    set_team_id("")


def _level_for(status_code: int) -> Callable:
    if status_code >= 500:
        return logger.error
    if status_code >= 400:
        return logger.warning
    return logger.info


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Correlates one API call across the log.

    The caller's X-Request-ID is reused when present so the frontend can
    quote it in bug reports; otherwise a fresh id is issued and echoed
    back. Client errors (403 from a guard, 400 from a workflow rule) log
    at warning, server and AI failures at error.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        reset_log_context(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            self._finish(request, response, request_id, started)
            return response
        except Exception as exc:
            elapsed = (time.perf_counter() - started) * 1000
            logger.error(
                f"{request.method} {request.url.path} raised {type(exc).__name__} after {elapsed:.0f}ms",
                exc_info=True,
                extra={
                    "event_type": "http_request_error",
                    "http_method": request.method,
                    "http_path": request.url.path,
                    "duration_ms": elapsed,
                },
            )
            raise
        finally:
            reset_log_context()

    def _finish(self, request: Request, response: Response, request_id: str, started: float) -> None:
        method, path = request.method, request.url.path
        elapsed = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{elapsed:.2f}ms"

        if is_quiet_path(path):
            return

        # set by get_current_user on authenticated routes
        user_id = getattr(request.state, "user_id", None) or "anonymous"
        _level_for(response.status_code)(
            f"{method} {path} {response.status_code} {elapsed:.0f}ms user={user_id}",
            extra={
                "event_type": "http_request",
                "http_method": method,
                "http_path": path,
                "http_status": response.status_code,
                "duration_ms": elapsed,
            },
        )
        if elapsed > settings.SLOW_REQUEST_MS:
            logger.warning(
                f"Slow request {method} {path}: {elapsed:.0f}ms",
                extra={"event_type": "slow_request", "duration_ms": elapsed},
            )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Browser hardening headers; API responses carry student data and are never cached"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.path.startswith(API_PREFIX):
            response.headers["Cache-Control"] = "no-store"
        return response

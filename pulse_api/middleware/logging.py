"""Request logging middleware using structlog."""

import logging
import time
import uuid
from typing import Optional

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from pulse_api.config.settings import settings
from pulse_api.services.token import get_company_id, get_user_id

logger = structlog.get_logger()

MAX_REQUEST_ID_LENGTH = 64


def configure_logging() -> None:
    """Configure structlog for structured JSON logging."""
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def caller_context(request: Request) -> dict[str, Optional[str]]:
    """Log fields naming the authenticated caller, empty for anonymous requests."""
    user = getattr(request.state, "user", None)
    if not user:
        return {}
    return {"user_id": get_user_id(user), "company_id": get_company_id(user)}


def request_id_for(request: Request) -> str:
    """Reuse the proxy's request id when it sends a usable one."""
    incoming = request.headers.get("X-Request-ID", "").strip()
    if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH:
        return incoming
    return str(uuid.uuid4())[:8]


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request with its request id and, once authenticated, its caller.

    The caller fields are read back from ``request.state`` after the inner
    ``AuthMiddleware`` has run, so rejected requests log without them.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request_id_for(request)
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.perf_counter()

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            query=str(request.query_params),
        )

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        if response.status_code >= 500:
            log_method = logger.error
        elif response.status_code >= 400:
            log_method = logger.warning
        else:
            log_method = logger.info
        log_method(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
            **caller_context(request),
        )

        response.headers["X-Request-ID"] = request_id
        return response

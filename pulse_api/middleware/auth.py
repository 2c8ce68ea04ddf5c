"""Authentication middleware for JWT validation."""

import re

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from pulse_api.middleware.logging import caller_context
from pulse_api.services.token import decode_token, get_token_from_request, get_user_id

logger = structlog.get_logger()


# Paths that don't require authentication
SKIP_AUTH_PATHS = [
    r"^/$",
    r"^/health",
    r"^/api/v1/health",
    r"^/api/docs",
    r"^/api/openapi\.json",
    r"^/api/redoc",
]

SKIP_AUTH_PATTERNS = [re.compile(p) for p in SKIP_AUTH_PATHS]


def should_skip_auth(path: str) -> bool:
    """Check if path should skip authentication."""
    return any(pattern.match(path) for pattern in SKIP_AUTH_PATTERNS)


def _unauthorized(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content={
            "error": {
                "code": "UNAUTHORIZED",
                "message": message,
                "details": {},
            }
        },
    )


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware that validates JWT tokens on protected routes."""

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process request and validate authentication."""
        # Skip auth for certain paths
        if request.method == "OPTIONS" or should_skip_auth(request.url.path):
            return await call_next(request)

        # Get token
        token = get_token_from_request(request)
        if not token:
            return _unauthorized("Not authenticated")

        # Decode and validate token
        try:
            payload = decode_token(token)
        except Exception as e:
            logger.info("Rejected token", path=request.url.path, error=str(e))
            return _unauthorized(str(e))

        # Store user info in request state
        request.state.user = payload
        request.state.user_id = get_user_id(payload)

        # Tie every later log line of this request to the caller and tenant
        structlog.contextvars.bind_contextvars(**caller_context(request))

        return await call_next(request)

"""Access control for analytics endpoints based on portal user types."""

from typing import Any, Callable

from fastapi import HTTPException, Request
import structlog

from pulse_api.middleware.error_handler import ForbiddenError
from pulse_api.services.token import get_company_id, get_user_id, get_user_type

logger = structlog.get_logger()


def get_current_user(request: Request) -> dict[str, Any]:
    """
    Get current user claims from request state.

    Usage:
        @router.get("/me")
        def get_me(user: dict = Depends(get_current_user)):
            return user
    """
    if not hasattr(request.state, "user"):
        raise HTTPException(status_code=401, detail="Not authenticated")
    return request.state.user


def require_user_type(allowed_types: list[str]) -> Callable:
    """
    Dependency that requires the caller to be one of the given user types.

    Usage:
        @router.get("/analytics/self")
        def my_analytics(user: dict = Depends(require_user_type(["employer", "admin"]))):
            ...
    """
    def check_user_type(request: Request) -> dict[str, Any]:
        user = get_current_user(request)
        user_type = get_user_type(user)

        if user_type in allowed_types and get_user_id(user):
            return user

        logger.warning(
            "User type check failed",
            user=get_user_id(user),
            required=allowed_types,
            user_type=user_type,
        )
        raise ForbiddenError()

    return check_user_type


def require_company_admin(request: Request) -> dict[str, Any]:
    """
    Dependency that requires a company admin (admin user type with a company).

    Company-wide views aggregate every recruiter of the caller's company, so
    admins without a company have nothing to look at.
    """
    user = require_user_type(["admin"])(request)
    if not get_company_id(user):
        logger.warning("Company admin check failed", user=get_user_id(user))
        raise ForbiddenError("User is not associated with any company")
    return user

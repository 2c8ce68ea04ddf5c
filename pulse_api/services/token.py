"""Verification of HS256 JWT tokens issued by the portal auth service."""

from typing import Any, Optional

from fastapi import Request
from jose import jwt, JWTError

from pulse_api.config.settings import settings


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate an HS256-signed JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded token payload

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
        return payload
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.JWTClaimsError as e:
        raise JWTError(f"Invalid token claims: {e}")
    except JWTError as e:
        raise JWTError(f"Invalid token: {e}")


def get_user_id(payload: dict[str, Any]) -> Optional[str]:
    """Subject of the token; the portal uses ``id`` on older tokens."""
    value = payload.get("sub") or payload.get("id")
    return str(value) if value is not None else None


def get_user_type(payload: dict[str, Any]) -> Optional[str]:
    """User type claim (``employer``, ``admin``, ``jobseeker``)."""
    return payload.get("userType") or payload.get("user_type")


def get_company_id(payload: dict[str, Any]) -> Optional[str]:
    """Company the user belongs to, if any."""
    value = payload.get("companyId") or payload.get("company_id")
    return str(value) if value is not None else None


def get_token_from_request(request: Request) -> Optional[str]:
    """Extract JWT token from request (cookie or Authorization header)."""
    # Try cookie first
    token = request.cookies.get(settings.COOKIE_NAME)
    if token:
        return token

    # Try Authorization header
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]

    return None

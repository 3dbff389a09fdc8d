"""
FastAPI dependencies for route protection.
"""
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.exceptions import NotAuthenticated, SessionExpired

# Security scheme for OpenAPI docs (shows lock icon and Authorization header)
bearer_scheme = HTTPBearer(
    scheme_name="Bearer",
    description="ID token from the login endpoint",
    auto_error=False,
)


async def validate_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Dict[str, Any]:
    """
    Validates session loaded by middleware.

    Returns:
        User data dict with user_id, email, role, is_active

    Raises:
        NotAuthenticated: No token provided
        SessionExpired: Token not found in Redis
    """
    if not getattr(request.state, "token", None):
        raise NotAuthenticated()

    if not getattr(request.state, "session", None):
        raise SessionExpired()

    return request.state.session


async def optional_session(request: Request) -> Optional[Dict[str, Any]]:
    """Session if the caller sent a valid token, else None (anonymous access)."""
    return getattr(request.state, "session", None) or None


def get_current_token(request: Request) -> str:
    """Get current token from request state."""
    if not request.state.token:
        raise NotAuthenticated()
    return request.state.token

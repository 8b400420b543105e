from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from pydantic import ValidationError

from libs.auth.models import SessionUser

SESSION_USER_KEY = "user"


def login_session(request: Request, user: SessionUser) -> None:
    """Make ``user`` the principal of the current session."""
    request.session[SESSION_USER_KEY] = user.model_dump()


def logout_session(request: Request) -> None:
    """Drop the principal and everything else held in the session."""
    request.session.clear()


async def get_optional_user(request: Request) -> Optional[SessionUser]:
    """
    Return the session principal, or None for anonymous visitors.
    """
    raw = request.session.get(SESSION_USER_KEY)
    if not raw:
        return None
    try:
        return SessionUser(**raw)
    except (TypeError, ValidationError):
        # Stale or tampered payload shape; treat as anonymous
        request.session.pop(SESSION_USER_KEY, None)
        return None


async def get_current_user(
    user: Annotated[Optional[SessionUser], Depends(get_optional_user)],
) -> SessionUser:
    """
    Require a logged-in user; browsers are sent to the login page.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            detail="Login required",
            headers={"Location": "/login"},
        )
    return user


async def get_api_user(
    user: Annotated[Optional[SessionUser], Depends(get_optional_user)],
) -> SessionUser:
    """
    Require a logged-in user for JSON endpoints (401 instead of a redirect).
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


async def require_admin(
    user: Annotated[Optional[SessionUser], Depends(get_optional_user)],
) -> SessionUser:
    """
    Ensure the session principal carries the admin flag.

    Anonymous visitors and non-admins get the same 403.
    """
    if user is None or not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin only",
        )
    return user

"""Auth cookie helpers shared by the login, logout and withdrawal routes."""

from fastapi import Response

from memoir.config import get_settings
from memoir.constants import (
    AUTH_COOKIE_MAX_AGE,
    AUTH_COOKIE_NAME,
    OAUTH_STATE_COOKIE_MAX_AGE,
    OAUTH_STATE_COOKIE_NAME,
)


def set_auth_cookie(response: Response, token: str) -> None:
    """Attach the JWT as an httpOnly, SameSite=Lax cookie valid for 7 days."""
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        max_age=AUTH_COOKIE_MAX_AGE,
        path="/",
        secure=get_settings().is_production,
        httponly=True,
        samesite="lax",
    )


def clear_auth_cookie(response: Response) -> None:
    """Expire the auth cookie immediately (logout, account deletion)."""
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value="",
        max_age=0,
        path="/",
        secure=get_settings().is_production,
        httponly=True,
        samesite="lax",
    )


def set_oauth_state_cookie(response: Response, state: str) -> None:
    response.set_cookie(
        key=OAUTH_STATE_COOKIE_NAME,
        value=state,
        max_age=OAUTH_STATE_COOKIE_MAX_AGE,
        path="/api/auth/google",
        secure=get_settings().is_production,
        httponly=True,
        samesite="lax",
    )


def clear_oauth_state_cookie(response: Response) -> None:
    response.delete_cookie(
        key=OAUTH_STATE_COOKIE_NAME,
        path="/api/auth/google",
        secure=get_settings().is_production,
        httponly=True,
        samesite="lax",
    )

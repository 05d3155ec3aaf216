"""FastAPI dependencies for authentication and database."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session

from memoir.constants import AUTH_COOKIE_NAME
from memoir.database import get_db
from memoir.models.user import User
from memoir.services.auth import decode_access_token, get_user_by_id
from memoir.services.google_oauth import GoogleOAuthService

cookie_scheme = APIKeyCookie(name=AUTH_COOKIE_NAME, auto_error=False)


def _unauthorized() -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def get_current_user(
    token: Annotated[str | None, Depends(cookie_scheme)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from the auth-token cookie."""
    if not token:
        raise _unauthorized()

    payload = decode_access_token(token)
    if payload is None:
        raise _unauthorized()

    user_id = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise _unauthorized()

    user = get_user_by_id(db, int(user_id))
    if user is None:
        raise _unauthorized()

    return user


def get_google_oauth_service() -> GoogleOAuthService:
    """Get Google OAuth service instance."""
    return GoogleOAuthService()

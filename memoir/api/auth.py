"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from memoir.api.cookies import (
    clear_auth_cookie,
    clear_oauth_state_cookie,
    set_auth_cookie,
    set_oauth_state_cookie,
)
from memoir.api.dependencies import get_google_oauth_service
from memoir.config import get_settings
from memoir.constants import OAUTH_STATE_COOKIE_NAME
from memoir.database import get_db
from memoir.schemas.auth import (
    LoginResponse,
    LoginUser,
    MessageResponse,
    SignupResponse,
    SignupUser,
    UserLogin,
    UserSignup,
)
from memoir.services.auth import (
    EmailAlreadyExistsError,
    authenticate_user,
    create_access_token,
    create_user,
    get_user_by_email,
    touch_last_active,
    upsert_social_user,
)
from memoir.services.google_oauth import (
    GoogleOAuthError,
    GoogleOAuthService,
    OAuthNotConfiguredError,
    generate_state,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _login_redirect(error: str) -> RedirectResponse:
    settings = get_settings()
    response = RedirectResponse(f"{settings.frontend_url}/login?error={error}")
    clear_oauth_state_cookie(response)
    return response


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserSignup,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user with email and password."""
    existing_user = get_user_by_email(db, user_data.email)
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already exists",
        )

    try:
        user = create_user(db, user_data.email, user_data.password, user_data.nickname)
    except EmailAlreadyExistsError as e:
        # Lost a race with a concurrent signup for the same email
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already exists",
        ) from e

    set_auth_cookie(response, create_access_token(user.id, user.email))
    return SignupResponse(user=SignupUser.model_validate(user))


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)

    if not user:
        logger.info(f"Failed login for {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    touch_last_active(user)
    db.commit()
    db.refresh(user)

    set_auth_cookie(response, create_access_token(user.id, user.email))
    return LoginResponse(user=LoginUser.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Logout by expiring the auth cookie."""
    clear_auth_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.get("/google")
async def google_login(
    oauth: Annotated[GoogleOAuthService, Depends(get_google_oauth_service)],
):
    """Redirect the browser to Google's consent screen."""
    state = generate_state()
    try:
        auth_url = oauth.build_authorization_url(state)
    except OAuthNotConfiguredError as e:
        logger.error(f"Google OAuth initiation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Google OAuth not configured",
        ) from e

    response = RedirectResponse(auth_url)
    set_oauth_state_cookie(response, state)
    return response


@router.get("/google/callback")
async def google_callback(
    db: Annotated[Session, Depends(get_db)],
    oauth: Annotated[GoogleOAuthService, Depends(get_google_oauth_service)],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    expected_state: Annotated[str | None, Cookie(alias=OAUTH_STATE_COOKIE_NAME)] = None,
):
    """Finish Google login: exchange the code, upsert the user, set the cookie."""
    if error:
        logger.info(f"Google login denied: {error}")
        return _login_redirect("google_login_failed")

    if not code:
        return _login_redirect("missing_code")

    if not state or not expected_state or state != expected_state:
        logger.warning("Google callback state mismatch")
        return _login_redirect("invalid_state")

    try:
        access_token = await oauth.exchange_code_for_token(code)
        profile = await oauth.get_user_info(access_token)
    except GoogleOAuthError as e:
        logger.error(f"Google authentication failed: {e}")
        return _login_redirect("authentication_failed")

    # Database errors propagate to the SQLAlchemyError handler (500)
    user = upsert_social_user(db, profile.email, profile.name)

    response = RedirectResponse(f"{get_settings().frontend_url}/diary")
    set_auth_cookie(response, create_access_token(user.id, user.email))
    clear_oauth_state_cookie(response)
    return response

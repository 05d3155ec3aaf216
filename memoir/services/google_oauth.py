"""Google OAuth 2.0 authorization code flow."""

import logging
import secrets
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx

from memoir.config import Settings, get_settings

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"  # noqa: S105
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"


class GoogleOAuthError(Exception):
    """Google rejected the exchange or returned something unusable."""


class OAuthNotConfiguredError(GoogleOAuthError):
    """Client id, secret or redirect URI is missing."""


@dataclass
class GoogleUserInfo:
    email: str
    name: str | None = None
    picture: str | None = None
    sub: str | None = None


def generate_state() -> str:
    """Random value tying the callback to the browser that started the flow."""
    return secrets.token_hex(32)


def _json_object(response: httpx.Response) -> dict | None:
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _error_code(response: httpx.Response) -> str:
    data = _json_object(response) or {}
    return str(data.get("error", "Unknown error"))


class GoogleOAuthService:
    """Service for talking to Google's OAuth endpoints."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.timeout = 10.0

    def build_authorization_url(self, state: str) -> str:
        """Build the consent screen URL the browser is redirected to."""
        if not self.settings.google_client_id:
            raise OAuthNotConfiguredError("GOOGLE_CLIENT_ID is not configured")
        if not self.settings.google_redirect_uri:
            raise OAuthNotConfiguredError("GOOGLE_REDIRECT_URI is not configured")

        params = {
            "client_id": self.settings.google_client_id,
            "redirect_uri": self.settings.google_redirect_uri,
            "response_type": "code",
            "scope": "email profile",
            "access_type": "offline",
            "prompt": "consent",
            "state": state,
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def exchange_code_for_token(self, code: str) -> str:
        """Exchange an authorization code for an access token."""
        if not self.settings.google_oauth_configured:
            raise OAuthNotConfiguredError("Google OAuth is not configured")

        data = {
            "code": code,
            "client_id": self.settings.google_client_id,
            "client_secret": self.settings.google_client_secret,
            "redirect_uri": self.settings.google_redirect_uri,
            "grant_type": "authorization_code",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(GOOGLE_TOKEN_URL, data=data)
        except httpx.HTTPError as e:
            raise GoogleOAuthError(f"Token exchange failed: {e}") from e

        if response.status_code != 200:
            raise GoogleOAuthError(f"Token exchange failed: {_error_code(response)}")

        data = _json_object(response)
        if data is None:
            raise GoogleOAuthError("Token exchange failed: malformed response")

        access_token = data.get("access_token")
        if not access_token:
            raise GoogleOAuthError("Token exchange failed: no access token")
        return access_token

    async def get_user_info(self, access_token: str) -> GoogleUserInfo:
        """Fetch the profile of the account that granted access."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    GOOGLE_USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
        except httpx.HTTPError as e:
            raise GoogleOAuthError(f"Failed to get user info: {e}") from e

        if response.status_code != 200:
            raise GoogleOAuthError(f"Failed to get user info: {_error_code(response)}")

        data = _json_object(response)
        if data is None:
            raise GoogleOAuthError("Failed to get user info: malformed response")
        if not data.get("email"):
            raise GoogleOAuthError("Google profile has no email")

        return GoogleUserInfo(
            email=data["email"],
            name=data.get("name"),
            picture=data.get("picture"),
            sub=data.get("sub") or data.get("id"),
        )

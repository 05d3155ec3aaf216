"""Google OAuth endpoint and service tests."""

from unittest.mock import AsyncMock, MagicMock, patch
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from sqlalchemy.exc import SQLAlchemyError

from memoir.api.dependencies import get_google_oauth_service
from memoir.config import Settings
from memoir.main import app
from memoir.models.user import User
from memoir.services.google_oauth import (
    GoogleOAuthError,
    GoogleOAuthService,
    GoogleUserInfo,
    OAuthNotConfiguredError,
)

STATE = "a" * 64


@pytest.fixture
def oauth_settings():
    return Settings(
        google_client_id="test-google-client-id",
        google_client_secret="test-google-client-secret",
        google_redirect_uri="http://localhost:8000/api/auth/google/callback",
    )


@pytest.fixture
def fake_oauth(client):
    """Replace the Google service so no request leaves the process."""
    service = MagicMock()
    service.build_authorization_url.return_value = "https://accounts.google.com/o/oauth2/v2/auth?x=1"
    service.exchange_code_for_token = AsyncMock(return_value="google-access-token")
    service.get_user_info = AsyncMock(
        return_value=GoogleUserInfo(email="NewUser@gmail.com", name="New User", sub="123")
    )
    app.dependency_overrides[get_google_oauth_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_google_oauth_service, None)


def _callback(client, query="code=auth-code", state=STATE):
    if state is not None:
        client.cookies.set("oauth-state", state)
    return client.get(f"/api/auth/google/callback?{query}&state={STATE}", follow_redirects=False)


def test_google_login_redirects_and_sets_state(client, fake_oauth):
    response = client.get("/api/auth/google", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"].startswith("https://accounts.google.com/")

    state = fake_oauth.build_authorization_url.call_args.args[0]
    assert len(state) == 64
    cookie = response.headers["set-cookie"].lower()
    assert cookie.startswith(f"oauth-state={state}")
    assert "httponly" in cookie


def test_google_login_not_configured(client, fake_oauth):
    fake_oauth.build_authorization_url.side_effect = OAuthNotConfiguredError("missing")
    response = client.get("/api/auth/google", follow_redirects=False)
    assert response.status_code == 500
    assert response.json()["detail"] == "Google OAuth not configured"


def test_callback_creates_social_user(client, db, fake_oauth):
    response = _callback(client)

    assert response.status_code == 307
    assert response.headers["location"].endswith("/diary")
    assert "auth-token" in response.cookies
    fake_oauth.exchange_code_for_token.assert_awaited_once_with("auth-code")
    fake_oauth.get_user_info.assert_awaited_once_with("google-access-token")

    user = db.query(User).filter(User.email == "newuser@gmail.com").first()
    assert user is not None
    assert user.nickname == "New User"
    assert user.password_hash is None


def test_callback_sets_auth_cookie_flags(client, fake_oauth):
    response = _callback(client)
    auth_cookie = next(
        c for c in response.headers.get_list("set-cookie") if c.startswith("auth-token=")
    ).lower()
    assert "httponly" in auth_cookie
    assert "samesite=lax" in auth_cookie
    assert "max-age=604800" in auth_cookie


def test_callback_nickname_falls_back_to_email(client, db, fake_oauth):
    fake_oauth.get_user_info.return_value = GoogleUserInfo(email="noname@gmail.com")
    _callback(client)

    user = db.query(User).filter(User.email == "noname@gmail.com").first()
    assert user.nickname == "noname"


def test_callback_reuses_existing_user(client, db, fake_oauth, make_user):
    """A password account with the same email is logged in, not duplicated."""
    existing = make_user("newuser@gmail.com", nickname="Original")
    hash_before = existing.password_hash

    response = _callback(client)
    assert response.status_code == 307

    users = db.query(User).filter(User.email == "newuser@gmail.com").all()
    assert len(users) == 1
    assert users[0].nickname == "Original"
    assert users[0].password_hash == hash_before


def test_callback_login_reaches_protected_routes(client, fake_oauth):
    _callback(client)
    assert client.get("/api/diary").status_code == 200


def test_callback_user_denied(client, fake_oauth):
    response = client.get(
        "/api/auth/google/callback?error=access_denied", follow_redirects=False
    )
    assert response.status_code == 307
    assert response.headers["location"].endswith("/login?error=google_login_failed")
    fake_oauth.exchange_code_for_token.assert_not_awaited()


def test_callback_missing_code(client, fake_oauth):
    response = client.get("/api/auth/google/callback", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"].endswith("/login?error=missing_code")


def test_callback_state_mismatch(client, fake_oauth):
    response = _callback(client, state="b" * 64)
    assert response.status_code == 307
    assert response.headers["location"].endswith("/login?error=invalid_state")
    fake_oauth.exchange_code_for_token.assert_not_awaited()


def test_callback_missing_state_cookie(client, fake_oauth):
    response = _callback(client, state=None)
    assert response.headers["location"].endswith("/login?error=invalid_state")


def test_callback_token_exchange_fails(client, fake_oauth):
    fake_oauth.exchange_code_for_token.side_effect = GoogleOAuthError("invalid_grant")
    response = _callback(client)
    assert response.status_code == 307
    assert response.headers["location"].endswith("/login?error=authentication_failed")
    assert "auth-token" not in response.cookies


def test_callback_userinfo_fails(client, fake_oauth):
    fake_oauth.get_user_info.side_effect = GoogleOAuthError("invalid_token")
    response = _callback(client)
    assert response.headers["location"].endswith("/login?error=authentication_failed")


def test_callback_not_configured(client, fake_oauth):
    fake_oauth.exchange_code_for_token.side_effect = OAuthNotConfiguredError("no secret")
    response = _callback(client)
    assert response.headers["location"].endswith("/login?error=authentication_failed")


def test_callback_database_failure(client, fake_oauth):
    with patch(
        "memoir.api.auth.upsert_social_user", side_effect=SQLAlchemyError("connection failed")
    ):
        response = _callback(client)
    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"
    assert "google-access-token" not in response.text


def test_build_authorization_url(oauth_settings):
    url = GoogleOAuthService(oauth_settings).build_authorization_url("xyz")
    parsed = urlparse(url)
    params = parse_qs(parsed.query)

    assert parsed.netloc == "accounts.google.com"
    assert params["client_id"] == ["test-google-client-id"]
    assert params["redirect_uri"] == ["http://localhost:8000/api/auth/google/callback"]
    assert params["response_type"] == ["code"]
    assert params["scope"] == ["email profile"]
    assert params["access_type"] == ["offline"]
    assert params["prompt"] == ["consent"]
    assert params["state"] == ["xyz"]


def test_build_authorization_url_requires_config():
    service = GoogleOAuthService(Settings(google_client_id=None, google_redirect_uri=None))
    with pytest.raises(OAuthNotConfiguredError):
        service.build_authorization_url("xyz")


def _mock_async_client(response: httpx.Response) -> MagicMock:
    http_client = AsyncMock()
    http_client.post.return_value = response
    http_client.get.return_value = response
    factory = MagicMock()
    factory.return_value.__aenter__.return_value = http_client
    factory.return_value.__aexit__.return_value = False
    return factory


class TestGoogleOAuthService:
    """Tests for the httpx calls to Google."""

    @pytest.mark.asyncio
    async def test_exchange_code_for_token(self, oauth_settings):
        response = httpx.Response(200, json={"access_token": "tok", "token_type": "Bearer"})
        factory = _mock_async_client(response)

        with patch("memoir.services.google_oauth.httpx.AsyncClient", factory):
            token = await GoogleOAuthService(oauth_settings).exchange_code_for_token("code-1")

        assert token == "tok"
        http_client = factory.return_value.__aenter__.return_value
        sent = http_client.post.call_args.kwargs["data"]
        assert sent["code"] == "code-1"
        assert sent["grant_type"] == "authorization_code"
        assert sent["client_secret"] == "test-google-client-secret"

    @pytest.mark.asyncio
    async def test_exchange_code_rejected(self, oauth_settings):
        factory = _mock_async_client(httpx.Response(400, json={"error": "invalid_grant"}))

        with patch("memoir.services.google_oauth.httpx.AsyncClient", factory):
            with pytest.raises(GoogleOAuthError, match="invalid_grant"):
                await GoogleOAuthService(oauth_settings).exchange_code_for_token("bad")

    @pytest.mark.asyncio
    async def test_exchange_code_requires_secret(self, oauth_settings):
        oauth_settings.google_client_secret = None
        with pytest.raises(OAuthNotConfiguredError):
            await GoogleOAuthService(oauth_settings).exchange_code_for_token("code")

    @pytest.mark.asyncio
    async def test_exchange_code_network_error(self, oauth_settings):
        factory = MagicMock()
        factory.return_value.__aenter__.side_effect = httpx.ConnectError("down")

        with patch("memoir.services.google_oauth.httpx.AsyncClient", factory):
            with pytest.raises(GoogleOAuthError):
                await GoogleOAuthService(oauth_settings).exchange_code_for_token("code")

    @pytest.mark.asyncio
    async def test_get_user_info(self, oauth_settings):
        response = httpx.Response(
            200, json={"email": "someone@gmail.com", "name": "Someone", "id": "42"}
        )
        factory = _mock_async_client(response)

        with patch("memoir.services.google_oauth.httpx.AsyncClient", factory):
            info = await GoogleOAuthService(oauth_settings).get_user_info("tok")

        assert info == GoogleUserInfo(email="someone@gmail.com", name="Someone", sub="42")
        http_client = factory.return_value.__aenter__.return_value
        assert http_client.get.call_args.kwargs["headers"] == {"Authorization": "Bearer tok"}

    @pytest.mark.asyncio
    async def test_get_user_info_rejected(self, oauth_settings):
        factory = _mock_async_client(httpx.Response(401, json={"error": "invalid_token"}))

        with patch("memoir.services.google_oauth.httpx.AsyncClient", factory):
            with pytest.raises(GoogleOAuthError, match="invalid_token"):
                await GoogleOAuthService(oauth_settings).get_user_info("expired")

    @pytest.mark.asyncio
    async def test_get_user_info_without_email(self, oauth_settings):
        factory = _mock_async_client(httpx.Response(200, json={"name": "No Email"}))

        with patch("memoir.services.google_oauth.httpx.AsyncClient", factory):
            with pytest.raises(GoogleOAuthError):
                await GoogleOAuthService(oauth_settings).get_user_info("tok")

    @pytest.mark.asyncio
    async def test_exchange_code_non_json_body(self, oauth_settings):
        factory = _mock_async_client(httpx.Response(200, text="<html>gateway</html>"))

        with patch("memoir.services.google_oauth.httpx.AsyncClient", factory):
            with pytest.raises(GoogleOAuthError, match="malformed response"):
                await GoogleOAuthService(oauth_settings).exchange_code_for_token("code")

    @pytest.mark.asyncio
    async def test_exchange_code_error_body_not_an_object(self, oauth_settings):
        factory = _mock_async_client(httpx.Response(400, json=["bad"]))

        with patch("memoir.services.google_oauth.httpx.AsyncClient", factory):
            with pytest.raises(GoogleOAuthError, match="Unknown error"):
                await GoogleOAuthService(oauth_settings).exchange_code_for_token("code")

    @pytest.mark.asyncio
    async def test_get_user_info_non_json_body(self, oauth_settings):
        factory = _mock_async_client(httpx.Response(200, text="not json"))

        with patch("memoir.services.google_oauth.httpx.AsyncClient", factory):
            with pytest.raises(GoogleOAuthError, match="malformed response"):
                await GoogleOAuthService(oauth_settings).get_user_info("tok")

    @pytest.mark.asyncio
    async def test_get_user_info_list_body(self, oauth_settings):
        factory = _mock_async_client(httpx.Response(200, json=["someone@gmail.com"]))

        with patch("memoir.services.google_oauth.httpx.AsyncClient", factory):
            with pytest.raises(GoogleOAuthError):
                await GoogleOAuthService(oauth_settings).get_user_info("tok")


def test_callback_redirects_when_google_returns_html(client, oauth_settings):
    """A garbled token response still ends on the login page, not a 500."""
    app.dependency_overrides[get_google_oauth_service] = lambda: GoogleOAuthService(
        oauth_settings
    )
    factory = _mock_async_client(httpx.Response(200, text="<html>gateway</html>"))
    try:
        with patch("memoir.services.google_oauth.httpx.AsyncClient", factory):
            response = _callback(client)
    finally:
        app.dependency_overrides.pop(get_google_oauth_service, None)

    assert response.status_code == 307
    assert response.headers["location"].endswith("/login?error=authentication_failed")

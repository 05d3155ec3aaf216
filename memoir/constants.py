"""Shared constants for authentication, pagination and preferences."""

# Authentication
AUTH_COOKIE_NAME = "auth-token"
AUTH_COOKIE_MAX_AGE = 7 * 24 * 60 * 60  # 7 days in seconds
OAUTH_STATE_COOKIE_NAME = "oauth-state"
OAUTH_STATE_COOKIE_MAX_AGE = 10 * 60
MIN_PASSWORD_LENGTH = 8

# Pagination
PAGINATION_DEFAULT_LIMIT = 10
PAGINATION_MAX_LIMIT = 50

# Idle timer thresholds: 30, 60, 90 and 180 days
VALID_IDLE_THRESHOLDS = (2592000, 5184000, 7776000, 15552000)
DEFAULT_IDLE_THRESHOLD_SEC = VALID_IDLE_THRESHOLDS[0]

# Same loose shape check the frontend uses; EmailStr handles account emails.
EMAIL_REGEX = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

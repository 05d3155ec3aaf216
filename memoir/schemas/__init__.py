"""Pydantic schemas for API requests and responses."""

from memoir.schemas.auth import (
    LoginResponse,
    MessageResponse,
    SignupResponse,
    UserLogin,
    UserSignup,
)
from memoir.schemas.contact import ContactIn, ContactListResponse, ContactsReplace
from memoir.schemas.diary import (
    DiaryCreate,
    DiaryCreateResponse,
    DiaryListResponse,
    DiaryResponse,
    DiaryUpdate,
)
from memoir.schemas.user import (
    PreferencesResponse,
    PreferencesUpdate,
    ProfileUpdate,
    UserProfileResponse,
)

__all__ = [
    "UserSignup",
    "UserLogin",
    "SignupResponse",
    "LoginResponse",
    "MessageResponse",
    "DiaryCreate",
    "DiaryUpdate",
    "DiaryResponse",
    "DiaryCreateResponse",
    "DiaryListResponse",
    "ContactIn",
    "ContactsReplace",
    "ContactListResponse",
    "PreferencesUpdate",
    "PreferencesResponse",
    "ProfileUpdate",
    "UserProfileResponse",
]

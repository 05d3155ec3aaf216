"""User profile and preference schemas."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from memoir.constants import VALID_IDLE_THRESHOLDS

_TIMER_STATUSES = ("PAUSED", "ACTIVE", "INACTIVE")


class PreferencesUpdate(BaseModel):
    """Update idle timer preferences."""

    timer_status: str | None = None
    timer_idle_threshold_sec: int | None = Field(None, strict=True)

    @field_validator("timer_status")
    @classmethod
    def validate_timer_status(cls, v: str | None) -> str | None:
        if v is not None and v not in _TIMER_STATUSES:
            raise ValueError("Invalid timer_status. Must be PAUSED, ACTIVE, or INACTIVE")
        return v

    @field_validator("timer_idle_threshold_sec")
    @classmethod
    def validate_threshold(cls, v: int | None) -> int | None:
        if v is not None and v not in VALID_IDLE_THRESHOLDS:
            allowed = ", ".join(str(t) for t in VALID_IDLE_THRESHOLDS)
            raise ValueError(f"Invalid timer_idle_threshold_sec. Must be one of: {allowed}")
        return v

    @model_validator(mode="after")
    def at_least_one_field(self) -> "PreferencesUpdate":
        if self.timer_status is None and self.timer_idle_threshold_sec is None:
            raise ValueError(
                "At least one field (timer_status or timer_idle_threshold_sec) must be provided"
            )
        return self


class PreferencesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    timer_status: str
    timer_idle_threshold_sec: int


class ProfileUpdate(BaseModel):
    """Update profile fields. An explicit null name clears it."""

    nickname: str | None = Field(None, max_length=100)
    name: str | None = Field(None, max_length=255)

    @model_validator(mode="after")
    def validate_fields(self) -> "ProfileUpdate":
        provided = self.model_fields_set & {"nickname", "name"}
        if not provided:
            raise ValueError("At least one field (nickname or name) must be provided")
        if "nickname" in provided and (self.nickname is None or not self.nickname.strip()):
            raise ValueError("Nickname cannot be empty")
        return self


class UserProfile(BaseModel):
    """User information response. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    user_id: int = Field(validation_alias=AliasChoices("id", "user_id"))
    email: str
    nickname: str
    name: str | None
    has_password: bool
    timer_status: str
    timer_idle_threshold_sec: int
    created_at: datetime
    last_active_at: datetime


class UserProfileResponse(BaseModel):
    user: UserProfile

"""Authentication schemas."""

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from memoir.constants import MIN_PASSWORD_LENGTH


class UserSignup(BaseModel):
    """User signup request."""

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)
    password_confirm: str | None = Field(None, alias="passwordConfirm", max_length=128)
    nickname: str = Field(..., max_length=100)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("nickname")
    @classmethod
    def nickname_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Nickname is required")
        return v

    @model_validator(mode="after")
    def passwords_match(self) -> "UserSignup":
        if self.password != self.password_confirm:
            raise ValueError("Passwords do not match")
        return self


class UserLogin(BaseModel):
    """User login request.

    Only presence is checked here so that every bad credential gets the same 401.
    """

    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class SignupUser(BaseModel):
    """Public fields echoed back after signup."""

    model_config = ConfigDict(from_attributes=True)

    email: str
    nickname: str


class SignupResponse(BaseModel):
    user: SignupUser


class LoginUser(BaseModel):
    """Public fields echoed back after login."""

    model_config = ConfigDict(from_attributes=True)

    user_id: int = Field(validation_alias=AliasChoices("id", "user_id"))
    email: str
    nickname: str


class LoginResponse(BaseModel):
    success: bool = True
    user: LoginUser


class MessageResponse(BaseModel):
    """Generic acknowledgement."""

    success: bool = True
    message: str

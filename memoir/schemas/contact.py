"""Contact schemas."""

import re

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from memoir.constants import EMAIL_REGEX

_email_pattern = re.compile(EMAIL_REGEX)


class ContactIn(BaseModel):
    """A contact as submitted by the settings page. Both fields are optional."""

    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        if v is None or v == "":
            return None
        if not _email_pattern.fullmatch(v):
            raise ValueError(f"Invalid email format: {v}")
        return v

    @field_validator("phone")
    @classmethod
    def empty_phone_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()


class ContactsReplace(BaseModel):
    """Full replacement of a user's contact list."""

    contacts: list[ContactIn]


class ContactResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    contact_id: int = Field(validation_alias=AliasChoices("id", "contact_id"))
    email: str | None
    phone: str | None


class ContactListResponse(BaseModel):
    contacts: list[ContactResponse]

"""Diary schemas."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class DiaryCreate(BaseModel):
    """Create a new diary entry."""

    content: str = Field(..., max_length=100_000)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content is required and cannot be empty")
        return v


class DiaryUpdate(BaseModel):
    """Update a diary entry.

    Blank content is rejected by the handler after the ownership check.
    """

    content: str | None = Field(None, max_length=100_000)


class DiaryResponse(BaseModel):
    """Diary entry response."""

    model_config = ConfigDict(from_attributes=True)

    diary_id: int = Field(validation_alias=AliasChoices("id", "diary_id"))
    content: str
    created_at: datetime
    updated_at: datetime


class DiaryCreateResponse(BaseModel):
    diary_id: int


class DiaryListResponse(BaseModel):
    """One page of diaries, newest first."""

    model_config = ConfigDict(populate_by_name=True)

    diaries: list[DiaryResponse]
    next_cursor: int | None = Field(None, alias="nextCursor")


class DiaryDeleteResponse(BaseModel):
    message: str = "Diary deleted successfully"

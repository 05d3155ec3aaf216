"""Diary API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from memoir.api.dependencies import get_current_user
from memoir.constants import PAGINATION_DEFAULT_LIMIT, PAGINATION_MAX_LIMIT
from memoir.database import get_db
from memoir.models.diary import Diary
from memoir.models.user import User
from memoir.schemas.diary import (
    DiaryCreate,
    DiaryCreateResponse,
    DiaryDeleteResponse,
    DiaryListResponse,
    DiaryResponse,
    DiaryUpdate,
)
from memoir.services.activity import record_activity

router = APIRouter(prefix="/api/diary", tags=["diary"])


def parse_limit(raw: str | None) -> int:
    """Parse the page size, falling back to the default for junk input."""
    if raw is None:
        return PAGINATION_DEFAULT_LIMIT
    try:
        limit = int(raw)
    except ValueError:
        return PAGINATION_DEFAULT_LIMIT
    if limit <= 0:
        return PAGINATION_DEFAULT_LIMIT
    return min(limit, PAGINATION_MAX_LIMIT)


def get_owned_diary(db: Session, diary_id: int, user: User) -> Diary:
    """Get a diary, enforcing that the current user wrote it."""
    diary = db.query(Diary).filter(Diary.id == diary_id).first()
    if diary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    if diary.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return diary


@router.get("", response_model=DiaryListResponse)
async def get_diaries(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    cursor: str | None = None,
    limit: str | None = None,
):
    """Get the current user's diaries, newest first, one page at a time."""
    page_size = parse_limit(limit)

    query = db.query(Diary).filter(Diary.user_id == current_user.id)

    if cursor is not None and cursor.strip() != "":
        try:
            cursor_id = int(cursor)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid cursor"
            ) from None

        anchor = (
            db.query(Diary)
            .filter(Diary.id == cursor_id, Diary.user_id == current_user.id)
            .first()
        )
        if anchor is None:
            return DiaryListResponse(diaries=[], next_cursor=None)

        query = query.filter(
            or_(
                Diary.created_at < anchor.created_at,
                and_(Diary.created_at == anchor.created_at, Diary.id < anchor.id),
            )
        )

    # Fetch one extra row to learn whether another page exists
    diaries = (
        query.order_by(Diary.created_at.desc(), Diary.id.desc()).limit(page_size + 1).all()
    )

    has_more = len(diaries) > page_size
    items = diaries[:page_size]
    next_cursor = items[-1].id if has_more else None

    return DiaryListResponse(
        diaries=[DiaryResponse.model_validate(d) for d in items],
        next_cursor=next_cursor,
    )


@router.post("", response_model=DiaryCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_diary(
    diary_data: DiaryCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a new diary entry."""
    diary = Diary(user_id=current_user.id, content=diary_data.content)
    db.add(diary)
    db.commit()
    db.refresh(diary)

    record_activity(db, current_user)

    return DiaryCreateResponse(diary_id=diary.id)


@router.get("/{diary_id}", response_model=DiaryResponse)
async def get_diary(
    diary_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a single diary. Other users' diaries look missing."""
    diary = (
        db.query(Diary).filter(Diary.id == diary_id, Diary.user_id == current_user.id).first()
    )
    if diary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return diary


@router.put("/{diary_id}", response_model=DiaryResponse)
async def update_diary(
    diary_id: int,
    diary_data: DiaryUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update a diary's content (owner only)."""
    diary = get_owned_diary(db, diary_id, current_user)

    if diary_data.content is None or diary_data.content.strip() == "":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Content is required and cannot be empty",
        )

    diary.content = diary_data.content
    db.commit()
    db.refresh(diary)

    record_activity(db, current_user)

    return diary


@router.delete("/{diary_id}", response_model=DiaryDeleteResponse)
async def delete_diary(
    diary_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a diary (owner only)."""
    diary = get_owned_diary(db, diary_id, current_user)

    db.delete(diary)
    db.commit()

    record_activity(db, current_user)

    return DiaryDeleteResponse()

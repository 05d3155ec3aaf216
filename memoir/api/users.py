"""User account, profile, contacts and preference endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from memoir.api.cookies import clear_auth_cookie
from memoir.api.dependencies import get_current_user
from memoir.database import get_db
from memoir.models.contact import Contact
from memoir.models.enums import TimerStatus
from memoir.models.user import User
from memoir.schemas.auth import MessageResponse
from memoir.schemas.contact import ContactListResponse, ContactResponse, ContactsReplace
from memoir.schemas.user import (
    PreferencesResponse,
    PreferencesUpdate,
    ProfileUpdate,
    UserProfile,
    UserProfileResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["user"])


@router.delete("", response_model=MessageResponse)
async def delete_account(
    response: Response,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Withdraw: delete the user together with their diaries and contacts."""
    user_id = current_user.id
    db.delete(current_user)
    db.commit()
    logger.info(f"Deleted account {user_id}")

    clear_auth_cookie(response)
    return MessageResponse(message="Account deleted successfully")


@router.get("/profile", response_model=UserProfileResponse)
async def get_profile(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get the current user's profile."""
    return UserProfileResponse(user=UserProfile.model_validate(current_user))


@router.put("/profile", response_model=UserProfileResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update nickname and/or display name."""
    if "nickname" in profile_data.model_fields_set:
        current_user.nickname = profile_data.nickname.strip()
    if "name" in profile_data.model_fields_set:
        current_user.name = profile_data.name

    db.commit()
    db.refresh(current_user)

    return UserProfileResponse(user=UserProfile.model_validate(current_user))


@router.get("/contacts", response_model=ContactListResponse)
async def get_contacts(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the current user's contacts."""
    contacts = (
        db.query(Contact).filter(Contact.user_id == current_user.id).order_by(Contact.id).all()
    )
    return ContactListResponse(contacts=[ContactResponse.model_validate(c) for c in contacts])


@router.put("/contacts", response_model=ContactListResponse)
async def replace_contacts(
    contacts_data: ContactsReplace,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Replace the whole contact list. An empty list removes every contact."""
    db.query(Contact).filter(Contact.user_id == current_user.id).delete(
        synchronize_session=False
    )

    contacts = [
        Contact(user_id=current_user.id, email=c.email, phone=c.phone)
        for c in contacts_data.contacts
    ]
    db.add_all(contacts)
    db.commit()

    for contact in contacts:
        db.refresh(contact)

    return ContactListResponse(contacts=[ContactResponse.model_validate(c) for c in contacts])


@router.get("/preferences", response_model=PreferencesResponse)
async def get_preferences(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get idle timer preferences."""
    return current_user


@router.put("/preferences", response_model=PreferencesResponse)
async def update_preferences(
    preferences: PreferencesUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update idle timer status and/or threshold."""
    if preferences.timer_status is not None:
        current_user.timer_status = TimerStatus.from_request(preferences.timer_status).value
    if preferences.timer_idle_threshold_sec is not None:
        current_user.timer_idle_threshold_sec = preferences.timer_idle_threshold_sec

    db.commit()
    db.refresh(current_user)

    return current_user

"""Last-activity bookkeeping for idle detection."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from memoir.models.user import User
from memoir.services.auth import touch_last_active

logger = logging.getLogger(__name__)


def record_activity(db: Session, user: User) -> None:
    """Bump the user's last_active_at after a diary change.

    The diary change is already committed, so a failure here is logged and
    the request still succeeds.
    """
    user_id = user.id
    try:
        touch_last_active(user)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Failed to update last_active_at for user {user_id}: {e}")

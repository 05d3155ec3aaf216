"""SQLAlchemy models."""

from memoir.models.contact import Contact
from memoir.models.diary import Diary
from memoir.models.user import User

__all__ = [
    "User",
    "Diary",
    "Contact",
]

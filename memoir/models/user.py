"""User model."""

from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from memoir.constants import DEFAULT_IDLE_THRESHOLD_SEC
from memoir.database import Base
from memoir.models.enums import TimerStatus
from memoir.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication and ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    nickname = Column(String(100), nullable=False)
    name = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=True)  # NULL for Google-only accounts
    timer_status = Column(String(20), nullable=False, default=TimerStatus.ACTIVE.value)
    timer_idle_threshold_sec = Column(
        Integer, nullable=False, default=DEFAULT_IDLE_THRESHOLD_SEC
    )
    last_active_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    diaries = relationship(
        "Diary",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    contacts = relationship(
        "Contact",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def has_password(self) -> bool:
        return self.password_hash is not None

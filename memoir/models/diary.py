"""Diary model."""

from sqlalchemy import Column, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import relationship

from memoir.database import Base
from memoir.models.mixins import TimestampMixin


class Diary(Base, TimestampMixin):
    """A single diary entry written by a user."""

    __tablename__ = "diaries"
    __table_args__ = (Index("ix_diaries_user_id_created_at", "user_id", "created_at"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content = Column(Text, nullable=False)

    # Relationships
    user = relationship("User", back_populates="diaries")

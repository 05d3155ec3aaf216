"""Contact model."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from memoir.database import Base
from memoir.models.mixins import TimestampMixin


class Contact(Base, TimestampMixin):
    """Emergency/notification contact. Either field may be empty."""

    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)

    # Relationships
    user = relationship("User", back_populates="contacts")

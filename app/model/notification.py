"""
In-app notification. Owned by one user; only read state changes after creation.
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
import uuid
from app.core.database import Base
from app.model.types import JSONType
from app.utils.dates import utcnow

NOTIFICATION_TYPES = (
    "ORDER",
    "APPLICATION",
    "PROJECT",
    "REVIEW",
    "CHAT",
    "PAYMENT",
    "SYSTEM",
    "LOCATION",
)
PRIORITIES = ("low", "normal", "high")


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user_unread", "user_id", "is_read"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    notification_type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(String, nullable=False, default="normal")
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    related_object_type = Column(String, nullable=True)
    related_object_id = Column(String, nullable=True)
    data = Column(JSONType, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

"""
Per-user notification preferences. One row per user, created on first use.
"""
from sqlalchemy import Column, Boolean, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.core.database import Base


class NotificationSettings(Base):
    __tablename__ = "notification_settings"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    new_messages = Column(Boolean, nullable=False, default=True)
    new_orders = Column(Boolean, nullable=False, default=True)
    project_updates = Column(Boolean, nullable=False, default=True)
    review_received = Column(Boolean, nullable=False, default=True)
    payment_received = Column(Boolean, nullable=False, default=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

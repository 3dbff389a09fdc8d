"""
Chat message model. is_read only ever goes false -> true.
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from app.core.database import Base
from app.utils.dates import utcnow

MESSAGE_TEXT = "TEXT"
MESSAGE_IMAGE = "IMAGE"
MESSAGE_FILE = "FILE"
MESSAGE_TYPES = (MESSAGE_TEXT, MESSAGE_IMAGE, MESSAGE_FILE)


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    room_id = Column(UUID(as_uuid=True), ForeignKey("chat_rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False, default="")
    message_type = Column(String, nullable=False, default=MESSAGE_TEXT)
    file_url = Column(String, nullable=True)
    reply_to_id = Column(UUID(as_uuid=True), ForeignKey("chat_messages.id", ondelete="SET NULL"), nullable=True, index=True)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    # Client-side default keeps microseconds, so ordering is stable within a second.
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    room = relationship("ChatRoom", back_populates="messages", foreign_keys=[room_id])
    sender = relationship("User", backref="chat_messages")
    reply_to = relationship("ChatMessage", remote_side="ChatMessage.id")

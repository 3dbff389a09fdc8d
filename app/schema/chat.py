"""
Chat schemas: rooms, messages, read state.
"""
from datetime import datetime
from typing import List, Literal, Optional
import uuid
from pydantic import BaseModel, Field, model_validator


# --- Room ---


class ParticipantSummary(BaseModel):
    user_id: uuid.UUID
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[str] = None
    avatar_url: Optional[str] = None


class RoomCreateBody(BaseModel):
    """Body for POST /chat/rooms (create or get direct room)."""
    other_user_id: uuid.UUID
    order_id: Optional[uuid.UUID] = None


class RoomResponse(BaseModel):
    id: uuid.UUID
    chat_type: str
    order_id: Optional[uuid.UUID] = None
    last_message: Optional[str] = None
    last_message_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    unread_count: int = 0
    other_participants: List[ParticipantSummary] = []


class RoomListResponse(BaseModel):
    """Paginated room list."""
    items: List[RoomResponse]
    page: int = Field(..., description="Current page (1-based).")
    limit: int = Field(..., description="Items per page.")
    total: int = Field(..., description="Total rooms for this user.")
    total_pages: int = Field(..., description="Total pages.")


# --- Message ---


class MessageCreateBody(BaseModel):
    """Body for POST /chat/rooms/{room_id}/messages."""
    content: str = Field("", max_length=10_000)
    message_type: Literal["TEXT", "IMAGE", "FILE"] = "TEXT"
    file_url: Optional[str] = Field(None, max_length=2048)
    reply_to_id: Optional[uuid.UUID] = None

    @model_validator(mode="after")
    def _check_payload(self):
        if self.message_type == "TEXT" and not self.content.strip():
            raise ValueError("Message content cannot be empty or whitespace only.")
        if self.message_type != "TEXT" and not self.file_url:
            raise ValueError("file_url is required for IMAGE and FILE messages.")
        return self


class MessageResponse(BaseModel):
    id: uuid.UUID
    room_id: uuid.UUID
    sender_id: uuid.UUID
    content: str
    message_type: str
    file_url: Optional[str] = None
    reply_to_id: Optional[uuid.UUID] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class MessageListResponse(BaseModel):
    """Paginated messages for a room."""
    items: List[MessageResponse]
    page: int = Field(..., description="Current page (1-based).")
    limit: int = Field(..., description="Items per page.")
    total: int = Field(..., description="Total messages in room.")
    total_pages: int = Field(..., description="Total pages.")


# --- Read state ---


class MessageReadResponse(BaseModel):
    message_id: uuid.UUID
    room_id: uuid.UUID
    is_read: bool
    read_at: Optional[datetime] = None
    unread_count: int


class RoomReadResponse(BaseModel):
    room_id: uuid.UUID
    marked_count: int
    unread_count: int


class UnreadCountResponse(BaseModel):
    unread_count: int


# --- Attachments ---


class AttachmentUploadBody(BaseModel):
    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(..., min_length=3, max_length=127)


class AttachmentUploadResponse(BaseModel):
    upload_url: str
    file_url: str
    key: str

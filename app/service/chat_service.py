"""
Chat service: rooms, messages and per-participant read state.

Read state has two parts that must agree: ChatMessage.is_read (monotonic)
and ChatParticipant.unread_count (never negative). A single-message read
decrements the counter only for the call that flipped the flag; a room
read resets it to zero.
"""
import logging
import os
import uuid
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.aws.s3 import build_public_url, presigned_upload_url
from app.core.config import settings
from app.core.exceptions import (
    Forbidden,
    NotConfigured,
    NotFound,
    ServiceUnavailable,
    ValidationError,
)
from app.crud import (
    chat_message_crud,
    chat_participant_crud,
    chat_room_crud,
    user_crud,
)
from app.model.chat_message import ChatMessage, MESSAGE_TEXT
from app.model.chat_room import ChatRoom
from app.realtime.connection_manager import connection_manager, room_channel
from app.schema.chat import (
    AttachmentUploadBody,
    AttachmentUploadResponse,
    MessageCreateBody,
    MessageListResponse,
    MessageReadResponse,
    MessageResponse,
    ParticipantSummary,
    RoomListResponse,
    RoomReadResponse,
    RoomResponse,
)
from app.service.notification_service import NotificationService
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 200


def message_preview(msg: ChatMessage) -> str:
    text = msg.content if msg.message_type == MESSAGE_TEXT else (msg.content or f"[{msg.message_type.lower()}]")
    if len(text) > PREVIEW_LENGTH:
        return text[: PREVIEW_LENGTH - 3] + "..."
    return text


class ChatService:
    """Chat rooms and messages for one request's DB session."""

    def __init__(self, db: Session):
        self.db = db

    # --- Rooms ---

    def _other_participants(self, room_id: uuid.UUID, user_id: uuid.UUID) -> List[ParticipantSummary]:
        others = chat_participant_crud.list_other_participants(
            self.db, room_id=room_id, exclude_user_id=user_id
        )
        return [
            ParticipantSummary(
                user_id=p.user_id,
                name=p.user.full_name or None if p.user else None,
                first_name=p.user.first_name if p.user else None,
                last_name=p.user.last_name if p.user else None,
                role=p.user.role if p.user else None,
                avatar_url=p.user.avatar_url if p.user else None,
            )
            for p in others
        ]

    def _room_response(self, room: ChatRoom, user_id: uuid.UUID, unread_count: int) -> RoomResponse:
        return RoomResponse(
            id=room.id,
            chat_type=room.chat_type,
            order_id=room.order_id,
            last_message=room.last_message,
            last_message_at=room.last_message_at,
            created_at=room.created_at,
            unread_count=unread_count,
            other_participants=self._other_participants(room.id, user_id),
        )

    def create_or_get_direct_room(
        self,
        user_id: uuid.UUID,
        other_user_id: uuid.UUID,
        order_id: Optional[uuid.UUID] = None,
    ) -> Tuple[RoomResponse, bool]:
        """
        Existing direct room of exactly these two users (same order), or a new one.

        Returns:
            (room, created) where created is False when the room already existed.
        """
        if other_user_id == user_id:
            raise ValidationError("other_user_id cannot be yourself.")
        if not user_crud.get(self.db, other_user_id):
            raise NotFound("User")

        room = chat_room_crud.find_direct_room(
            self.db, user_id=user_id, other_user_id=other_user_id, order_id=order_id
        )
        if room:
            part = chat_participant_crud.get_by_room_and_user(self.db, room_id=room.id, user_id=user_id)
            return self._room_response(room, user_id, part.unread_count if part else 0), False

        try:
            room = chat_room_crud.create_from_dict(
                self.db,
                obj_in={"chat_type": "direct", "order_id": order_id},
                commit=False,
            )
            for participant_id in (user_id, other_user_id):
                chat_participant_crud.create_from_dict(
                    self.db,
                    obj_in={"room_id": room.id, "user_id": participant_id, "unread_count": 0},
                    commit=False,
                )
            self.db.commit()
            self.db.refresh(room)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to create chat room: %s", e)
            raise ServiceUnavailable("Failed to create chat room. Please try again.")
        logger.info("Chat room %s created for users %s, %s", room.id, user_id, other_user_id)
        return self._room_response(room, user_id, 0), True

    def list_rooms(self, user_id: uuid.UUID, page: int = 1, limit: int = 20) -> RoomListResponse:
        rooms, total = chat_room_crud.list_rooms_for_user(
            self.db, user_id=user_id, page=page, limit=limit
        )
        items = []
        for room in rooms:
            part = chat_participant_crud.get_by_room_and_user(self.db, room_id=room.id, user_id=user_id)
            items.append(self._room_response(room, user_id, part.unread_count if part else 0))
        return RoomListResponse(
            items=items,
            page=page,
            limit=limit,
            total=total,
            total_pages=(total + limit - 1) // limit if total else 0,
        )

    def get_room(self, user_id: uuid.UUID, room_id: uuid.UUID) -> RoomResponse:
        part = chat_participant_crud.get_by_room_and_user(self.db, room_id=room_id, user_id=user_id)
        if not part:
            raise NotFound("Room")
        room = chat_room_crud.get_by_id(self.db, room_id=room_id)
        if not room:
            raise NotFound("Room")
        return self._room_response(room, user_id, part.unread_count)

    # --- Messages ---

    def list_messages(
        self,
        user_id: uuid.UUID,
        room_id: uuid.UUID,
        page: int = 1,
        limit: int = 50,
        before_id: Optional[uuid.UUID] = None,
    ) -> MessageListResponse:
        """Newest first. Opening the history marks the room read for the caller."""
        if not chat_participant_crud.get_by_room_and_user(self.db, room_id=room_id, user_id=user_id):
            raise NotFound("Room")
        self.mark_room_read(user_id, room_id)
        items, total = chat_message_crud.list_by_room_paginated(
            self.db, room_id=room_id, page=page, limit=limit, before_id=before_id
        )
        return MessageListResponse(
            items=[MessageResponse.model_validate(m) for m in items],
            page=page,
            limit=limit,
            total=total,
            total_pages=(total + limit - 1) // limit if total else 0,
        )

    def send_message(
        self, user_id: uuid.UUID, room_id: uuid.UUID, body: MessageCreateBody
    ) -> MessageResponse:
        part = chat_participant_crud.get_by_room_and_user(self.db, room_id=room_id, user_id=user_id)
        if not part:
            raise NotFound("Room")
        room = chat_room_crud.get_by_id(self.db, room_id=room_id)
        if not room:
            raise NotFound("Room")
        if body.reply_to_id:
            quoted = chat_message_crud.get_by_id(self.db, message_id=body.reply_to_id)
            if not quoted or quoted.room_id != room_id:
                raise ValidationError("Replied message must exist and belong to this room.")

        try:
            msg = chat_message_crud.create_from_dict(
                self.db,
                obj_in={
                    "room_id": room_id,
                    "sender_id": user_id,
                    "content": body.content.strip(),
                    "message_type": body.message_type,
                    "file_url": body.file_url,
                    "reply_to_id": body.reply_to_id,
                    "is_read": False,
                },
                commit=False,
            )
            room.last_message = message_preview(msg)
            room.last_message_at = msg.created_at
            self.db.add(room)
            chat_participant_crud.increment_unread_for_others(
                self.db, room_id=room_id, exclude_user_id=user_id
            )
            self.db.commit()
            self.db.refresh(msg)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to save chat message: %s", e)
            raise ServiceUnavailable("Failed to save message. Please try again.")

        logger.info("Message %s sent to room %s by %s", msg.id, room_id, user_id)
        response = MessageResponse.model_validate(msg)
        connection_manager.broadcast_sync(
            room_channel(room_id), "message_created", response.model_dump(mode="json")
        )
        self._notify_recipients(user_id, room_id, msg)
        return response

    def _notify_recipients(self, sender_id: uuid.UUID, room_id: uuid.UUID, msg: ChatMessage) -> None:
        sender = user_crud.get(self.db, sender_id)
        sender_name = (sender.full_name or sender.email) if sender else "Someone"
        preview = message_preview(msg)
        notifications = NotificationService(self.db)
        for other in chat_participant_crud.list_other_participants(
            self.db, room_id=room_id, exclude_user_id=sender_id
        ):
            if not other.notifications_enabled:
                continue
            notifications.send(
                user_id=other.user_id,
                notification_type="CHAT",
                title=f"New message from {sender_name}",
                message=preview,
                data={"room_id": str(room_id), "message_id": str(msg.id)},
                related_object_type="chat_room",
                related_object_id=room_id,
            )

    # --- Read state ---

    def mark_message_read(self, user_id: uuid.UUID, message_id: uuid.UUID) -> MessageReadResponse:
        """
        Idempotent. The caller's unread_count drops by one only when this call
        flipped the message to read; it never goes below zero. Marking one's
        own message changes nothing.
        """
        msg = chat_message_crud.get_by_id(self.db, message_id=message_id)
        if not msg:
            raise NotFound("Message")
        part = chat_participant_crud.get_by_room_and_user(self.db, room_id=msg.room_id, user_id=user_id)
        if not part:
            raise Forbidden("You are not a participant of this room")

        flipped = False
        if msg.sender_id != user_id:
            flipped = chat_message_crud.mark_read_if_unread(
                self.db, message_id=message_id, read_at=utcnow()
            )
            if flipped:
                chat_participant_crud.decrement_unread(self.db, participant_id=part.id)
            self.db.commit()
            self.db.refresh(msg)
            self.db.refresh(part)

        if flipped:
            logger.info("Message %s read by %s", message_id, user_id)
            connection_manager.broadcast_sync(
                room_channel(msg.room_id),
                "message_read",
                {"message_id": str(msg.id), "user_id": str(user_id), "read_at": msg.read_at},
            )
        return MessageReadResponse(
            message_id=msg.id,
            room_id=msg.room_id,
            is_read=msg.is_read,
            read_at=msg.read_at,
            unread_count=part.unread_count,
        )

    def mark_room_read(self, user_id: uuid.UUID, room_id: uuid.UUID) -> RoomReadResponse:
        """Every message from others becomes read; the caller's counter becomes exactly 0."""
        room = chat_room_crud.get_by_id(self.db, room_id=room_id)
        if not room:
            raise NotFound("Room")
        part = chat_participant_crud.get_by_room_and_user(self.db, room_id=room_id, user_id=user_id)
        if not part:
            raise Forbidden("You are not a participant of this room")

        now = utcnow()
        marked = chat_message_crud.mark_room_read_for(
            self.db, room_id=room_id, reader_id=user_id, read_at=now
        )
        chat_participant_crud.reset_unread(self.db, participant_id=part.id, seen_at=now)
        self.db.commit()

        if marked:
            logger.info("Room %s read by %s (%s messages)", room_id, user_id, marked)
            connection_manager.broadcast_sync(
                room_channel(room_id), "room_read", {"user_id": str(user_id), "read_at": now}
            )
        return RoomReadResponse(room_id=room_id, marked_count=marked, unread_count=0)

    def unread_total(self, user_id: uuid.UUID) -> int:
        """Recomputed from message flags, independent of the stored counters."""
        return chat_message_crud.count_unread_for_user(self.db, user_id=user_id)

    # --- Attachments ---

    def attachment_upload_url(
        self, user_id: uuid.UUID, room_id: uuid.UUID, body: AttachmentUploadBody
    ) -> AttachmentUploadResponse:
        if not settings.use_s3:
            raise NotConfigured("Attachment upload requires S3. Set S3_BUCKET_NAME.")
        if not chat_participant_crud.get_by_room_and_user(self.db, room_id=room_id, user_id=user_id):
            raise NotFound("Room")
        ext = os.path.splitext(body.filename)[1].lower()[:10]
        key = f"chat/{room_id}/{uuid.uuid4()}{ext}"
        upload_url = presigned_upload_url(key, body.content_type)
        return AttachmentUploadResponse(upload_url=upload_url, file_url=build_public_url(key), key=key)

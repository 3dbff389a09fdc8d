"""
Chat message CRUD.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
import uuid
from sqlalchemy.orm import Session
from sqlalchemy import desc, func

from app.model.chat_message import ChatMessage
from app.model.chat_participant import ChatParticipant
from app.crud.base import CRUDBase


class CRUDChatMessage(CRUDBase[ChatMessage, Dict[str, Any], Dict[str, Any]]):
    def get_by_id(self, db: Session, *, message_id: uuid.UUID) -> Optional[ChatMessage]:
        return db.query(self.model).filter(self.model.id == message_id).first()

    def list_by_room_paginated(
        self,
        db: Session,
        *,
        room_id: uuid.UUID,
        page: int = 1,
        limit: int = 50,
        before_id: Optional[uuid.UUID] = None,
    ) -> Tuple[List[ChatMessage], int]:
        """List messages in a room, newest first. Optional before_id for cursor pagination."""
        base = db.query(self.model).filter(self.model.room_id == room_id)
        if before_id:
            msg = self.get_by_id(db, message_id=before_id)
            if msg and msg.room_id == room_id:
                base = base.filter(self.model.created_at < msg.created_at)
        total = base.with_entities(func.count(self.model.id)).scalar() or 0
        skip = (page - 1) * limit if not before_id else 0
        items = (
            base.order_by(desc(self.model.created_at))
            .offset(skip)
            .limit(limit)
            .all()
        )
        return items, total

    def mark_read_if_unread(self, db: Session, *, message_id: uuid.UUID, read_at: datetime) -> bool:
        """false -> true transition. Not committed. True only for the call that flipped it."""
        changed = (
            db.query(self.model)
            .filter(self.model.id == message_id, self.model.is_read.is_(False))
            .update(
                {self.model.is_read: True, self.model.read_at: read_at},
                synchronize_session=False,
            )
        )
        return changed > 0

    def mark_room_read_for(
        self, db: Session, *, room_id: uuid.UUID, reader_id: uuid.UUID, read_at: datetime
    ) -> int:
        """Mark every unread message in the room not sent by reader_id. Not committed."""
        return (
            db.query(self.model)
            .filter(
                self.model.room_id == room_id,
                self.model.sender_id != reader_id,
                self.model.is_read.is_(False),
            )
            .update(
                {self.model.is_read: True, self.model.read_at: read_at},
                synchronize_session=False,
            )
        )

    def count_unread_for_user(self, db: Session, *, user_id: uuid.UUID) -> int:
        """Live count of unread messages from others across all of the user's rooms."""
        rooms = db.query(ChatParticipant.room_id).filter(ChatParticipant.user_id == user_id)
        return (
            db.query(func.count(self.model.id))
            .filter(
                self.model.room_id.in_(rooms),
                self.model.sender_id != user_id,
                self.model.is_read.is_(False),
            )
            .scalar()
            or 0
        )


chat_message_crud = CRUDChatMessage(ChatMessage)

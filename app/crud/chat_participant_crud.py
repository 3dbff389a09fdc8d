"""
Chat participant CRUD. Counter changes are single-row conditional UPDATEs.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
import uuid
from sqlalchemy.orm import Session

from app.model.chat_participant import ChatParticipant
from app.crud.base import CRUDBase


class CRUDChatParticipant(CRUDBase[ChatParticipant, Dict[str, Any], Dict[str, Any]]):
    def get_by_room_and_user(
        self, db: Session, *, room_id: uuid.UUID, user_id: uuid.UUID
    ) -> Optional[ChatParticipant]:
        return (
            db.query(self.model)
            .filter(
                self.model.room_id == room_id,
                self.model.user_id == user_id,
            )
            .first()
        )

    def list_by_room(self, db: Session, *, room_id: uuid.UUID) -> List[ChatParticipant]:
        return db.query(self.model).filter(self.model.room_id == room_id).all()

    def list_other_participants(
        self, db: Session, *, room_id: uuid.UUID, exclude_user_id: uuid.UUID
    ) -> List[ChatParticipant]:
        return (
            db.query(self.model)
            .filter(
                self.model.room_id == room_id,
                self.model.user_id != exclude_user_id,
            )
            .all()
        )

    def reset_unread(self, db: Session, *, participant_id: uuid.UUID, seen_at: datetime) -> None:
        """Set unread_count to exactly 0. Not committed."""
        db.query(self.model).filter(self.model.id == participant_id).update(
            {self.model.unread_count: 0, self.model.last_seen: seen_at},
            synchronize_session=False,
        )

    def decrement_unread(self, db: Session, *, participant_id: uuid.UUID) -> bool:
        """Decrement by one only while positive. Not committed. Returns True if it changed."""
        changed = (
            db.query(self.model)
            .filter(self.model.id == participant_id, self.model.unread_count > 0)
            .update(
                {self.model.unread_count: self.model.unread_count - 1},
                synchronize_session=False,
            )
        )
        return changed > 0

    def increment_unread_for_others(
        self, db: Session, *, room_id: uuid.UUID, exclude_user_id: uuid.UUID
    ) -> int:
        """Not committed; the caller commits together with the new message."""
        return (
            db.query(self.model)
            .filter(
                self.model.room_id == room_id,
                self.model.user_id != exclude_user_id,
            )
            .update(
                {self.model.unread_count: self.model.unread_count + 1},
                synchronize_session=False,
            )
        )


chat_participant_crud = CRUDChatParticipant(ChatParticipant)

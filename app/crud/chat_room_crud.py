"""
Chat room CRUD.
"""
from typing import Any, Dict, List, Optional, Tuple
import uuid
from sqlalchemy.orm import Session
from sqlalchemy import desc, func

from app.model.chat_room import ChatRoom
from app.model.chat_participant import ChatParticipant
from app.crud.base import CRUDBase


class CRUDChatRoom(CRUDBase[ChatRoom, Dict[str, Any], Dict[str, Any]]):
    def get_by_id(self, db: Session, *, room_id: uuid.UUID) -> Optional[ChatRoom]:
        return db.query(self.model).filter(self.model.id == room_id).first()

    def find_direct_room(
        self,
        db: Session,
        *,
        user_id: uuid.UUID,
        other_user_id: uuid.UUID,
        order_id: Optional[uuid.UUID] = None,
    ) -> Optional[ChatRoom]:
        """Direct room whose participants are exactly the two users (and the same order)."""
        mine = db.query(ChatParticipant.room_id).filter(ChatParticipant.user_id == user_id)
        theirs = db.query(ChatParticipant.room_id).filter(ChatParticipant.user_id == other_user_id)
        query = db.query(self.model).filter(
            self.model.chat_type == "direct",
            self.model.id.in_(mine),
            self.model.id.in_(theirs),
        )
        if order_id:
            query = query.filter(self.model.order_id == order_id)
        else:
            query = query.filter(self.model.order_id.is_(None))
        for room in query.all():
            if len(room.participants) == 2:
                return room
        return None

    def list_rooms_for_user(
        self,
        db: Session,
        *,
        user_id: uuid.UUID,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[ChatRoom], int]:
        """List rooms the user participates in, newest activity first."""
        subq = (
            db.query(ChatParticipant.room_id)
            .filter(ChatParticipant.user_id == user_id)
        )
        base = db.query(self.model).filter(self.model.id.in_(subq))
        total = base.with_entities(func.count(self.model.id)).scalar() or 0
        skip = (page - 1) * limit
        items = (
            base.order_by(
                desc(func.coalesce(self.model.last_message_at, self.model.created_at)),
                desc(self.model.created_at),
            )
            .offset(skip)
            .limit(limit)
            .all()
        )
        return items, total


chat_room_crud = CRUDChatRoom(ChatRoom)

"""
Notification CRUD. Every bulk operation is scoped to one user.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
import uuid
from sqlalchemy.orm import Session
from sqlalchemy import desc, func

from app.model.notification import Notification
from app.crud.base import CRUDBase


class CRUDNotification(CRUDBase[Notification, Dict[str, Any], Dict[str, Any]]):
    def list_for_user(
        self,
        db: Session,
        *,
        user_id: uuid.UUID,
        page: int = 1,
        limit: int = 20,
        unread_only: bool = False,
        notification_type: Optional[str] = None,
    ) -> Tuple[List[Notification], int]:
        base = db.query(self.model).filter(self.model.user_id == user_id)
        if unread_only:
            base = base.filter(self.model.is_read.is_(False))
        if notification_type:
            base = base.filter(self.model.notification_type == notification_type)
        total = base.with_entities(func.count(self.model.id)).scalar() or 0
        items = (
            base.order_by(desc(self.model.created_at))
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return items, total

    def count_unread(self, db: Session, *, user_id: uuid.UUID) -> int:
        return (
            db.query(func.count(self.model.id))
            .filter(self.model.user_id == user_id, self.model.is_read.is_(False))
            .scalar()
            or 0
        )

    def mark_read(self, db: Session, *, notification: Notification, read_at: datetime) -> Notification:
        if notification.is_read:
            return notification
        return self.update(db, db_obj=notification, obj_in={"is_read": True, "read_at": read_at})

    def mark_all_read(self, db: Session, *, user_id: uuid.UUID, read_at: datetime) -> int:
        updated = (
            db.query(self.model)
            .filter(self.model.user_id == user_id, self.model.is_read.is_(False))
            .update({self.model.is_read: True, self.model.read_at: read_at}, synchronize_session=False)
        )
        db.commit()
        return updated

    def delete_all(self, db: Session, *, user_id: uuid.UUID) -> int:
        deleted = (
            db.query(self.model)
            .filter(self.model.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted


notification_crud = CRUDNotification(Notification)

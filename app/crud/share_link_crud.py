"""
Tracking share link CRUD.
"""
from typing import Any, Dict, List, Optional
import uuid
from sqlalchemy.orm import Session
from sqlalchemy import desc

from app.model.share_link import ShareLink
from app.crud.base import CRUDBase


class CRUDShareLink(CRUDBase[ShareLink, Dict[str, Any], Dict[str, Any]]):
    def get_by_code(self, db: Session, *, share_code: str) -> Optional[ShareLink]:
        return self.get(db, share_code.strip().upper())

    def list_for_tracking(
        self, db: Session, *, tracking_id: uuid.UUID, not_expired_after: Optional[int] = None
    ) -> List[ShareLink]:
        query = db.query(self.model).filter(self.model.tracking_id == tracking_id)
        if not_expired_after is not None:
            query = query.filter(self.model.ttl > not_expired_after)
        return query.order_by(desc(self.model.expires_at)).all()

    def purge_expired(self, db: Session, *, now_epoch: int) -> int:
        """Delete links whose ttl has passed."""
        deleted = (
            db.query(self.model)
            .filter(self.model.ttl <= now_epoch)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted


share_link_crud = CRUDShareLink(ShareLink)

"""
Review CRUD.
"""
from typing import Any, Dict, List, Optional, Tuple
import uuid
from sqlalchemy.orm import Session
from sqlalchemy import desc, func

from app.model.review import Review
from app.crud.base import CRUDBase


class CRUDReview(CRUDBase[Review, Dict[str, Any], Dict[str, Any]]):
    def get_by_order_and_client(
        self, db: Session, *, order_id: uuid.UUID, client_id: uuid.UUID
    ) -> Optional[Review]:
        return (
            db.query(self.model)
            .filter(self.model.order_id == order_id, self.model.client_id == client_id)
            .first()
        )

    def list_for_master(
        self, db: Session, *, master_id: uuid.UUID, page: int = 1, limit: int = 20
    ) -> Tuple[List[Review], int]:
        base = db.query(self.model).filter(self.model.master_id == master_id)
        total = base.with_entities(func.count(self.model.id)).scalar() or 0
        items = (
            base.order_by(desc(self.model.created_at))
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return items, total

    def all_for_master(self, db: Session, *, master_id: uuid.UUID) -> List[Review]:
        return db.query(self.model).filter(self.model.master_id == master_id).all()

    def rating_summary(
        self, db: Session, *, master_ids: List[uuid.UUID]
    ) -> Dict[uuid.UUID, Tuple[float, int]]:
        """master_id -> (average rating, review count), only for masters with reviews."""
        if not master_ids:
            return {}
        rows = (
            db.query(self.model.master_id, func.avg(self.model.rating), func.count(self.model.id))
            .filter(self.model.master_id.in_(master_ids))
            .group_by(self.model.master_id)
            .all()
        )
        return {master_id: (float(average or 0), int(count)) for master_id, average, count in rows}


review_crud = CRUDReview(Review)

"""
Tracking session and location update CRUD.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
import uuid
from sqlalchemy.orm import Session
from sqlalchemy import desc

from app.model.tracking_session import TrackingSession, STATUS_ACTIVE
from app.model.location_update import LocationUpdate
from app.crud.base import CRUDBase


class CRUDTrackingSession(CRUDBase[TrackingSession, Dict[str, Any], Dict[str, Any]]):
    def find_active(
        self,
        db: Session,
        *,
        master_id: Optional[uuid.UUID] = None,
        booking_id: Optional[uuid.UUID] = None,
        project_id: Optional[uuid.UUID] = None,
    ) -> Optional[TrackingSession]:
        """Newest ACTIVE session matching every filter that is given."""
        query = db.query(self.model).filter(self.model.status == STATUS_ACTIVE)
        if master_id:
            query = query.filter(self.model.master_id == master_id)
        if booking_id:
            query = query.filter(self.model.booking_id == booking_id)
        if project_id:
            query = query.filter(self.model.project_id == project_id)
        return query.order_by(desc(self.model.started_at)).first()


class CRUDLocationUpdate(CRUDBase[LocationUpdate, Dict[str, Any], Dict[str, Any]]):
    def latest(self, db: Session, *, tracking_id: uuid.UUID) -> Optional[LocationUpdate]:
        return (
            db.query(self.model)
            .filter(self.model.tracking_id == tracking_id)
            .order_by(desc(self.model.timestamp))
            .first()
        )

    def list_for_tracking(
        self,
        db: Session,
        *,
        tracking_id: uuid.UUID,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> List[LocationUpdate]:
        """Samples in chronological order, optionally within [start_time, end_time]."""
        query = db.query(self.model).filter(self.model.tracking_id == tracking_id)
        if start_time:
            query = query.filter(self.model.timestamp >= start_time)
        if end_time:
            query = query.filter(self.model.timestamp <= end_time)
        return query.order_by(self.model.timestamp).all()


tracking_session_crud = CRUDTrackingSession(TrackingSession)
location_update_crud = CRUDLocationUpdate(LocationUpdate)

"""
Live location tracking of a master for a booking or project.
"""
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import Conflict, Forbidden, NotFound, ServiceUnavailable
from app.crud import location_update_crud, tracking_session_crud
from app.model.location_update import LocationUpdate
from app.model.tracking_session import TrackingSession, STATUS_COMPLETED
from app.model.user import ROLE_ADMIN, ROLE_CLIENT, ROLE_MASTER
from app.realtime.connection_manager import connection_manager, tracking_channel
from app.schema.tracking import (
    CurrentLocationResponse,
    LocationIn,
    LocationOut,
    LocationUpdateBody,
    LocationUpdateResponse,
    TrackingHistoryResponse,
    TrackingOut,
    TrackingStartBody,
    TrackingStartResponse,
    TrackingStats,
    TrackingTarget,
)
from app.service.notification_service import NotificationService
from app.utils.dates import as_utc, utcnow
from app.utils.geo import EARTH_RADIUS_M, haversine_distance
from app.utils.rounding import round_half_up, round_int

logger = logging.getLogger(__name__)


def compute_tracking_stats(points: Sequence[LocationUpdate]) -> Dict[str, Any]:
    """
    Route stats over chronologically ordered samples.

    total_distance is in meters (rounded), speeds are the mean and max of the
    reported non-zero speeds after the first sample, to 2 decimals.
    """
    if not points:
        return TrackingStats().model_dump()

    total_distance = 0.0
    speeds = []
    for prev, curr in zip(points, points[1:]):
        total_distance += haversine_distance(
            prev.latitude, prev.longitude, curr.latitude, curr.longitude, radius=EARTH_RADIUS_M
        )
        if curr.speed:
            speeds.append(curr.speed)

    duration = (as_utc(points[-1].timestamp) - as_utc(points[0].timestamp)).total_seconds()
    average_speed = sum(speeds) / len(speeds) if speeds else 0
    return {
        "duration": duration,
        "total_distance": round_int(total_distance),
        "average_speed": round_half_up(average_speed, 2),
        "max_speed": round_half_up(max(speeds, default=0), 2),
        "points_count": len(points),
    }


def can_view_tracking(tracking: TrackingSession, user_id: Optional[uuid.UUID], role: Optional[str]) -> bool:
    """The master, admins, and clients while sharing is enabled (only the named client, if one is set)."""
    if user_id is not None and tracking.master_id == user_id:
        return True
    if role == ROLE_ADMIN:
        return True
    if role == ROLE_CLIENT and tracking.share_with_client:
        return tracking.client_id is None or tracking.client_id == user_id
    return False


def location_out(update: LocationUpdate) -> LocationOut:
    return LocationOut.model_validate(update)


class TrackingService:
    def __init__(self, db: Session):
        self.db = db

    def _require_master(self, role: str, action: str) -> None:
        if role != ROLE_MASTER:
            raise Forbidden(f"Only masters can {action}")

    def _active_for(self, master_id: uuid.UUID, target: TrackingTarget) -> TrackingSession:
        tracking = tracking_session_crud.find_active(
            self.db,
            master_id=master_id,
            booking_id=target.booking_id,
            project_id=target.project_id,
        )
        if not tracking:
            raise NotFound("Tracking session", "No active tracking session found")
        return tracking

    def _add_location(self, tracking_id: uuid.UUID, location: LocationIn, at: datetime) -> LocationUpdate:
        return location_update_crud.create_from_dict(
            self.db,
            obj_in={"tracking_id": tracking_id, "timestamp": at, **location.model_dump()},
            commit=False,
        )

    def get_tracking(self, tracking_id: uuid.UUID) -> TrackingSession:
        tracking = tracking_session_crud.get(self.db, tracking_id)
        if not tracking:
            raise NotFound("Tracking session")
        return tracking

    def start(self, master_id: uuid.UUID, role: str, body: TrackingStartBody) -> TrackingStartResponse:
        self._require_master(role, "start location tracking")
        if tracking_session_crud.find_active(
            self.db, master_id=master_id, booking_id=body.booking_id, project_id=body.project_id
        ):
            raise Conflict("Location tracking is already active for this booking/project")

        now = utcnow()
        try:
            tracking = tracking_session_crud.create_from_dict(
                self.db,
                obj_in={
                    "master_id": master_id,
                    "client_id": body.client_id,
                    "booking_id": body.booking_id,
                    "project_id": body.project_id,
                    "settings": body.settings.model_dump(),
                    "started_at": now,
                },
                commit=False,
            )
            if body.location:
                self._add_location(tracking.id, body.location, now)
                tracking.current_latitude = body.location.latitude
                tracking.current_longitude = body.location.longitude
                tracking.last_update_at = now
            self.db.commit()
            self.db.refresh(tracking)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to start tracking: %s", e)
            raise ServiceUnavailable("Failed to start tracking. Please try again.")

        logger.info("Location tracking %s started by master %s", tracking.id, master_id)
        if body.client_id and tracking.share_with_client:
            NotificationService(self.db).send(
                user_id=body.client_id,
                notification_type="LOCATION",
                title="Master is on the way",
                message="Live location tracking has started.",
                data={"event": "TRACKING_STARTED", "tracking_id": str(tracking.id)},
                related_object_type="tracking",
                related_object_id=tracking.id,
            )
        return TrackingStartResponse(
            tracking=TrackingOut.model_validate(tracking),
            tracking_url=f"{settings.FRONTEND_URL}/tracking/{tracking.id}",
        )

    def update_location(
        self, master_id: uuid.UUID, role: str, body: LocationUpdateBody
    ) -> LocationUpdateResponse:
        self._require_master(role, "update location")
        tracking = self._active_for(master_id, body)
        now = utcnow()
        try:
            update = self._add_location(tracking.id, body.location, now)
            tracking.current_latitude = body.location.latitude
            tracking.current_longitude = body.location.longitude
            tracking.last_update_at = now
            self.db.add(tracking)
            self.db.commit()
            self.db.refresh(update)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to store location update: %s", e)
            raise ServiceUnavailable("Failed to store location. Please try again.")

        if tracking.share_with_client:
            connection_manager.broadcast_sync(
                tracking_channel(tracking.id),
                "location_updated",
                {
                    "tracking_id": str(tracking.id),
                    "master_id": str(master_id),
                    "location": body.location.model_dump(),
                    "timestamp": now,
                },
            )
        logger.debug("Location updated for tracking %s", tracking.id)
        return LocationUpdateResponse(id=update.id, tracking_id=tracking.id, timestamp=update.timestamp)

    def stop(self, master_id: uuid.UUID, role: str, target: TrackingTarget) -> TrackingOut:
        self._require_master(role, "stop location tracking")
        tracking = self._active_for(master_id, target)
        points = location_update_crud.list_for_tracking(self.db, tracking_id=tracking.id)
        stats = compute_tracking_stats(points)
        tracking = tracking_session_crud.update(
            self.db,
            db_obj=tracking,
            obj_in={"status": STATUS_COMPLETED, "ended_at": utcnow(), "stats": stats},
        )
        logger.info(
            "Location tracking %s stopped (%.0fs, %sm)",
            tracking.id, stats["duration"], stats["total_distance"],
        )
        connection_manager.broadcast_sync(
            tracking_channel(tracking.id), "tracking_stopped", {"tracking_id": str(tracking.id), "stats": stats}
        )
        if tracking.client_id and tracking.share_with_client:
            NotificationService(self.db).send(
                user_id=tracking.client_id,
                notification_type="LOCATION",
                title="Tracking finished",
                message="The master has stopped sharing their location.",
                data={"event": "TRACKING_STOPPED", "tracking_id": str(tracking.id), "stats": stats},
                related_object_type="tracking",
                related_object_id=tracking.id,
            )
        return TrackingOut.model_validate(tracking)

    def _viewable(self, tracking_id: uuid.UUID, user_id: uuid.UUID, role: str) -> TrackingSession:
        tracking = self.get_tracking(tracking_id)
        if not can_view_tracking(tracking, user_id, role):
            raise Forbidden("You do not have permission to view this location")
        return tracking

    def current_location(self, tracking_id: uuid.UUID, user_id: uuid.UUID, role: str) -> CurrentLocationResponse:
        tracking = self._viewable(tracking_id, user_id, role)
        latest = location_update_crud.latest(self.db, tracking_id=tracking.id)
        return CurrentLocationResponse(
            tracking=TrackingOut.model_validate(tracking),
            location=location_out(latest) if latest else None,
        )

    def history(
        self,
        tracking_id: uuid.UUID,
        user_id: uuid.UUID,
        role: str,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> TrackingHistoryResponse:
        tracking = self._viewable(tracking_id, user_id, role)
        points = location_update_crud.list_for_tracking(
            self.db, tracking_id=tracking.id, start_time=start_time, end_time=end_time
        )
        return TrackingHistoryResponse(
            tracking=TrackingOut.model_validate(tracking),
            location_history=[location_out(p) for p in points],
            route_stats=TrackingStats(**compute_tracking_stats(points)),
        )

"""
Location tracking and share link schemas.
"""
from datetime import datetime
from typing import List, Optional
import uuid
from pydantic import BaseModel, Field, model_validator

from app.core.config import settings as app_settings


class LocationIn(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: Optional[float] = None
    altitude: Optional[float] = None
    heading: Optional[float] = None
    speed: Optional[float] = None


class TrackingSettingsIn(BaseModel):
    update_interval: int = Field(30, ge=5, le=300, description="Seconds between updates.")
    high_accuracy_mode: bool = True
    share_with_client: bool = True
    auto_stop_after_completion: bool = True
    geofence_radius: int = Field(100, ge=50, le=1000, description="Meters.")


class TrackingTarget(BaseModel):
    booking_id: Optional[uuid.UUID] = None
    project_id: Optional[uuid.UUID] = None

    @model_validator(mode="after")
    def _require_target(self):
        if not self.booking_id and not self.project_id:
            raise ValueError("Booking ID or Project ID is required")
        return self


class TrackingStartBody(TrackingTarget):
    client_id: Optional[uuid.UUID] = None
    location: Optional[LocationIn] = None
    settings: TrackingSettingsIn = TrackingSettingsIn()


class LocationUpdateBody(TrackingTarget):
    location: LocationIn


class TrackingStats(BaseModel):
    duration: float = 0
    total_distance: int = 0
    average_speed: float = 0
    max_speed: float = 0
    points_count: int = 0


class TrackingOut(BaseModel):
    id: uuid.UUID
    master_id: uuid.UUID
    client_id: Optional[uuid.UUID] = None
    booking_id: Optional[uuid.UUID] = None
    project_id: Optional[uuid.UUID] = None
    status: str
    settings: dict = {}
    started_at: datetime
    ended_at: Optional[datetime] = None
    last_update_at: Optional[datetime] = None
    stats: Optional[TrackingStats] = None

    class Config:
        from_attributes = True


class LocationOut(BaseModel):
    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    heading: Optional[float] = None
    speed: Optional[float] = None
    timestamp: datetime

    class Config:
        from_attributes = True


class TrackingStartResponse(BaseModel):
    tracking: TrackingOut
    tracking_url: str


class LocationUpdateResponse(BaseModel):
    id: uuid.UUID
    tracking_id: uuid.UUID
    timestamp: datetime


class CurrentLocationResponse(BaseModel):
    tracking: TrackingOut
    location: Optional[LocationOut] = None


class TrackingHistoryResponse(BaseModel):
    tracking: TrackingOut
    location_history: List[LocationOut]
    route_stats: TrackingStats


# --- Share links ---

SHARE_LINK_MAX_HOURS = 168


class ShareLinkCreateBody(BaseModel):
    share_with: List[uuid.UUID] = []
    expiration_hours: int = Field(
        min(app_settings.SHARE_LINK_DEFAULT_HOURS, SHARE_LINK_MAX_HOURS), ge=1, le=SHARE_LINK_MAX_HOURS
    )
    allow_anonymous: bool = False


class ShareLinkResponse(BaseModel):
    share_code: str
    tracking_id: uuid.UUID
    share_url: str
    share_with: List[str]
    allow_anonymous: bool
    expires_at: datetime


class SharePermissions(BaseModel):
    can_view_history: bool = True
    can_view_real_time: bool
    can_view_stats: bool = True


class SharedTrackingResponse(BaseModel):
    tracking: TrackingOut
    location: Optional[LocationOut] = None
    is_live: bool
    permissions: SharePermissions
    expires_at: datetime

"""
Live location tracking session of a master for a booking or project.
"""
from sqlalchemy import Column, String, Float, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from app.core.database import Base
from app.model.types import JSONType
from app.utils.dates import utcnow

STATUS_ACTIVE = "ACTIVE"
STATUS_COMPLETED = "COMPLETED"
STATUS_CANCELLED = "CANCELLED"


class TrackingSession(Base):
    __tablename__ = "tracking_sessions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    master_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    booking_id = Column(UUID(as_uuid=True), nullable=True, index=True)
    project_id = Column(UUID(as_uuid=True), nullable=True, index=True)
    status = Column(String, nullable=False, default=STATUS_ACTIVE, index=True)
    settings = Column(JSONType, nullable=False, default=dict)
    current_latitude = Column(Float, nullable=True)
    current_longitude = Column(Float, nullable=True)
    stats = Column(JSONType, nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    ended_at = Column(DateTime(timezone=True), nullable=True)
    last_update_at = Column(DateTime(timezone=True), nullable=True)

    updates = relationship(
        "LocationUpdate",
        back_populates="tracking",
        cascade="all, delete-orphan",
        order_by="LocationUpdate.timestamp",
    )

    @property
    def is_live(self) -> bool:
        return self.status == STATUS_ACTIVE

    @property
    def share_with_client(self) -> bool:
        return (self.settings or {}).get("share_with_client", True) is not False

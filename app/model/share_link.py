"""
Time-limited share link granting read access to a tracking session.

ttl mirrors expires_at as epoch seconds; rows past it are purged by
scripts/purge_expired_share_links.py.
"""
from sqlalchemy import Column, String, Boolean, BigInteger, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.core.database import Base
from app.model.types import JSONType


class ShareLink(Base):
    __tablename__ = "tracking_share_links"

    share_code = Column(String(8), primary_key=True)
    tracking_id = Column(UUID(as_uuid=True), ForeignKey("tracking_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    master_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    share_with = Column(JSONType, nullable=False, default=list)  # list of user id strings
    allow_anonymous = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    ttl = Column(BigInteger, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

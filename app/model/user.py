"""
User model. Masters and clients share one table, told apart by role.
"""
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
import uuid
from app.core.database import Base

ROLE_MASTER = "MASTER"
ROLE_CLIENT = "CLIENT"
ROLE_ADMIN = "ADMIN"
USER_ROLES = (ROLE_MASTER, ROLE_CLIENT, ROLE_ADMIN)


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, index=True, nullable=False)
    cognito_username = Column(String, unique=True, nullable=True)  # Cognito Username (uuid)
    role = Column(String, nullable=False, default=ROLE_CLIENT, index=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    city = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)  # S3 URL
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)

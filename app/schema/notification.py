"""
Notification schemas.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
import uuid
from pydantic import BaseModel, Field


class NotificationResponse(BaseModel):
    id: uuid.UUID
    notification_type: str
    title: str
    message: str
    priority: str
    is_read: bool
    read_at: Optional[datetime] = None
    related_object_type: Optional[str] = None
    related_object_id: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationListResponse(BaseModel):
    items: List[NotificationResponse]
    page: int
    limit: int
    total: int
    total_pages: int
    unread_count: int = Field(..., description="Unread notifications of the user, all pages.")


class BulkResultResponse(BaseModel):
    count: int


class NotificationSettingsResponse(BaseModel):
    new_messages: bool
    new_orders: bool
    project_updates: bool
    review_received: bool
    payment_received: bool

    class Config:
        from_attributes = True


class NotificationSettingsUpdate(BaseModel):
    new_messages: Optional[bool] = None
    new_orders: Optional[bool] = None
    project_updates: Optional[bool] = None
    review_received: Optional[bool] = None
    payment_received: Optional[bool] = None

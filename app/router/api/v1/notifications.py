"""
Notifications API. Every operation is scoped to the current user.
"""
import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import validate_session
from app.schema.chat import UnreadCountResponse
from app.schema.notification import (
    BulkResultResponse,
    NotificationListResponse,
    NotificationResponse,
    NotificationSettingsResponse,
    NotificationSettingsUpdate,
)
from app.service.notification_service import NotificationService

router = APIRouter()


def _user_id(current_user: Dict[str, Any]) -> uuid.UUID:
    return uuid.UUID(current_user["user_id"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
    page: int = 1,
    limit: int = 20,
    unread_only: bool = False,
    notification_type: Optional[str] = None,
):
    if page < 1:
        page = 1
    if limit < 1 or limit > 100:
        limit = 20
    return NotificationService(db).list_notifications(
        _user_id(current_user),
        page=page,
        limit=limit,
        unread_only=unread_only,
        notification_type=notification_type,
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    return UnreadCountResponse(unread_count=NotificationService(db).unread_count(_user_id(current_user)))


@router.post("/read-all", response_model=BulkResultResponse)
async def mark_all_read(
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    return BulkResultResponse(count=NotificationService(db).mark_all_read(_user_id(current_user)))


@router.delete("", response_model=BulkResultResponse)
async def delete_all(
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    return BulkResultResponse(count=NotificationService(db).delete_all(_user_id(current_user)))


@router.get("/settings", response_model=NotificationSettingsResponse)
async def get_settings(
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    return NotificationService(db).get_settings(_user_id(current_user))


@router.patch("/settings", response_model=NotificationSettingsResponse)
async def update_settings(
    body: NotificationSettingsUpdate,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    return NotificationService(db).update_settings(_user_id(current_user), body)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: uuid.UUID,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    return NotificationService(db).mark_read(_user_id(current_user), notification_id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: uuid.UUID,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    NotificationService(db).delete(_user_id(current_user), notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

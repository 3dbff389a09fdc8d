"""
Notification service: dispatch, listing and read state.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.crud import notification_crud, notification_settings_crud
from app.model.notification import Notification, NOTIFICATION_TYPES, PRIORITIES
from app.schema.notification import (
    NotificationListResponse,
    NotificationResponse,
    NotificationSettingsResponse,
    NotificationSettingsUpdate,
)
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)

# Notification type -> settings toggle. Types not listed are always delivered.
SETTING_FOR_TYPE = {
    "CHAT": "new_messages",
    "ORDER": "new_orders",
    "APPLICATION": "new_orders",
    "PROJECT": "project_updates",
    "REVIEW": "review_received",
    "PAYMENT": "payment_received",
}


class NotificationService:
    """Per-user notifications. Reads and deletes are scoped to the owner."""

    def __init__(self, db: Session):
        self.db = db

    def send(
        self,
        user_id: uuid.UUID,
        notification_type: str,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        priority: str = "normal",
        related_object_type: Optional[str] = None,
        related_object_id: Optional[Any] = None,
    ) -> Optional[Notification]:
        """
        Fire-and-forget dispatch. Honours the recipient's settings; any failure
        is logged and swallowed so the caller's primary effect stands.

        Returns:
            The stored notification, or None when muted or on failure.
        """
        try:
            if notification_type not in NOTIFICATION_TYPES:
                raise ValueError(f"Unknown notification type {notification_type}")
            if priority not in PRIORITIES:
                priority = "normal"
            setting = SETTING_FOR_TYPE.get(notification_type)
            if setting:
                prefs = notification_settings_crud.get_or_create(self.db, user_id=user_id)
                if not getattr(prefs, setting):
                    logger.debug("Notification %s muted for user %s", notification_type, user_id)
                    return None
            notification = notification_crud.create_from_dict(
                self.db,
                obj_in={
                    "user_id": user_id,
                    "notification_type": notification_type,
                    "title": title,
                    "message": message,
                    "priority": priority,
                    "data": data or {},
                    "related_object_type": related_object_type,
                    "related_object_id": str(related_object_id) if related_object_id else None,
                },
            )
            logger.info("Notification %s sent to user %s", notification_type, user_id)
            return notification
        except (SQLAlchemyError, ValueError) as e:
            self.db.rollback()
            logger.warning("Failed to send %s notification to %s: %s", notification_type, user_id, e)
            return None

    def list_notifications(
        self,
        user_id: uuid.UUID,
        page: int = 1,
        limit: int = 20,
        unread_only: bool = False,
        notification_type: Optional[str] = None,
    ) -> NotificationListResponse:
        if notification_type and notification_type not in NOTIFICATION_TYPES:
            raise ValidationError(f"Unknown notification type: {notification_type}")
        items, total = notification_crud.list_for_user(
            self.db,
            user_id=user_id,
            page=page,
            limit=limit,
            unread_only=unread_only,
            notification_type=notification_type,
        )
        return NotificationListResponse(
            items=[NotificationResponse.model_validate(n) for n in items],
            page=page,
            limit=limit,
            total=total,
            total_pages=(total + limit - 1) // limit if total else 0,
            unread_count=self.unread_count(user_id),
        )

    def unread_count(self, user_id: uuid.UUID) -> int:
        return notification_crud.count_unread(self.db, user_id=user_id)

    def _owned(self, user_id: uuid.UUID, notification_id: uuid.UUID) -> Notification:
        notification = notification_crud.get(self.db, notification_id)
        if not notification:
            raise NotFound("Notification")
        if notification.user_id != user_id:
            raise Forbidden("You can only access your own notifications")
        return notification

    def mark_read(self, user_id: uuid.UUID, notification_id: uuid.UUID) -> NotificationResponse:
        notification = self._owned(user_id, notification_id)
        notification = notification_crud.mark_read(self.db, notification=notification, read_at=utcnow())
        return NotificationResponse.model_validate(notification)

    def mark_all_read(self, user_id: uuid.UUID) -> int:
        count = notification_crud.mark_all_read(self.db, user_id=user_id, read_at=utcnow())
        logger.info("Marked %s notifications read for user %s", count, user_id)
        return count

    def delete(self, user_id: uuid.UUID, notification_id: uuid.UUID) -> None:
        notification = self._owned(user_id, notification_id)
        notification_crud.remove(self.db, db_obj=notification)

    def delete_all(self, user_id: uuid.UUID) -> int:
        count = notification_crud.delete_all(self.db, user_id=user_id)
        logger.info("Deleted %s notifications for user %s", count, user_id)
        return count

    def get_settings(self, user_id: uuid.UUID) -> NotificationSettingsResponse:
        prefs = notification_settings_crud.get_or_create(self.db, user_id=user_id)
        return NotificationSettingsResponse.model_validate(prefs)

    def update_settings(
        self, user_id: uuid.UUID, body: NotificationSettingsUpdate
    ) -> NotificationSettingsResponse:
        prefs = notification_settings_crud.get_or_create(self.db, user_id=user_id)
        prefs = notification_settings_crud.update(
            self.db, db_obj=prefs, obj_in=body.model_dump(exclude_none=True)
        )
        return NotificationSettingsResponse.model_validate(prefs)

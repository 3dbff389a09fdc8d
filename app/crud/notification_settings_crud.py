"""
Notification settings CRUD.
"""
from typing import Any, Dict
import uuid
from sqlalchemy.orm import Session

from app.model.notification_settings import NotificationSettings
from app.crud.base import CRUDBase


class CRUDNotificationSettings(CRUDBase[NotificationSettings, Dict[str, Any], Dict[str, Any]]):
    def get_or_create(self, db: Session, *, user_id: uuid.UUID) -> NotificationSettings:
        settings = self.get(db, user_id)
        if settings is None:
            settings = self.create_from_dict(db, obj_in={"user_id": user_id})
        return settings


notification_settings_crud = CRUDNotificationSettings(NotificationSettings)

from app.model.user import User
from app.model.chat_room import ChatRoom
from app.model.chat_participant import ChatParticipant
from app.model.chat_message import ChatMessage
from app.model.notification import Notification
from app.model.notification_settings import NotificationSettings
from app.model.tracking_session import TrackingSession
from app.model.location_update import LocationUpdate
from app.model.share_link import ShareLink
from app.model.review import Review

__all__ = [
    "User",
    "ChatRoom",
    "ChatParticipant",
    "ChatMessage",
    "Notification",
    "NotificationSettings",
    "TrackingSession",
    "LocationUpdate",
    "ShareLink",
    "Review",
]

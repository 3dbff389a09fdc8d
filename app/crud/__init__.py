from app.crud.user_crud import user_crud
from app.crud.chat_room_crud import chat_room_crud
from app.crud.chat_participant_crud import chat_participant_crud
from app.crud.chat_message_crud import chat_message_crud
from app.crud.notification_crud import notification_crud
from app.crud.notification_settings_crud import notification_settings_crud
from app.crud.tracking_crud import tracking_session_crud, location_update_crud
from app.crud.share_link_crud import share_link_crud
from app.crud.review_crud import review_crud

__all__ = [
    "user_crud",
    "chat_room_crud",
    "chat_participant_crud",
    "chat_message_crud",
    "notification_crud",
    "notification_settings_crud",
    "tracking_session_crud",
    "location_update_crud",
    "share_link_crud",
    "review_crud",
]

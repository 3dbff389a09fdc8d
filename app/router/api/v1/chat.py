"""
Chat API: rooms, messages and read state (REST). WebSocket in same module.
"""
import json
import logging
import uuid
from typing import Any, Dict, Optional

import redis
from fastapi import APIRouter, Depends, Response, status, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db, SessionLocal
from app.core.dependencies import validate_session
from app.core.exceptions import AppException
from app.core.rate_limit import rate_limit
from app.crud import chat_participant_crud
from app.realtime.connection_manager import connection_manager, room_channel
from app.schema.chat import (
    AttachmentUploadBody,
    AttachmentUploadResponse,
    MessageCreateBody,
    MessageListResponse,
    MessageReadResponse,
    MessageResponse,
    RoomCreateBody,
    RoomListResponse,
    RoomReadResponse,
    RoomResponse,
    UnreadCountResponse,
)
from app.service.chat_service import ChatService
from app.session import get_session

router = APIRouter()
logger = logging.getLogger(__name__)


def _user_id(current_user: Dict[str, Any]) -> uuid.UUID:
    return uuid.UUID(current_user["user_id"])


def _clamp(page: int, limit: int, default_limit: int):
    if page < 1:
        page = 1
    if limit < 1 or limit > 100:
        limit = default_limit
    return page, limit


# --- REST: Rooms ---

@router.get("/rooms", response_model=RoomListResponse)
async def list_rooms(
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
    page: int = 1,
    limit: int = 20,
):
    """List rooms the current user participates in, newest activity first."""
    page, limit = _clamp(page, limit, 20)
    return ChatService(db).list_rooms(_user_id(current_user), page=page, limit=limit)


@router.post("/rooms", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
async def create_or_get_room(
    body: RoomCreateBody,
    response: Response,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Create (201) or get (200) a direct room with another user, optionally for an order."""
    room, created = ChatService(db).create_or_get_direct_room(
        _user_id(current_user), body.other_user_id, order_id=body.order_id
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return room


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Total unread messages across all rooms."""
    return UnreadCountResponse(unread_count=ChatService(db).unread_total(_user_id(current_user)))


@router.get("/rooms/{room_id}", response_model=RoomResponse)
async def get_room(
    room_id: uuid.UUID,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Get one room (only if current user is participant)."""
    return ChatService(db).get_room(_user_id(current_user), room_id)


@router.post("/rooms/{room_id}/read", response_model=RoomReadResponse)
async def mark_room_read(
    room_id: uuid.UUID,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Mark every message in the room read; the caller's unread count becomes 0."""
    return ChatService(db).mark_room_read(_user_id(current_user), room_id)


@router.post("/rooms/{room_id}/attachments", response_model=AttachmentUploadResponse)
async def create_attachment_upload(
    room_id: uuid.UUID,
    body: AttachmentUploadBody,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Presigned PUT URL for an attachment. Send the returned file_url with the message."""
    return ChatService(db).attachment_upload_url(_user_id(current_user), room_id, body)


# --- REST: Messages ---

@router.get("/rooms/{room_id}/messages", response_model=MessageListResponse)
async def list_messages(
    room_id: uuid.UUID,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
    page: int = 1,
    limit: int = 50,
    before_id: Optional[uuid.UUID] = None,
):
    """Paginated messages for a room. Marks room as read for current user."""
    page, limit = _clamp(page, limit, 50)
    return ChatService(db).list_messages(
        _user_id(current_user), room_id, page=page, limit=limit, before_id=before_id
    )


@router.post(
    "/rooms/{room_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("messages", settings.RATE_LIMIT_MESSAGES))],
)
async def create_message(
    room_id: uuid.UUID,
    body: MessageCreateBody,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Send a message. Bumps unread for others and broadcasts to WebSocket subscribers."""
    return ChatService(db).send_message(_user_id(current_user), room_id, body)


@router.post("/messages/{message_id}/read", response_model=MessageReadResponse)
async def mark_message_read(
    message_id: uuid.UUID,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Mark one message read. Idempotent."""
    return ChatService(db).mark_message_read(_user_id(current_user), message_id)


# --- WebSocket ---

def _ws_user_id(token: Optional[str]) -> Optional[uuid.UUID]:
    if not token:
        return None
    try:
        session = get_session(token)
    except (redis.RedisError, RuntimeError) as e:
        logger.error("WebSocket session lookup failed: %s", e)
        return None
    if not session or not session.get("user_id"):
        return None
    return uuid.UUID(session["user_id"])


@router.websocket("/ws")
async def websocket_chat(
    websocket: WebSocket,
    token: Optional[str] = None,
):
    """
    Real-time chat. Auth via query ?token=.

    Client actions: subscribe / unsubscribe / typing (room_id), read (message_id).
    Server events: message_created, message_read, room_read, user_typing, error.
    """
    await websocket.accept()
    user_id = _ws_user_id(token)
    if not user_id:
        await websocket.close(code=4001)
        return

    async def send_error(code: str, message: str) -> None:
        await websocket.send_text(
            json.dumps({"event": "error", "code": code, "message": message})
        )

    subscribed: set = set()
    try:
        while True:
            data = await websocket.receive_text()
            try:
                obj = json.loads(data)
            except json.JSONDecodeError:
                await send_error("INVALID_JSON", "Request body must be valid JSON.")
                continue
            if not isinstance(obj, dict):
                await send_error("INVALID_JSON", "Request body must be a JSON object.")
                continue
            action = obj.get("action")

            if action == "read":
                try:
                    message_id = uuid.UUID(str(obj.get("message_id")))
                except ValueError:
                    await send_error("INVALID_MESSAGE_ID", "message_id must be a valid UUID.")
                    continue
                db = SessionLocal()
                try:
                    ChatService(db).mark_message_read(user_id, message_id)
                except AppException as e:
                    await send_error(e.code, e.message)
                finally:
                    db.close()
                continue

            room_id_str = obj.get("room_id")
            if not room_id_str:
                await send_error("MISSING_ROOM_ID", "Missing required field: room_id.")
                continue
            try:
                room_id = uuid.UUID(str(room_id_str))
            except ValueError:
                await send_error("INVALID_ROOM_ID", "room_id must be a valid UUID.")
                continue
            db = SessionLocal()
            try:
                part = chat_participant_crud.get_by_room_and_user(
                    db, room_id=room_id, user_id=user_id
                )
            finally:
                db.close()
            if not part:
                await send_error("FORBIDDEN", "You are not a participant of this room.")
                continue

            channel = room_channel(room_id)
            if action == "subscribe":
                await connection_manager.subscribe(websocket, channel)
                subscribed.add(channel)
            elif action == "unsubscribe":
                await connection_manager.unsubscribe(websocket, channel)
                subscribed.discard(channel)
            elif action == "typing":
                await connection_manager.broadcast(
                    channel,
                    "user_typing",
                    {"user_id": str(user_id), "typing": bool(obj.get("typing", False))},
                    exclude_websocket=websocket,
                )
            else:
                await send_error(
                    "UNKNOWN_ACTION",
                    "Expected action: subscribe, unsubscribe, typing or read.",
                )
    except WebSocketDisconnect:
        logger.debug("WebSocket disconnected for user %s", user_id)
    finally:
        await connection_manager.unsubscribe_all(websocket, subscribed)

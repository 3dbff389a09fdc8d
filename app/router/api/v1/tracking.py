"""
Location tracking API and share links.
"""
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

import redis
from fastapi import APIRouter, Depends, Response, status, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db, SessionLocal
from app.core.dependencies import optional_session, validate_session
from app.core.exceptions import AppException
from app.core.rate_limit import rate_limit
from app.realtime.connection_manager import connection_manager, tracking_channel
from app.schema.tracking import (
    CurrentLocationResponse,
    LocationUpdateBody,
    LocationUpdateResponse,
    SharedTrackingResponse,
    ShareLinkCreateBody,
    ShareLinkResponse,
    TrackingHistoryResponse,
    TrackingOut,
    TrackingStartBody,
    TrackingStartResponse,
    TrackingTarget,
)
from app.service.share_link_service import ShareLinkService
from app.service.tracking_service import TrackingService, can_view_tracking
from app.session import get_session

router = APIRouter()
logger = logging.getLogger(__name__)


def _user_id(current_user: Dict[str, Any]) -> uuid.UUID:
    return uuid.UUID(current_user["user_id"])


@router.post("/start", response_model=TrackingStartResponse, status_code=status.HTTP_201_CREATED)
async def start_tracking(
    body: TrackingStartBody,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Start a tracking session (masters only)."""
    return TrackingService(db).start(_user_id(current_user), current_user.get("role"), body)


@router.post("/location", response_model=LocationUpdateResponse)
async def update_location(
    body: LocationUpdateBody,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Report the master's current position for the active session."""
    return TrackingService(db).update_location(_user_id(current_user), current_user.get("role"), body)


@router.post("/stop", response_model=TrackingOut)
async def stop_tracking(
    body: TrackingTarget,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Complete the active session and store its route stats."""
    return TrackingService(db).stop(_user_id(current_user), current_user.get("role"), body)


@router.get("/{tracking_id}/current", response_model=CurrentLocationResponse)
async def current_location(
    tracking_id: uuid.UUID,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    return TrackingService(db).current_location(tracking_id, _user_id(current_user), current_user.get("role"))


@router.get("/{tracking_id}/history", response_model=TrackingHistoryResponse)
async def tracking_history(
    tracking_id: uuid.UUID,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
    start_time: Optional[datetime] = None,
    end_time: Optional[datetime] = None,
):
    return TrackingService(db).history(
        tracking_id,
        _user_id(current_user),
        current_user.get("role"),
        start_time=start_time,
        end_time=end_time,
    )


# --- Share links ---

@router.post(
    "/{tracking_id}/share-links",
    response_model=ShareLinkResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_share_link(
    tracking_id: uuid.UUID,
    body: ShareLinkCreateBody,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Issue a share link for this session (its master only)."""
    return ShareLinkService(db).create(tracking_id, _user_id(current_user), body)


@router.get("/{tracking_id}/share-links", response_model=List[ShareLinkResponse])
async def list_share_links(
    tracking_id: uuid.UUID,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    return ShareLinkService(db).list_links(tracking_id, _user_id(current_user))


@router.delete("/{tracking_id}/share-links/{share_code}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_share_link(
    tracking_id: uuid.UUID,
    share_code: str,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    ShareLinkService(db).revoke(tracking_id, share_code, _user_id(current_user))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{tracking_id}/shared/{share_code}",
    response_model=SharedTrackingResponse,
    dependencies=[Depends(rate_limit("share_resolve", settings.RATE_LIMIT_SHARE_RESOLVE))],
)
async def resolve_share_link(
    tracking_id: uuid.UUID,
    share_code: str,
    session: Optional[Dict[str, Any]] = Depends(optional_session),
    db: Session = Depends(get_db),
):
    """View a shared session. Authentication is optional; anonymous links need none."""
    requester_id = _user_id(session) if session and session.get("user_id") else None
    return ShareLinkService(db).resolve(share_code, tracking_id, requester_id)


# --- WebSocket ---

@router.websocket("/{tracking_id}/ws")
async def websocket_tracking(
    websocket: WebSocket,
    tracking_id: uuid.UUID,
    token: Optional[str] = None,
    share_code: Optional[str] = None,
):
    """
    Live location feed for one session. Auth via ?token= or ?share_code=.

    Server events: location_updated, tracking_stopped.
    """
    await websocket.accept()
    user_id = None
    role = None
    if token:
        try:
            session = get_session(token)
        except (redis.RedisError, RuntimeError) as e:
            logger.error("WebSocket session lookup failed: %s", e)
            session = None
        if session and session.get("user_id"):
            user_id = uuid.UUID(session["user_id"])
            role = session.get("role")

    db = SessionLocal()
    try:
        if share_code:
            ShareLinkService(db).resolve(share_code, tracking_id, user_id)
            allowed = True
        elif user_id:
            tracking = TrackingService(db).get_tracking(tracking_id)
            allowed = can_view_tracking(tracking, user_id, role)
        else:
            allowed = False
    except AppException as e:
        logger.info("Tracking WebSocket refused for %s: %s", tracking_id, e.code)
        allowed = False
    finally:
        db.close()
    if not allowed:
        await websocket.close(code=4003)
        return

    channel = tracking_channel(tracking_id)
    await connection_manager.subscribe(websocket, channel)
    try:
        while True:
            # Inbound frames are ignored; the loop only detects disconnects.
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Tracking WebSocket disconnected for %s", tracking_id)
    finally:
        await connection_manager.unsubscribe(websocket, channel)

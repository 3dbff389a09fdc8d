"""
Time-limited share links for a tracking session.

A link grants read access while now < expires_at, to anyone if
allow_anonymous, otherwise to the master and the users in share_with.
"""
import logging
import secrets
import string
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import Forbidden, NotFound, ServiceUnavailable
from app.crud import location_update_crud, share_link_crud, tracking_session_crud
from app.model.share_link import ShareLink
from app.model.tracking_session import TrackingSession
from app.schema.tracking import (
    LocationOut,
    SharedTrackingResponse,
    SharePermissions,
    ShareLinkCreateBody,
    ShareLinkResponse,
    TrackingOut,
)
from app.utils.dates import as_utc, utcnow

logger = logging.getLogger(__name__)

SHARE_CODE_ALPHABET = string.ascii_uppercase + string.digits
SHARE_CODE_LENGTH = 8
MAX_CODE_ATTEMPTS = 5


def generate_share_code() -> str:
    return "".join(secrets.choice(SHARE_CODE_ALPHABET) for _ in range(SHARE_CODE_LENGTH))


def share_url(share_code: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/tracking/shared/{share_code}"


def is_expired(link: ShareLink, now: Optional[datetime] = None) -> bool:
    return (now or utcnow()) >= as_utc(link.expires_at)


def can_access(link: ShareLink, requester_id: Optional[uuid.UUID]) -> bool:
    if link.allow_anonymous:
        return True
    if requester_id is None:
        return False
    return requester_id == link.master_id or str(requester_id) in (link.share_with or [])


def link_response(link: ShareLink) -> ShareLinkResponse:
    return ShareLinkResponse(
        share_code=link.share_code,
        tracking_id=link.tracking_id,
        share_url=share_url(link.share_code),
        share_with=list(link.share_with or []),
        allow_anonymous=link.allow_anonymous,
        expires_at=as_utc(link.expires_at),
    )


class ShareLinkService:
    def __init__(self, db: Session):
        self.db = db

    def _owned_tracking(self, tracking_id: uuid.UUID, requester_id: uuid.UUID) -> TrackingSession:
        tracking = tracking_session_crud.get(self.db, tracking_id)
        if not tracking:
            raise NotFound("Tracking session")
        if tracking.master_id != requester_id:
            raise Forbidden("Only the master of this tracking session can manage share links")
        return tracking

    def create(
        self, tracking_id: uuid.UUID, requester_id: uuid.UUID, body: ShareLinkCreateBody
    ) -> ShareLinkResponse:
        tracking = self._owned_tracking(tracking_id, requester_id)
        expires_at = utcnow() + timedelta(hours=body.expiration_hours)
        share_with = [str(u) for u in dict.fromkeys(body.share_with)]

        for _ in range(MAX_CODE_ATTEMPTS):
            try:
                link = share_link_crud.create_from_dict(
                    self.db,
                    obj_in={
                        "share_code": generate_share_code(),
                        "tracking_id": tracking.id,
                        "master_id": tracking.master_id,
                        "share_with": share_with,
                        "allow_anonymous": body.allow_anonymous,
                        "expires_at": expires_at,
                        "ttl": int(expires_at.timestamp()),
                    },
                )
            except IntegrityError:
                # code collision
                self.db.rollback()
                continue
            logger.info(
                "Share link %s created for tracking %s (expires %s)",
                link.share_code, tracking.id, expires_at.isoformat(),
            )
            return link_response(link)
        raise ServiceUnavailable("Could not allocate a share code. Please try again.")

    def resolve(
        self,
        share_code: str,
        tracking_id: uuid.UUID,
        requester_id: Optional[uuid.UUID] = None,
        now: Optional[datetime] = None,
    ) -> SharedTrackingResponse:
        """
        Checks run in order: unknown code or other session -> NotFound,
        expired -> SHARE_LINK_EXPIRED, no permission -> SHARE_LINK_NO_PERMISSION,
        session gone -> NotFound.
        """
        link = share_link_crud.get_by_code(self.db, share_code=share_code)
        if not link or link.tracking_id != tracking_id:
            raise NotFound("Share link")
        if is_expired(link, now):
            raise Forbidden("Share link has expired", code="SHARE_LINK_EXPIRED")
        if not can_access(link, requester_id):
            raise Forbidden("You do not have access to this share link", code="SHARE_LINK_NO_PERMISSION")

        tracking = tracking_session_crud.get(self.db, link.tracking_id)
        if not tracking:
            raise NotFound("Tracking session")
        latest = location_update_crud.latest(self.db, tracking_id=tracking.id)
        return SharedTrackingResponse(
            tracking=TrackingOut.model_validate(tracking),
            location=LocationOut.model_validate(latest) if latest else None,
            is_live=tracking.is_live,
            permissions=SharePermissions(
                can_view_history=True,
                can_view_real_time=tracking.is_live,
                can_view_stats=True,
            ),
            expires_at=as_utc(link.expires_at),
        )

    def list_links(self, tracking_id: uuid.UUID, requester_id: uuid.UUID) -> List[ShareLinkResponse]:
        """Links of the session that have not expired yet."""
        self._owned_tracking(tracking_id, requester_id)
        links = share_link_crud.list_for_tracking(
            self.db, tracking_id=tracking_id, not_expired_after=int(utcnow().timestamp())
        )
        return [link_response(link) for link in links]

    def revoke(self, tracking_id: uuid.UUID, share_code: str, requester_id: uuid.UUID) -> None:
        self._owned_tracking(tracking_id, requester_id)
        link = share_link_crud.get_by_code(self.db, share_code=share_code)
        if not link or link.tracking_id != tracking_id:
            raise NotFound("Share link")
        code = link.share_code
        share_link_crud.remove(self.db, db_obj=link)
        logger.info("Share link %s revoked", code)

"""
User profile service.
"""
import logging
import uuid

from botocore.exceptions import BotoCoreError, ClientError

from sqlalchemy.orm import Session

from app.aws.s3 import delete_from_s3, key_from_url, upload_to_s3
from app.core.config import settings
from app.core.exceptions import NotConfigured, NotFound, ValidationError
from app.crud import review_crud, user_crud
from app.model.user import User
from app.schema.auth import UserProfile, UserUpdate
from app.schema.recommendation import MasterRecommendation, MasterRecommendationListResponse
from app.utils.geo import location_reason, location_score
from app.utils.recommendation_scoring import DEFAULT_WEIGHTS, match_score, quality_score, should_filter
from app.utils.rounding import round_half_up

logger = logging.getLogger(__name__)

AVATAR_TYPES = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


def user_profile(user: User) -> UserProfile:
    return UserProfile(
        id=str(user.id),
        email=user.email,
        role=user.role,
        first_name=user.first_name,
        last_name=user.last_name,
        city=user.city,
        avatar_url=user.avatar_url,
        is_active=bool(user.is_active),
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def _get(self, user_id) -> User:
        user = user_crud.get(self.db, uuid.UUID(str(user_id)))
        if not user:
            raise NotFound("User")
        return user

    def get_profile(self, user_id) -> UserProfile:
        return user_profile(self._get(user_id))

    def update_profile(self, user_id, body: UserUpdate) -> UserProfile:
        user = self._get(user_id)
        user = user_crud.update(self.db, db_obj=user, obj_in=body.model_dump(exclude_unset=True))
        return user_profile(user)

    def update_avatar(self, user_id, body: bytes, content_type: str) -> UserProfile:
        """Upload a new avatar; the previous object is deleted best effort."""
        if not settings.use_s3:
            raise NotConfigured("Avatar upload requires S3. Set S3_BUCKET_NAME.")
        ext = AVATAR_TYPES.get(content_type or "")
        if not ext:
            raise ValidationError("File must be an image (JPEG, PNG, WebP).")
        if not body:
            raise ValidationError("Uploaded file is empty.")

        user = self._get(user_id)
        old_key = key_from_url(user.avatar_url)
        key = f"users/{user.id}/avatar-{uuid.uuid4().hex[:8]}{ext}"
        url = upload_to_s3(key=key, body=body, content_type=content_type)
        user = user_crud.update(self.db, db_obj=user, obj_in={"avatar_url": url})

        if old_key and old_key != key:
            try:
                delete_from_s3(old_key)
            except (BotoCoreError, ClientError) as e:
                logger.warning("Failed to delete old avatar %s: %s", old_key, e)
        return user_profile(user)

    def recommended_masters(
        self, user_id, page: int = 1, limit: int = 20, min_score: int = 0
    ) -> MasterRecommendationListResponse:
        """
        Active masters ranked for the caller: location against the caller's
        city plus a rating bonus. Review count stands in for completed orders.
        """
        user = self._get(user_id)
        masters = user_crud.list_active_masters(self.db, exclude_user_id=user.id)
        ratings = review_crud.rating_summary(self.db, master_ids=[m.id for m in masters])

        ranked = []
        for master in masters:
            average, count = ratings.get(master.id, (0.0, 0))
            location = location_score(user.city, master.city, DEFAULT_WEIGHTS.location)
            quality, quality_reason = quality_score(average, count, DEFAULT_WEIGHTS.quality)
            score = match_score(location, quality)
            if should_filter(score, min_score):
                continue
            reasons = [location_reason(user.city, master.city)]
            if quality_reason:
                reasons.append(quality_reason)
            ranked.append(MasterRecommendation(
                id=master.id,
                first_name=master.first_name,
                last_name=master.last_name,
                city=master.city,
                avatar_url=master.avatar_url,
                average_rating=round_half_up(average, 1),
                total_reviews=count,
                match_score=score,
                location_score=location,
                quality_score=quality,
                reasons=reasons,
            ))

        ranked.sort(key=lambda r: (-r.match_score, -r.average_rating, str(r.id)))
        total = len(ranked)
        start = (page - 1) * limit
        return MasterRecommendationListResponse(
            items=ranked[start:start + limit],
            page=page,
            limit=limit,
            total=total,
            total_pages=(total + limit - 1) // limit if total else 0,
        )

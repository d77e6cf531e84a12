"""DJ profile service - profile edits, plans, live status, reviews and moderation"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .db import transaction
from .errors import NotFoundError, ValidationError
from .models import ApprovalStatus, DJProfile, Plan, Review, new_id, utcnow
from .repositories import DJProfileRepository, ReviewRepository

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {
    "name",
    "city",
    "state",
    "genres",
    "event_types",
    "min_fee",
    "bio",
    "instagram",
    "youtube",
    "soundcloud",
    "gallery",
    "videos",
    "profile_image",
    "cover_image",
    "latitude",
    "longitude",
}

# NOT NULL columns: an explicit null is refused
REQUIRED_FIELDS = {
    "name",
    "city",
    "genres",
    "event_types",
    "min_fee",
    "bio",
    "gallery",
    "videos",
    "profile_image",
    "cover_image",
}


class ProfileService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_dj_by_id(self, dj_id: str) -> DJProfile:
        """Any approval status; for the owner's dashboard and admins."""
        profile = await DJProfileRepository.get(self.db, dj_id)
        if not profile:
            raise NotFoundError("DJ not found")
        return profile

    async def list_all_for_admin(self) -> list[DJProfile]:
        return await DJProfileRepository.list_all(self.db)

    async def get_reviews(self, dj_id: str) -> list[Review]:
        return await ReviewRepository.list_for_dj(self.db, dj_id)

    async def update_profile(self, dj_id: str, changes: dict) -> DJProfile:
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
        nulled = sorted(f for f in REQUIRED_FIELDS if f in changes and changes[f] is None)
        if nulled:
            raise ValidationError(f"Fields cannot be null: {', '.join(nulled)}")
        if "min_fee" in changes and changes["min_fee"] < 0:
            raise ValidationError("min_fee cannot be negative")
        for field in ("name", "city"):
            if field in changes and not (changes[field] or "").strip():
                raise ValidationError(f"{field} cannot be empty")

        async with transaction(self.db):
            profile = await self.get_dj_by_id(dj_id)
            for key, value in changes.items():
                setattr(profile, key, value)

        logger.info(f"Profile {dj_id} updated: {sorted(changes)}")
        return profile

    async def change_plan(self, dj_id: str, plan) -> DJProfile:
        try:
            plan = Plan(str(plan).upper())
        except ValueError:
            raise ValidationError(f"Unknown plan: {plan}")

        async with transaction(self.db):
            profile = await self.get_dj_by_id(dj_id)
            if profile.plan == plan.value:
                raise ValidationError("You are already on this plan.")
            profile.apply_plan(plan.value)

        logger.info(f"Profile {dj_id} moved to plan {plan.value}")
        return profile

    async def go_live(
        self,
        dj_id: str,
        venue_name: str,
        latitude: float,
        longitude: float,
        hours: float,
        now: Optional[datetime] = None,
    ) -> DJProfile:
        if not (venue_name or "").strip() or hours <= 0:
            raise ValidationError("Please enter a valid venue and duration.")

        async with transaction(self.db):
            profile = await self.get_dj_by_id(dj_id)
            profile.live_venue_name = venue_name.strip()
            profile.live_latitude = latitude
            profile.live_longitude = longitude
            profile.live_until = (now or utcnow()) + timedelta(hours=hours)

        logger.info(f"Profile {dj_id} live at {profile.live_venue_name} until {profile.live_until.isoformat()}")
        return profile

    async def stop_live(self, dj_id: str) -> DJProfile:
        async with transaction(self.db):
            profile = await self.get_dj_by_id(dj_id)
            profile.live_venue_name = None
            profile.live_latitude = None
            profile.live_longitude = None
            profile.live_until = None
        return profile

    async def add_review(
        self,
        dj_id: str,
        author_name: str,
        rating: int,
        comment: str,
        author_image: Optional[str] = None,
    ) -> Review:
        if not 1 <= rating <= 5:
            raise ValidationError("rating must be between 1 and 5")
        if not (author_name or "").strip():
            raise ValidationError("author_name is required")

        async with transaction(self.db):
            profile = await DJProfileRepository.get(self.db, dj_id)
            if not profile or profile.approval_status != ApprovalStatus.APPROVED.value:
                raise NotFoundError("DJ not found")

            review = ReviewRepository.add(
                self.db,
                Review(
                    id=new_id(),
                    dj_profile_id=dj_id,
                    author_name=author_name.strip(),
                    author_image=author_image,
                    rating=rating,
                    comment=comment or "",
                ),
            )
            await self.db.flush()
            profile.avg_rating = await ReviewRepository.average_rating(self.db, dj_id)

        return review

    async def set_approval(self, dj_id: str, status) -> DJProfile:
        try:
            status = ApprovalStatus(str(status).upper())
        except ValueError:
            raise ValidationError(f"Unknown approval status: {status}")

        async with transaction(self.db):
            profile = await self.get_dj_by_id(dj_id)
            profile.approval_status = status.value

        logger.info(f"Profile {dj_id} approval set to {status.value}")
        return profile

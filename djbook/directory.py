import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .config import SEARCH_RADIUS_KM
from .errors import NotFoundError, ValidationError
from .models import ApprovalStatus, DJProfile, Plan
from .repositories import DJProfileRepository

PLAN_RANK = {Plan.ELITE.value: 2, Plan.PRO.value: 1, Plan.FREE.value: 0}


def norm(s: str) -> str:
    return (s or "").strip().lower()


def haversine(lat1, lon1, lat2, lon2):
    R = 6371
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )

    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return R * c


def rank_key(profile: DJProfile):
    return (-PLAN_RANK.get(profile.plan, 0), -(profile.avg_rating or 0.0), norm(profile.name))


@dataclass
class SearchHit:
    profile: DJProfile
    distance_km: Optional[float] = None


class DirectoryIndex:
    """Read-only queries over approved DJ profiles."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def search(
        self,
        q: Optional[str] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
        genre: Optional[str] = None,
        event_type: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        radius_km: Optional[float] = None,
    ) -> list[SearchHit]:
        if (latitude is None) != (longitude is None):
            raise ValidationError("latitude and longitude must be given together")
        if radius_km is not None and radius_km <= 0:
            raise ValidationError("radius_km must be positive")

        profiles = await DJProfileRepository.list_approved(self.db, name=q, city=city, state=state)

        if genre:
            wanted = norm(genre)
            profiles = [p for p in profiles if wanted in {norm(g) for g in (p.genres or [])}]
        if event_type:
            wanted = norm(event_type)
            profiles = [p for p in profiles if wanted in {norm(t) for t in (p.event_types or [])}]

        if latitude is None:
            return [SearchHit(p) for p in sorted(profiles, key=rank_key)]

        radius = SEARCH_RADIUS_KM if radius_km is None else radius_km
        hits = []
        for p in profiles:
            if p.latitude is None or p.longitude is None:
                continue
            distance = haversine(latitude, longitude, p.latitude, p.longitude)
            if distance > radius:
                continue
            hits.append(SearchHit(p, round(distance, 2)))

        hits.sort(key=lambda h: (h.distance_km, rank_key(h.profile)))
        return hits

    async def featured(self) -> list[DJProfile]:
        profiles = await DJProfileRepository.list_approved(self.db)
        return sorted([p for p in profiles if p.featured], key=rank_key)

    async def by_city(self, city: str) -> list[DJProfile]:
        profiles = await DJProfileRepository.list_approved(self.db, city=city)
        return sorted(profiles, key=rank_key)

    async def live_now(self, now: Optional[datetime] = None) -> list[DJProfile]:
        profiles = await DJProfileRepository.list_approved(self.db)
        return sorted([p for p in profiles if p.is_live(now)], key=rank_key)

    async def get_by_slug(self, slug: str) -> DJProfile:
        profile = await DJProfileRepository.get_by_slug(self.db, slug)
        if not profile or profile.approval_status != ApprovalStatus.APPROVED.value:
            raise NotFoundError("DJ not found")
        return profile

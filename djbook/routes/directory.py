from typing import List

from fastapi import APIRouter, Depends, Query

from ..directory import DirectoryIndex
from ..ledger import AvailabilityLedger
from ..profiles import ProfileService
from ..rbac import require_role
from ..schemas import (
    AvailabilityDay,
    DJProfileResponse,
    PublicAvailabilityResponse,
    ReviewCreate,
    ReviewResponse,
    SearchResult,
)
from ..security import get_current_user
from .deps import get_directory, get_ledger, get_profiles

router = APIRouter(prefix="/djs", tags=["Directory"])


@router.get("", response_model=List[SearchResult])
async def search(
    q: str | None = None,
    city: str | None = None,
    state: str | None = None,
    genre: str | None = None,
    event_type: str | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
    radius_km: float | None = Query(default=None, gt=0),
    directory: DirectoryIndex = Depends(get_directory),
):
    hits = await directory.search(
        q=q,
        city=city,
        state=state,
        genre=genre,
        event_type=event_type,
        latitude=latitude,
        longitude=longitude,
        radius_km=radius_km,
    )
    return [SearchResult(dj=DJProfileResponse.model_validate(h.profile), distance_km=h.distance_km) for h in hits]


@router.get("/featured", response_model=List[DJProfileResponse])
async def featured(directory: DirectoryIndex = Depends(get_directory)):
    return await directory.featured()


@router.get("/live", response_model=List[DJProfileResponse])
async def live_now(directory: DirectoryIndex = Depends(get_directory)):
    return await directory.live_now()


@router.get("/city/{city}", response_model=List[DJProfileResponse])
async def by_city(city: str, directory: DirectoryIndex = Depends(get_directory)):
    return await directory.by_city(city)


@router.get("/{slug}", response_model=DJProfileResponse)
async def get_dj(slug: str, directory: DirectoryIndex = Depends(get_directory)):
    return await directory.get_by_slug(slug)


@router.get("/{slug}/availability", response_model=PublicAvailabilityResponse)
async def public_availability(
    slug: str,
    directory: DirectoryIndex = Depends(get_directory),
    ledger: AvailabilityLedger = Depends(get_ledger),
):
    profile = await directory.get_by_slug(slug)
    days = await ledger.get_public_availability(profile.id)
    return PublicAvailabilityResponse(
        dj_id=profile.id,
        days=[AvailabilityDay(date=day, status=status) for day, status in days],
    )


@router.get("/{slug}/reviews", response_model=List[ReviewResponse])
async def list_reviews(
    slug: str,
    directory: DirectoryIndex = Depends(get_directory),
    profiles: ProfileService = Depends(get_profiles),
):
    profile = await directory.get_by_slug(slug)
    return await profiles.get_reviews(profile.id)


@router.post("/{slug}/reviews", response_model=ReviewResponse, status_code=201)
async def add_review(
    slug: str,
    data: ReviewCreate,
    user=Depends(get_current_user),
    directory: DirectoryIndex = Depends(get_directory),
    profiles: ProfileService = Depends(get_profiles),
):
    require_role(user, ["customer"])
    profile = await directory.get_by_slug(slug)
    return await profiles.add_review(
        profile.id,
        author_name=user.get("name") or "Customer",
        rating=data.rating,
        comment=data.comment,
    )

from typing import List

from fastapi import APIRouter, Depends

from ..ledger import AvailabilityLedger
from ..lifecycle import BookingLifecycle
from ..profiles import ProfileService
from ..rbac import require_dj_profile
from ..schemas import (
    BookingResponse,
    CalendarEntryResponse,
    CalendarEntryUpsert,
    DJProfileResponse,
    DJProfileUpdate,
    EntryChangeResponse,
    GoLiveRequest,
    PlanChange,
)
from ..security import get_current_user
from .deps import get_ledger, get_lifecycle, get_profiles

router = APIRouter(prefix="/dj/me", tags=["DJ Dashboard"])


@router.get("", response_model=DJProfileResponse)
async def my_profile(user=Depends(get_current_user), profiles: ProfileService = Depends(get_profiles)):
    return await profiles.get_dj_by_id(require_dj_profile(user))


@router.patch("", response_model=DJProfileResponse)
async def update_profile(
    data: DJProfileUpdate,
    user=Depends(get_current_user),
    profiles: ProfileService = Depends(get_profiles),
):
    return await profiles.update_profile(require_dj_profile(user), data.model_dump(exclude_unset=True))


@router.post("/plan", response_model=DJProfileResponse)
async def change_plan(
    data: PlanChange,
    user=Depends(get_current_user),
    profiles: ProfileService = Depends(get_profiles),
):
    return await profiles.change_plan(require_dj_profile(user), data.plan)


@router.post("/live", response_model=DJProfileResponse)
async def go_live(
    data: GoLiveRequest,
    user=Depends(get_current_user),
    profiles: ProfileService = Depends(get_profiles),
):
    return await profiles.go_live(
        require_dj_profile(user),
        venue_name=data.venue_name,
        latitude=data.latitude,
        longitude=data.longitude,
        hours=data.hours,
    )


@router.delete("/live", response_model=DJProfileResponse)
async def stop_live(user=Depends(get_current_user), profiles: ProfileService = Depends(get_profiles)):
    return await profiles.stop_live(require_dj_profile(user))


# ---- calendar ----

@router.get("/calendar", response_model=List[CalendarEntryResponse])
async def my_calendar(user=Depends(get_current_user), ledger: AvailabilityLedger = Depends(get_ledger)):
    return await ledger.get_entries(require_dj_profile(user))


@router.put("/calendar/{day}", response_model=EntryChangeResponse)
async def set_day(
    day: str,
    data: CalendarEntryUpsert,
    user=Depends(get_current_user),
    ledger: AvailabilityLedger = Depends(get_ledger),
):
    change = await ledger.upsert_entry(
        require_dj_profile(user),
        day,
        data.status,
        title=data.title,
        note=data.note,
        booking_id=data.booking_id,
    )
    entry = CalendarEntryResponse.model_validate(change.entry) if change.entry is not None else None
    return EntryChangeResponse(entry=entry, removed=change.removed)


# ---- booking requests ----

@router.get("/bookings", response_model=List[BookingResponse])
async def my_requests(user=Depends(get_current_user), lifecycle: BookingLifecycle = Depends(get_lifecycle)):
    return await lifecycle.get_bookings_for_dj(require_dj_profile(user))


@router.post("/bookings/{booking_id}/accept", response_model=BookingResponse)
async def accept(
    booking_id: str,
    user=Depends(get_current_user),
    lifecycle: BookingLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.accept_booking(booking_id, require_dj_profile(user))


@router.post("/bookings/{booking_id}/reject", response_model=BookingResponse)
async def reject(
    booking_id: str,
    user=Depends(get_current_user),
    lifecycle: BookingLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.reject_booking(booking_id, require_dj_profile(user))

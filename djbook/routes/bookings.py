from typing import List

from fastapi import APIRouter, Depends

from ..lifecycle import BookingLifecycle
from ..rbac import require_role
from ..schemas import BookingResponse, CreateBookingRequest
from ..security import get_current_user
from .deps import get_lifecycle

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: CreateBookingRequest,
    user=Depends(get_current_user),
    lifecycle: BookingLifecycle = Depends(get_lifecycle),
):
    require_role(user, ["customer"])
    return await lifecycle.create_booking(
        dj_id=data.dj_id,
        customer_id=user["sub"],
        customer_name=user.get("name") or "",
        customer_phone=data.customer_phone,
        event_date=data.event_date,
        event_type=data.event_type,
        location=data.location,
        notes=data.notes,
    )


@router.get("/mine", response_model=List[BookingResponse])
async def my_bookings(user=Depends(get_current_user), lifecycle: BookingLifecycle = Depends(get_lifecycle)):
    require_role(user, ["customer"])
    return await lifecycle.get_bookings_for_customer(user["sub"])

from typing import List

from fastapi import APIRouter, Depends, Response

from ..accounts import AccountService
from ..lifecycle import BookingLifecycle
from ..profiles import ProfileService
from ..rbac import require_role
from ..schemas import ApprovalChange, BookingResponse, DJProfileResponse
from ..security import get_current_user
from .deps import get_accounts, get_lifecycle, get_profiles

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/djs", response_model=List[DJProfileResponse])
async def all_djs(user=Depends(get_current_user), profiles: ProfileService = Depends(get_profiles)):
    require_role(user, ["admin"])
    return await profiles.list_all_for_admin()


@router.post("/djs/{dj_id}/approval", response_model=DJProfileResponse)
async def set_approval(
    dj_id: str,
    data: ApprovalChange,
    user=Depends(get_current_user),
    profiles: ProfileService = Depends(get_profiles),
):
    require_role(user, ["admin"])
    return await profiles.set_approval(dj_id, data.status)


@router.get("/bookings", response_model=List[BookingResponse])
async def all_bookings(user=Depends(get_current_user), lifecycle: BookingLifecycle = Depends(get_lifecycle)):
    require_role(user, ["admin"])
    return await lifecycle.get_all_bookings()


@router.delete("/users/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    user=Depends(get_current_user),
    accounts: AccountService = Depends(get_accounts),
):
    require_role(user, ["admin"])
    await accounts.delete_account(user_id)
    return Response(status_code=204)

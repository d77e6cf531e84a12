from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..accounts import AccountService
from ..db import get_db
from ..directory import DirectoryIndex
from ..ledger import AvailabilityLedger
from ..lifecycle import BookingLifecycle
from ..profiles import ProfileService


def get_lifecycle(db: AsyncSession = Depends(get_db)) -> BookingLifecycle:
    return BookingLifecycle(db)


def get_ledger(db: AsyncSession = Depends(get_db)) -> AvailabilityLedger:
    return AvailabilityLedger(db)


def get_directory(db: AsyncSession = Depends(get_db)) -> DirectoryIndex:
    return DirectoryIndex(db)


def get_profiles(db: AsyncSession = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


def get_accounts(db: AsyncSession = Depends(get_db)) -> AccountService:
    return AccountService(db)

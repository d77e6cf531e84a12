"""Availability ledger: per-DJ calendar entries.

A day with no entry is available. Entries are either MANUAL (the DJ blocked
the day) or PLATFORM (owned by a booking). Only the booking lifecycle may
create, re-status or remove PLATFORM entries; the manual path below refuses to.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from dateutil import parser
from sqlalchemy.ext.asyncio import AsyncSession

from .config import PLATFORM_TIMEZONE
from .db import transaction
from .errors import EntryLockedError, ValidationError
from .events import calendar_event, to_json
from .locks import calendar_key, calendar_locks
from .models import CalendarEntry, CalendarStatus, EntrySource, new_id
from .rabbitmq import publisher as default_publisher
from .repositories import CalendarRepository

logger = logging.getLogger(__name__)

HOLD_TITLE = "Platform Inquiry"


def platform_tz() -> ZoneInfo:
    return ZoneInfo(PLATFORM_TIMEZONE)


def to_day(value) -> date:
    """Reduce a date, datetime or ISO string to its calendar day in the platform timezone."""
    if isinstance(value, str):
        try:
            value = parser.isoparse(value.strip())
        except (ValueError, OverflowError):
            raise ValidationError(f"Invalid date: {value!r}")

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(platform_tz())
        return value.date()

    if isinstance(value, date):
        return value

    raise ValidationError(f"Invalid date: {value!r}")


def today() -> date:
    return datetime.now(platform_tz()).date()


def parse_status(value) -> CalendarStatus:
    try:
        return CalendarStatus(str(value).strip().upper())
    except ValueError:
        raise ValidationError(f"Invalid calendar status: {value!r}")


def booked_title(event_type: str) -> str:
    return f"Platform: {event_type}"


@dataclass
class EntryChange:
    entry: Optional[CalendarEntry]
    removed: bool = False


class AvailabilityLedger:
    def __init__(self, db: AsyncSession, locks=None, publisher=None):
        self.db = db
        self.locks = locks or calendar_locks
        self.publisher = publisher or default_publisher

    # ---- reads ----

    async def get_entries(self, dj_id: str) -> list[CalendarEntry]:
        return await CalendarRepository.list_for_dj(self.db, dj_id)

    async def get_public_availability(self, dj_id: str) -> list[tuple[date, str]]:
        entries = await CalendarRepository.list_for_dj(self.db, dj_id)
        return [(e.date, e.status) for e in entries if e.status != CalendarStatus.AVAILABLE.value]

    async def is_available(self, dj_id: str, day) -> bool:
        return await CalendarRepository.get(self.db, dj_id, to_day(day)) is None

    # ---- manual edits ----

    async def upsert_entry(
        self,
        dj_id: str,
        day,
        status,
        title: Optional[str] = None,
        note: Optional[str] = None,
        booking_id: Optional[str] = None,
    ) -> EntryChange:
        day = to_day(day)
        status = parse_status(status)

        async with self.locks.acquire(calendar_key(dj_id, day)):
            async with transaction(self.db):
                change = await self._apply_manual(dj_id, day, status, title, note, booking_id)

        if change.entry is not None:
            await self.publisher.publish(
                "calendar.updated",
                to_json(calendar_event(dj_id, day, None if change.removed else change.entry)),
            )
        return change

    async def _apply_manual(self, dj_id, day, status, title, note, booking_id) -> EntryChange:
        existing = await CalendarRepository.get(self.db, dj_id, day)

        if existing is not None and existing.is_platform_linked:
            if booking_id is not None and booking_id != existing.booking_id:
                raise EntryLockedError("This date is linked to another platform booking.")
            if status.value != existing.status:
                logger.warning(
                    f"Refused manual status change {existing.status}->{status.value} "
                    f"on platform entry dj={dj_id} date={day} booking={existing.booking_id}"
                )
                raise EntryLockedError(
                    "This date is linked to a platform booking. Manage it from your booking requests."
                )
            # notes and titles stay editable on platform entries
            existing.title = title
            existing.note = note
            await self.db.flush()
            return EntryChange(existing)

        if booking_id is not None:
            raise EntryLockedError("Booking links are managed by booking requests, not manual edits.")

        if status == CalendarStatus.AVAILABLE:
            if existing is None:
                return EntryChange(None)
            await CalendarRepository.delete(self.db, existing)
            await self.db.flush()
            logger.info(f"Calendar cleared dj={dj_id} date={day}")
            return EntryChange(existing, removed=True)

        if existing is not None:
            existing.status = status.value
            existing.title = title
            existing.note = note
            entry = existing
        else:
            entry = CalendarRepository.add(
                self.db,
                CalendarEntry(
                    id=new_id(),
                    dj_profile_id=dj_id,
                    date=day,
                    status=status.value,
                    source=EntrySource.MANUAL.value,
                    title=title,
                    note=note,
                ),
            )
        await self.db.flush()
        logger.info(f"Calendar set dj={dj_id} date={day} status={status.value}")
        return EntryChange(entry)

    # ---- platform links (caller holds the key lock and owns the transaction) ----

    async def place_hold(self, dj_id: str, day: date, booking_id: str) -> CalendarEntry:
        entry = CalendarRepository.add(
            self.db,
            CalendarEntry(
                id=new_id(),
                dj_profile_id=dj_id,
                date=day,
                status=CalendarStatus.HOLD.value,
                source=EntrySource.PLATFORM.value,
                title=HOLD_TITLE,
                booking_id=booking_id,
            ),
        )
        await self.db.flush()
        return entry

    async def mark_booked(self, dj_id: str, day: date, booking_id: str, event_type: str) -> CalendarEntry:
        entry = await CalendarRepository.get(self.db, dj_id, day)
        if entry is None:
            # the hold may have been cleared in the meantime
            entry = CalendarRepository.add(
                self.db,
                CalendarEntry(id=new_id(), dj_profile_id=dj_id, date=day),
            )
        entry.status = CalendarStatus.BOOKED.value
        entry.source = EntrySource.PLATFORM.value
        entry.title = booked_title(event_type)
        entry.booking_id = booking_id
        await self.db.flush()
        return entry

    async def release(self, dj_id: str, day: date, booking_id: str) -> Optional[CalendarEntry]:
        entry = await CalendarRepository.get_linked(self.db, dj_id, day, booking_id)
        if entry is None:
            return None
        await CalendarRepository.delete(self.db, entry)
        await self.db.flush()
        return entry

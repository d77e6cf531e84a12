"""Booking lifecycle: PENDING -> ACCEPTED | REJECTED, with calendar side effects.

Every mutation runs under the (dj, event date) key lock and inside a single
transaction, so the booking row and its calendar entry change together or not
at all. Events are published after commit.
"""

import logging
from datetime import date
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .config import ENFORCE_PENDING_TRANSITIONS
from .db import transaction
from .errors import DateUnavailableError, InvalidStateError, NotFoundError, ValidationError
from .events import booking_event, to_json
from .ledger import AvailabilityLedger, to_day
from .ledger import today as platform_today
from .locks import calendar_key, calendar_locks
from .models import ApprovalStatus, Booking, BookingStatus, new_id, utcnow
from .rabbitmq import publisher as default_publisher
from .repositories import BookingRepository, DJProfileRepository

logger = logging.getLogger(__name__)


def _required(**fields):
    missing = [name for name, value in fields.items() if value is None or not str(value).strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


class BookingLifecycle:
    def __init__(
        self,
        db: AsyncSession,
        locks=None,
        publisher=None,
        today: Optional[Callable[[], date]] = None,
        enforce_pending: Optional[bool] = None,
    ):
        self.db = db
        self.locks = locks or calendar_locks
        self.publisher = publisher or default_publisher
        self.today = today or platform_today
        self.enforce_pending = ENFORCE_PENDING_TRANSITIONS if enforce_pending is None else enforce_pending
        self.ledger = AvailabilityLedger(db, locks=self.locks, publisher=self.publisher)

    # ---- commands ----

    async def create_booking(
        self,
        dj_id: str,
        customer_id: str,
        customer_name: str,
        customer_phone: str,
        event_date,
        event_type: str,
        location: str,
        notes: Optional[str] = None,
    ) -> Booking:
        _required(
            dj_id=dj_id,
            customer_id=customer_id,
            customer_name=customer_name,
            customer_phone=customer_phone,
            event_type=event_type,
            location=location,
        )
        day = to_day(event_date)
        if day < self.today():
            raise ValidationError("Event date cannot be in the past.")

        async with self.locks.acquire(calendar_key(dj_id, day)):
            async with transaction(self.db):
                dj = await DJProfileRepository.get(self.db, dj_id)
                if not dj or dj.approval_status != ApprovalStatus.APPROVED.value:
                    raise NotFoundError("DJ not found")

                if not await self.ledger.is_available(dj_id, day):
                    logger.warning(f"Booking refused, date taken dj={dj_id} date={day}")
                    raise DateUnavailableError()

                booking = BookingRepository.add(
                    self.db,
                    Booking(
                        id=new_id(),
                        dj_profile_id=dj.id,
                        dj_name=dj.name,
                        dj_profile_image=dj.profile_image or "",
                        customer_id=customer_id,
                        customer_name=customer_name.strip(),
                        customer_phone=customer_phone.strip(),
                        event_date=day,
                        event_type=event_type.strip(),
                        location=location.strip(),
                        notes=notes,
                        status=BookingStatus.PENDING.value,
                    ),
                )
                try:
                    await self.ledger.place_hold(dj_id, day, booking.id)
                except IntegrityError:
                    # another process claimed the day between our check and insert
                    logger.warning(f"Booking refused on unique conflict dj={dj_id} date={day}")
                    raise DateUnavailableError()

        logger.info(f"Booking {booking.id} requested dj={dj_id} date={day}")
        await self.publisher.publish("booking.requested", to_json(booking_event("booking.requested", booking)))
        return booking

    async def accept_booking(self, booking_id: str, dj_id: str) -> Booking:
        key = await self._lock_key(booking_id, dj_id)

        async with self.locks.acquire(key):
            async with transaction(self.db):
                booking = await self._owned(booking_id, dj_id)
                self._guard(booking, BookingStatus.ACCEPTED)

                booking.status = BookingStatus.ACCEPTED.value
                booking.updated_at = utcnow()
                await self.ledger.mark_booked(dj_id, booking.event_date, booking.id, booking.event_type)

        logger.info(f"Booking {booking.id} accepted dj={dj_id} date={booking.event_date}")
        await self.publisher.publish("booking.accepted", to_json(booking_event("booking.accepted", booking)))
        return booking

    async def reject_booking(self, booking_id: str, dj_id: str) -> Booking:
        key = await self._lock_key(booking_id, dj_id)

        async with self.locks.acquire(key):
            async with transaction(self.db):
                booking = await self._owned(booking_id, dj_id)
                self._guard(booking, BookingStatus.REJECTED)

                booking.status = BookingStatus.REJECTED.value
                booking.updated_at = utcnow()
                released = await self.ledger.release(dj_id, booking.event_date, booking.id)

        logger.info(
            f"Booking {booking.id} rejected dj={dj_id} date={booking.event_date} "
            f"released={'yes' if released else 'no'}"
        )
        await self.publisher.publish("booking.rejected", to_json(booking_event("booking.rejected", booking)))
        return booking

    # ---- reads ----

    async def get_booking(self, booking_id: str) -> Booking:
        booking = await BookingRepository.get(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    async def get_bookings_for_dj(self, dj_id: str) -> list[Booking]:
        return await BookingRepository.list_for_dj(self.db, dj_id)

    async def get_bookings_for_customer(self, customer_id: str) -> list[Booking]:
        return await BookingRepository.list_for_customer(self.db, customer_id)

    async def get_all_bookings(self) -> list[Booking]:
        return await BookingRepository.list_all(self.db)

    # ---- helpers ----

    async def _lock_key(self, booking_id: str, dj_id: str) -> str:
        booking = await BookingRepository.get_for_dj(self.db, booking_id, dj_id)
        if not booking:
            raise NotFoundError("Booking not found")
        key = calendar_key(dj_id, booking.event_date)
        # end the read transaction before waiting on the key lock
        await self.db.commit()
        return key

    async def _owned(self, booking_id: str, dj_id: str) -> Booking:
        booking = await BookingRepository.get_for_dj(self.db, booking_id, dj_id, fresh=True)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    def _guard(self, booking: Booking, target: BookingStatus):
        if not self.enforce_pending or booking.status == BookingStatus.PENDING.value:
            return
        if booking.status == target.value:
            # repeat of the same decision: re-apply the calendar side effect only
            return
        logger.warning(f"Refused {booking.status}->{target.value} for booking {booking.id}")
        raise InvalidStateError(f"Booking is {booking.status}; only PENDING bookings can be {target.value.lower()}.")

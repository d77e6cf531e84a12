"""Storage access per entity.

Repositories read and stage writes on the caller's session. They never
commit: transaction boundaries belong to the services that use them.
"""

from datetime import date
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import ApprovalStatus, Booking, CalendarEntry, DJProfile, Review, User


class UserRepository:
    @staticmethod
    async def get(db: AsyncSession, user_id: str) -> Optional[User]:
        return await db.get(User, user_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Optional[User]:
        res = await db.execute(select(User).where(func.lower(User.email) == email.strip().lower()))
        return res.scalar_one_or_none()

    @staticmethod
    def add(db: AsyncSession, user: User) -> User:
        db.add(user)
        return user

    @staticmethod
    async def delete(db: AsyncSession, user: User) -> None:
        await db.delete(user)


class DJProfileRepository:
    @staticmethod
    async def get(db: AsyncSession, dj_id: str) -> Optional[DJProfile]:
        return await db.get(DJProfile, dj_id)

    @staticmethod
    async def get_by_slug(db: AsyncSession, slug: str) -> Optional[DJProfile]:
        res = await db.execute(select(DJProfile).where(DJProfile.slug == slug))
        return res.scalar_one_or_none()

    @staticmethod
    async def slug_exists(db: AsyncSession, slug: str) -> bool:
        res = await db.execute(select(DJProfile.id).where(DJProfile.slug == slug))
        return res.first() is not None

    @staticmethod
    async def list_approved(
        db: AsyncSession,
        name: Optional[str] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
    ) -> list[DJProfile]:
        query = select(DJProfile).where(DJProfile.approval_status == ApprovalStatus.APPROVED.value)

        if name:
            query = query.where(DJProfile.name.ilike(f"%{name.strip()}%"))
        if city:
            query = query.where(func.lower(DJProfile.city) == city.strip().lower())
        if state:
            query = query.where(func.lower(DJProfile.state) == state.strip().lower())

        res = await db.execute(query.order_by(DJProfile.name))
        return list(res.scalars().all())

    @staticmethod
    async def list_all(db: AsyncSession) -> list[DJProfile]:
        res = await db.execute(select(DJProfile).order_by(DJProfile.created_at.desc()))
        return list(res.scalars().all())

    @staticmethod
    def add(db: AsyncSession, profile: DJProfile) -> DJProfile:
        db.add(profile)
        return profile

    @staticmethod
    async def delete(db: AsyncSession, profile: DJProfile) -> None:
        await db.delete(profile)


class BookingRepository:
    @staticmethod
    async def get(db: AsyncSession, booking_id: str, fresh: bool = False) -> Optional[Booking]:
        query = select(Booking).where(Booking.id == booking_id)
        if fresh:
            query = query.execution_options(populate_existing=True)
        res = await db.execute(query)
        return res.scalar_one_or_none()

    @staticmethod
    async def get_for_dj(db: AsyncSession, booking_id: str, dj_id: str, fresh: bool = False) -> Optional[Booking]:
        """Booking by id, only if it belongs to dj_id."""
        query = select(Booking).where(Booking.id == booking_id, Booking.dj_profile_id == dj_id)
        if fresh:
            query = query.execution_options(populate_existing=True)
        res = await db.execute(query)
        return res.scalar_one_or_none()

    @staticmethod
    async def list_for_dj(db: AsyncSession, dj_id: str) -> list[Booking]:
        res = await db.execute(
            select(Booking)
            .where(Booking.dj_profile_id == dj_id)
            .order_by(Booking.event_date.desc(), Booking.created_at.desc())
        )
        return list(res.scalars().all())

    @staticmethod
    async def list_for_customer(db: AsyncSession, customer_id: str) -> list[Booking]:
        res = await db.execute(
            select(Booking)
            .where(Booking.customer_id == customer_id)
            .order_by(Booking.event_date.desc(), Booking.created_at.desc())
        )
        return list(res.scalars().all())

    @staticmethod
    async def list_all(db: AsyncSession) -> list[Booking]:
        res = await db.execute(select(Booking).order_by(Booking.event_date.desc(), Booking.created_at.desc()))
        return list(res.scalars().all())

    @staticmethod
    def add(db: AsyncSession, booking: Booking) -> Booking:
        db.add(booking)
        return booking


class CalendarRepository:
    @staticmethod
    async def get(db: AsyncSession, dj_id: str, day: date) -> Optional[CalendarEntry]:
        res = await db.execute(
            select(CalendarEntry)
            .where(CalendarEntry.dj_profile_id == dj_id, CalendarEntry.date == day)
            .execution_options(populate_existing=True)
        )
        return res.scalar_one_or_none()

    @staticmethod
    async def get_linked(db: AsyncSession, dj_id: str, day: date, booking_id: str) -> Optional[CalendarEntry]:
        res = await db.execute(
            select(CalendarEntry)
            .where(
                CalendarEntry.dj_profile_id == dj_id,
                CalendarEntry.date == day,
                CalendarEntry.booking_id == booking_id,
            )
            .execution_options(populate_existing=True)
        )
        return res.scalar_one_or_none()

    @staticmethod
    async def list_for_dj(db: AsyncSession, dj_id: str) -> list[CalendarEntry]:
        res = await db.execute(
            select(CalendarEntry).where(CalendarEntry.dj_profile_id == dj_id).order_by(CalendarEntry.date)
        )
        return list(res.scalars().all())

    @staticmethod
    def add(db: AsyncSession, entry: CalendarEntry) -> CalendarEntry:
        db.add(entry)
        return entry

    @staticmethod
    async def delete(db: AsyncSession, entry: CalendarEntry) -> None:
        await db.delete(entry)

    @staticmethod
    async def delete_for_dj(db: AsyncSession, dj_id: str) -> None:
        await db.execute(delete(CalendarEntry).where(CalendarEntry.dj_profile_id == dj_id))


class ReviewRepository:
    @staticmethod
    async def list_for_dj(db: AsyncSession, dj_id: str) -> list[Review]:
        res = await db.execute(
            select(Review).where(Review.dj_profile_id == dj_id).order_by(Review.created_at.desc())
        )
        return list(res.scalars().all())

    @staticmethod
    async def average_rating(db: AsyncSession, dj_id: str) -> float:
        res = await db.execute(select(func.avg(Review.rating)).where(Review.dj_profile_id == dj_id))
        avg = res.scalar()
        return round(float(avg), 2) if avg is not None else 0.0

    @staticmethod
    def add(db: AsyncSession, review: Review) -> Review:
        db.add(review)
        return review

    @staticmethod
    async def delete_for_dj(db: AsyncSession, dj_id: str) -> None:
        await db.execute(delete(Review).where(Review.dj_profile_id == dj_id))

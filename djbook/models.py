import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from .db import Base


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    DJ = "DJ"
    CUSTOMER = "CUSTOMER"


class ApprovalStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Plan(str, enum.Enum):
    FREE = "FREE"
    PRO = "PRO"
    ELITE = "ELITE"


PAID_PLANS = (Plan.PRO.value, Plan.ELITE.value)


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    # reserved, nothing transitions into these yet
    PAID = "PAID"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class CalendarStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"  # never stored: a day without an entry is available
    BOOKED = "BOOKED"
    HOLD = "HOLD"
    UNAVAILABLE = "UNAVAILABLE"


class EntrySource(str, enum.Enum):
    MANUAL = "MANUAL"
    PLATFORM = "PLATFORM"


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False)  # ADMIN/DJ/CUSTOMER
    dj_profile_id = Column(String, nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class DJProfile(Base):
    __tablename__ = "dj_profiles"

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, unique=True, nullable=False, index=True)

    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    city = Column(String, nullable=False, index=True)
    state = Column(String, nullable=True)

    genres = Column(JSON, nullable=False, default=list)
    event_types = Column(JSON, nullable=False, default=list)
    min_fee = Column(Integer, nullable=False, default=0)
    bio = Column(Text, nullable=False, default="")
    instagram = Column(String, nullable=True)
    youtube = Column(String, nullable=True)
    soundcloud = Column(String, nullable=True)
    gallery = Column(JSON, nullable=False, default=list)
    videos = Column(JSON, nullable=False, default=list)
    profile_image = Column(String, nullable=False, default="")
    cover_image = Column(String, nullable=False, default="")

    plan = Column(String, nullable=False, default=Plan.FREE.value)
    verified = Column(Boolean, nullable=False, default=False)
    featured = Column(Boolean, nullable=False, default=False)
    approval_status = Column(String, nullable=False, default=ApprovalStatus.PENDING.value, index=True)
    avg_rating = Column(Float, nullable=False, default=0.0)

    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    live_venue_name = Column(String, nullable=True)
    live_latitude = Column(Float, nullable=True)
    live_longitude = Column(Float, nullable=True)
    live_until = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def apply_plan(self, plan: str):
        # verified/featured always follow the plan
        self.plan = plan
        self.verified = plan in PAID_PLANS
        self.featured = plan in PAID_PLANS

    def is_live(self, now: datetime | None = None) -> bool:
        if self.live_until is None:
            return False
        until = self.live_until
        if until.tzinfo is None:
            until = until.replace(tzinfo=timezone.utc)
        return until > (now or utcnow())


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String, primary_key=True, default=new_id)
    dj_profile_id = Column(String, nullable=False, index=True)

    # snapshot of the DJ at request time, not kept in sync
    dj_name = Column(String, nullable=False)
    dj_profile_image = Column(String, nullable=False, default="")

    customer_id = Column(String, nullable=False, index=True)
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=True)

    event_date = Column(Date, nullable=False, index=True)
    event_type = Column(String, nullable=False)
    location = Column(String, nullable=False)
    notes = Column(Text, nullable=True)

    status = Column(String, nullable=False, index=True)  # see BookingStatus

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class CalendarEntry(Base):
    __tablename__ = "calendar_entries"

    id = Column(String, primary_key=True, default=new_id)
    dj_profile_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)
    status = Column(String, nullable=False)  # BOOKED/HOLD/UNAVAILABLE
    source = Column(String, nullable=False, default=EntrySource.MANUAL.value)
    title = Column(String, nullable=True)
    note = Column(Text, nullable=True)
    booking_id = Column(String, nullable=True, index=True)

    __table_args__ = (
        UniqueConstraint("dj_profile_id", "date", name="uq_calendar_entries_dj_date"),
        CheckConstraint("status <> 'AVAILABLE'", name="ck_calendar_entries_not_available"),
        CheckConstraint(
            "(source = 'PLATFORM' AND booking_id IS NOT NULL) OR (source = 'MANUAL' AND booking_id IS NULL)",
            name="ck_calendar_entries_source_link",
        ),
    )

    @property
    def is_platform_linked(self) -> bool:
        return self.booking_id is not None


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String, primary_key=True, default=new_id)
    dj_profile_id = Column(String, nullable=False, index=True)
    author_name = Column(String, nullable=False)
    author_image = Column(String, nullable=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),)

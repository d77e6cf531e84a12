from datetime import date, datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---- auth ----

class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str = Field(min_length=6)
    role: str = "CUSTOMER"
    plan: str | None = None
    state: str | None = None
    city: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @field_validator("role")
    @classmethod
    def role_must_be_public(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in ("CUSTOMER", "DJ"):
            raise ValueError("role must be CUSTOMER or DJ")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: str
    dj_profile_id: str | None = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# ---- profiles ----

class DJProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    city: str
    state: str | None = None
    genres: List[str] = []
    event_types: List[str] = []
    min_fee: int = 0
    bio: str = ""
    instagram: str | None = None
    youtube: str | None = None
    soundcloud: str | None = None
    gallery: List[str] = []
    videos: List[str] = []
    profile_image: str = ""
    cover_image: str = ""
    plan: str
    verified: bool
    featured: bool
    approval_status: str
    avg_rating: float
    latitude: float | None = None
    longitude: float | None = None
    live_venue_name: str | None = None
    live_until: datetime | None = None


class DJProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    city: str | None = None
    state: str | None = None
    genres: List[str] | None = None
    event_types: List[str] | None = None
    min_fee: int | None = Field(default=None, ge=0)
    bio: str | None = None
    instagram: str | None = None
    youtube: str | None = None
    soundcloud: str | None = None
    gallery: List[str] | None = None
    videos: List[str] | None = None
    profile_image: str | None = None
    cover_image: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class PlanChange(BaseModel):
    plan: str


class GoLiveRequest(BaseModel):
    venue_name: str
    latitude: float
    longitude: float
    hours: float = Field(gt=0)


class ReviewCreate(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: str = ""


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    dj_profile_id: str
    author_name: str
    author_image: str | None = None
    rating: int
    comment: str
    created_at: datetime


class ApprovalChange(BaseModel):
    status: str


class SearchResult(BaseModel):
    dj: DJProfileResponse
    distance_km: float | None = None


# ---- bookings ----

class CreateBookingRequest(BaseModel):
    dj_id: str
    event_date: str
    event_type: str
    location: str
    customer_phone: str
    notes: str | None = None


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    dj_profile_id: str
    dj_name: str
    dj_profile_image: str
    customer_id: str
    customer_name: str
    customer_phone: str | None = None
    event_date: date
    event_type: str
    location: str
    notes: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime


# ---- calendar ----

class CalendarEntryUpsert(BaseModel):
    status: str
    title: str | None = None
    note: str | None = None
    booking_id: str | None = None


class CalendarEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    dj_profile_id: str
    date: date
    status: str
    source: str
    title: str | None = None
    note: str | None = None
    booking_id: str | None = None


class EntryChangeResponse(BaseModel):
    entry: CalendarEntryResponse | None = None
    removed: bool = False


class AvailabilityDay(BaseModel):
    date: date
    status: str


class PublicAvailabilityResponse(BaseModel):
    dj_id: str
    days: List[AvailabilityDay]

import json
import uuid
from datetime import datetime, timezone

from .models import Booking, CalendarEntry


def build_event(event_type: str, data: dict) -> dict:
    return {
        "event_id": str(uuid.uuid4()),
        "event_type": event_type,
        "occurred_at": datetime.now(timezone.utc).isoformat(),
        "data": data,
    }


def to_json(event: dict) -> str:
    return json.dumps(event, separators=(",", ":"), ensure_ascii=False)


def booking_event(event_type: str, booking: Booking) -> dict:
    return build_event(
        event_type,
        {
            "booking_id": booking.id,
            "dj_profile_id": booking.dj_profile_id,
            "customer_id": booking.customer_id,
            "event_date": booking.event_date.isoformat(),
            "event_type": booking.event_type,
            "status": booking.status,
        },
    )


def calendar_event(dj_id: str, day, entry: CalendarEntry | None) -> dict:
    return build_event(
        "calendar.updated",
        {
            "dj_profile_id": dj_id,
            "date": day.isoformat(),
            "status": entry.status if entry is not None else "AVAILABLE",
            "booking_id": entry.booking_id if entry is not None else None,
        },
    )

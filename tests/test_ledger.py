from datetime import date, datetime, timezone

import pytest
from sqlalchemy import select

from djbook.errors import EntryLockedError, ValidationError
from djbook.ledger import AvailabilityLedger, to_day
from djbook.models import CalendarEntry, EntrySource

from .conftest import EVENT_DAY


@pytest.fixture
def ledger(db, locks, publisher):
    return AvailabilityLedger(db, locks=locks, publisher=publisher)


class TestToDay:
    def test_date_passes_through(self):
        assert to_day(date(2025, 6, 1)) == date(2025, 6, 1)

    def test_plain_iso_string(self):
        assert to_day("2025-06-01") == date(2025, 6, 1)

    def test_aware_timestamp_uses_platform_timezone(self):
        """20:00 UTC is already the next day in India."""
        assert to_day("2025-06-01T20:00:00Z") == date(2025, 6, 2)
        assert to_day(datetime(2025, 6, 1, 20, 0, tzinfo=timezone.utc)) == date(2025, 6, 2)

    def test_naive_datetime_keeps_its_date(self):
        assert to_day(datetime(2025, 6, 1, 23, 30)) == date(2025, 6, 1)

    @pytest.mark.parametrize("value", ["not-a-date", "", None, 20250601])
    def test_rejects_garbage(self, value):
        with pytest.raises(ValidationError):
            to_day(value)


class TestManualEntries:
    async def test_upsert_then_read(self, ledger, make_dj):
        dj = await make_dj()
        change = await ledger.upsert_entry(dj.id, "2025-06-10", "unavailable", title="Family trip")

        assert change.removed is False
        assert change.entry.status == "UNAVAILABLE"
        assert change.entry.source == EntrySource.MANUAL.value

        entries = await ledger.get_entries(dj.id)
        assert [(e.date, e.status, e.title) for e in entries] == [(date(2025, 6, 10), "UNAVAILABLE", "Family trip")]
        assert await ledger.is_available(dj.id, "2025-06-10") is False
        assert await ledger.is_available(dj.id, "2025-06-11") is True

    async def test_at_most_one_entry_per_day(self, ledger, make_dj, db):
        dj = await make_dj()
        await ledger.upsert_entry(dj.id, EVENT_DAY, "UNAVAILABLE")
        await ledger.upsert_entry(dj.id, EVENT_DAY, "BOOKED", title="Private gig")
        await ledger.upsert_entry(dj.id, EVENT_DAY, "HOLD")

        res = await db.execute(select(CalendarEntry).where(CalendarEntry.dj_profile_id == dj.id))
        rows = res.scalars().all()
        assert len(rows) == 1
        assert rows[0].status == "HOLD"

    async def test_available_removes_entry(self, ledger, make_dj, publisher):
        dj = await make_dj()
        await ledger.upsert_entry(dj.id, EVENT_DAY, "UNAVAILABLE")

        change = await ledger.upsert_entry(dj.id, EVENT_DAY, "AVAILABLE")

        assert change.removed is True
        assert await ledger.get_entries(dj.id) == []
        assert publisher.messages[-1][1]["data"]["status"] == "AVAILABLE"

    async def test_available_on_empty_day_is_a_noop(self, ledger, make_dj, publisher):
        dj = await make_dj()

        first = await ledger.upsert_entry(dj.id, EVENT_DAY, "AVAILABLE")
        second = await ledger.upsert_entry(dj.id, EVENT_DAY, "AVAILABLE")

        assert first.entry is None and second.entry is None
        assert await ledger.get_entries(dj.id) == []
        assert publisher.messages == []

    async def test_unknown_status_rejected(self, ledger, make_dj):
        dj = await make_dj()
        with pytest.raises(ValidationError):
            await ledger.upsert_entry(dj.id, EVENT_DAY, "MAYBE")

    async def test_manual_entry_cannot_carry_booking_link(self, ledger, make_dj):
        dj = await make_dj()
        with pytest.raises(EntryLockedError):
            await ledger.upsert_entry(dj.id, EVENT_DAY, "BOOKED", booking_id="b-1")
        assert await ledger.get_entries(dj.id) == []

    async def test_public_availability_lists_blocked_days(self, ledger, make_dj):
        dj = await make_dj()
        await ledger.upsert_entry(dj.id, "2025-06-20", "BOOKED")
        await ledger.upsert_entry(dj.id, "2025-06-10", "UNAVAILABLE")

        assert await ledger.get_public_availability(dj.id) == [
            (date(2025, 6, 10), "UNAVAILABLE"),
            (date(2025, 6, 20), "BOOKED"),
        ]


class TestPlatformEntries:
    async def _booked(self, lifecycle, dj):
        booking = await lifecycle.create_booking(
            dj.id, "cust-1", "Asha", "9999999999", EVENT_DAY, "Wedding", "Pune"
        )
        return await lifecycle.accept_booking(booking.id, dj.id)

    async def test_status_change_refused(self, lifecycle, make_dj):
        dj = await make_dj()
        await self._booked(lifecycle, dj)

        for status in ("AVAILABLE", "UNAVAILABLE", "HOLD"):
            with pytest.raises(EntryLockedError):
                await lifecycle.ledger.upsert_entry(dj.id, EVENT_DAY, status)

        entries = await lifecycle.ledger.get_entries(dj.id)
        assert entries[0].status == "BOOKED"

    async def test_relink_refused(self, lifecycle, make_dj):
        dj = await make_dj()
        booking_id = (await self._booked(lifecycle, dj)).id

        with pytest.raises(EntryLockedError):
            await lifecycle.ledger.upsert_entry(dj.id, EVENT_DAY, "BOOKED", booking_id="someone-else")

        entries = await lifecycle.ledger.get_entries(dj.id)
        assert entries[0].booking_id == booking_id

    async def test_note_stays_editable(self, lifecycle, make_dj):
        dj = await make_dj()
        booking = await self._booked(lifecycle, dj)

        change = await lifecycle.ledger.upsert_entry(
            dj.id, EVENT_DAY, "BOOKED", title="Platform: Wedding", note="bring fog machine"
        )

        assert change.entry.note == "bring fog machine"
        assert change.entry.booking_id == booking.id
        assert change.entry.source == EntrySource.PLATFORM.value

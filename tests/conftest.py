"""
Shared pytest fixtures for DJBook tests.

Each test gets its own throwaway SQLite database file; services run against
it through the same repositories as production. Events go to a recording
publisher and the lifecycle clock is pinned.
"""

import json
import os
from datetime import date

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DJBOOK_DB", "sqlite+aiosqlite://")
os.environ.setdefault("DJBOOK_AUTO_CREATE", "false")

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from djbook.db import Base
from djbook.lifecycle import BookingLifecycle
from djbook.locks import KeyedLock
from djbook.models import ApprovalStatus, DJProfile, new_id

TODAY = date(2025, 5, 1)
EVENT_DAY = date(2025, 6, 14)


class RecordingPublisher:
    """Stands in for RabbitPublisher; keeps decoded events in order."""

    enabled = True

    def __init__(self):
        self.messages = []

    async def publish(self, routing_key: str, message_body: str):
        self.messages.append((routing_key, json.loads(message_body)))

    def routing_keys(self):
        return [key for key, _ in self.messages]


@pytest.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'djbook.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def locks():
    return KeyedLock()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def today():
    return lambda: TODAY


@pytest.fixture
def lifecycle(db, locks, publisher, today):
    return BookingLifecycle(db, locks=locks, publisher=publisher, today=today, enforce_pending=True)


@pytest.fixture
def make_dj(session_factory):
    """Insert a DJ profile directly; returns the committed profile."""

    async def _make(name="DJ Rohan", city="Mumbai", **fields):
        fields.setdefault("approval_status", ApprovalStatus.APPROVED.value)
        fields.setdefault("slug", f"{name}-{city}".lower().replace(" ", "-"))
        plan = fields.pop("plan", "FREE")
        profile = DJProfile(
            id=new_id(),
            user_id=new_id(),
            name=name,
            city=city,
            genres=fields.pop("genres", []),
            event_types=fields.pop("event_types", []),
            gallery=[],
            videos=[],
            **fields,
        )
        profile.apply_plan(plan)
        async with session_factory() as session:
            session.add(profile)
            await session.commit()
        return profile

    return _make

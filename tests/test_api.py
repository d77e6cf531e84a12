from datetime import date, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from djbook.accounts import AccountService
from djbook.db import get_db
from djbook.main import app
from djbook.repositories import UserRepository

EVENT = (date.today() + timedelta(days=60)).isoformat()


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def _token(client, email, password="secret1"):
    resp = await client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
async def actors(client, session_factory):
    """An approved DJ, two customers and an admin, with auth headers."""
    resp = await client.post(
        "/auth/register",
        json={"name": "DJ Rohan", "email": "rohan@example.com", "password": "secret1", "role": "DJ", "city": "Mumbai"},
    )
    assert resp.status_code == 201, resp.text
    dj_profile_id = resp.json()["dj_profile_id"]

    for name, email in (("Asha", "asha@example.com"), ("Vikram", "vikram@example.com")):
        resp = await client.post("/auth/register", json={"name": name, "email": email, "password": "secret1"})
        assert resp.status_code == 201, resp.text

    async with session_factory() as session:
        await AccountService(session).ensure_admin("admin@example.com", "secret1")

    admin = await _token(client, "admin@example.com")
    resp = await client.post(f"/admin/djs/{dj_profile_id}/approval", json={"status": "APPROVED"}, headers=admin)
    assert resp.status_code == 200, resp.text

    return {
        "dj_id": dj_profile_id,
        "dj": await _token(client, "rohan@example.com"),
        "asha": await _token(client, "asha@example.com"),
        "vikram": await _token(client, "vikram@example.com"),
        "admin": admin,
    }


def _booking(dj_id, **overrides):
    body = {
        "dj_id": dj_id,
        "event_date": EVENT,
        "event_type": "Wedding",
        "location": "Pune",
        "customer_phone": "9999999999",
    }
    body.update(overrides)
    return body


class TestSystem:
    async def test_health_echoes_request_id(self, client):
        resp = await client.get("/health", headers={"X-Request-Id": "req-42"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert resp.headers["X-Request-Id"] == "req-42"


class TestAuth:
    async def test_register_rejects_admin_role(self, client):
        resp = await client.post(
            "/auth/register", json={"name": "Eve", "email": "eve@example.com", "password": "secret1", "role": "ADMIN"}
        )
        assert resp.status_code == 422

    async def test_duplicate_email(self, client):
        body = {"name": "Asha", "email": "asha@example.com", "password": "secret1"}
        assert (await client.post("/auth/register", json=body)).status_code == 201
        resp = await client.post("/auth/register", json=body)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Email already exists"

    async def test_bad_login(self, client):
        resp = await client.post("/auth/login", json={"email": "nobody@example.com", "password": "x"})
        assert resp.status_code == 401

    async def test_missing_and_wrong_role(self, client, actors):
        assert (await client.get("/dj/me")).status_code == 401
        assert (await client.get("/dj/me", headers=actors["asha"])).status_code == 403
        assert (await client.get("/admin/bookings", headers=actors["dj"])).status_code == 403
        assert (await client.post("/bookings", json=_booking(actors["dj_id"]), headers=actors["dj"])).status_code == 403


class TestBookingFlow:
    async def test_request_accept_and_conflict(self, client, actors):
        slug = "dj-rohan-mumbai"
        assert (await client.get(f"/djs/{slug}")).status_code == 200

        resp = await client.post("/bookings", json=_booking(actors["dj_id"]), headers=actors["asha"])
        assert resp.status_code == 201, resp.text
        booking = resp.json()
        assert booking["status"] == "PENDING"
        assert booking["customer_name"] == "Asha"
        assert booking["dj_name"] == "DJ Rohan"

        resp = await client.post("/bookings", json=_booking(actors["dj_id"]), headers=actors["vikram"])
        assert resp.status_code == 409
        assert resp.json()["detail"] == "The selected date is no longer available. Please choose another date."

        resp = await client.get(f"/djs/{slug}/availability")
        assert resp.json()["days"] == [{"date": EVENT, "status": "HOLD"}]

        resp = await client.put(f"/dj/me/calendar/{EVENT}", json={"status": "AVAILABLE"}, headers=actors["dj"])
        assert resp.status_code == 409

        resp = await client.post(f"/dj/me/bookings/{booking['id']}/accept", headers=actors["dj"])
        assert resp.status_code == 200, resp.text
        assert resp.json()["status"] == "ACCEPTED"

        resp = await client.get(f"/djs/{slug}/availability")
        assert resp.json()["days"] == [{"date": EVENT, "status": "BOOKED"}]

        resp = await client.post(f"/dj/me/bookings/{booking['id']}/reject", headers=actors["dj"])
        assert resp.status_code == 409

        mine = (await client.get("/bookings/mine", headers=actors["asha"])).json()
        assert [b["id"] for b in mine] == [booking["id"]]
        assert (await client.get("/bookings/mine", headers=actors["vikram"])).json() == []

        all_bookings = (await client.get("/admin/bookings", headers=actors["admin"])).json()
        assert [b["status"] for b in all_bookings] == ["ACCEPTED"]

    async def test_reject_frees_the_day(self, client, actors):
        booking = (await client.post("/bookings", json=_booking(actors["dj_id"]), headers=actors["asha"])).json()

        resp = await client.post(f"/dj/me/bookings/{booking['id']}/reject", headers=actors["dj"])
        assert resp.json()["status"] == "REJECTED"
        assert (await client.get("/dj/me/calendar", headers=actors["dj"])).json() == []

        resp = await client.post("/bookings", json=_booking(actors["dj_id"]), headers=actors["vikram"])
        assert resp.status_code == 201

    async def test_past_date_and_bad_input(self, client, actors):
        past = _booking(actors["dj_id"], event_date="2020-01-01")
        assert (await client.post("/bookings", json=past, headers=actors["asha"])).status_code == 422

        garbage = _booking(actors["dj_id"], event_date="next friday")
        assert (await client.post("/bookings", json=garbage, headers=actors["asha"])).status_code == 422

        unknown = _booking("no-such-dj")
        assert (await client.post("/bookings", json=unknown, headers=actors["asha"])).status_code == 404


class TestDashboard:
    async def test_manual_calendar_round(self, client, actors):
        resp = await client.put(
            f"/dj/me/calendar/{EVENT}", json={"status": "UNAVAILABLE", "title": "Family trip"}, headers=actors["dj"]
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["entry"]["source"] == "MANUAL"

        resp = await client.post("/bookings", json=_booking(actors["dj_id"]), headers=actors["asha"])
        assert resp.status_code == 409

        resp = await client.put(f"/dj/me/calendar/{EVENT}", json={"status": "AVAILABLE"}, headers=actors["dj"])
        assert resp.json()["removed"] is True
        assert (await client.get("/dj/me/calendar", headers=actors["dj"])).json() == []

    @pytest.mark.parametrize("field", ["min_fee", "bio", "profile_image", "genres"])
    async def test_null_profile_field_is_422(self, client, actors, field):
        resp = await client.patch("/dj/me", json={field: None}, headers=actors["dj"])
        assert resp.status_code == 422
        assert field in resp.json()["detail"]

        assert (await client.get("/dj/me", headers=actors["dj"])).status_code == 200

    async def test_plan_and_profile(self, client, actors):
        resp = await client.post("/dj/me/plan", json={"plan": "ELITE"}, headers=actors["dj"])
        assert resp.json()["verified"] is True

        resp = await client.post("/dj/me/plan", json={"plan": "ELITE"}, headers=actors["dj"])
        assert resp.status_code == 422
        assert resp.json()["detail"] == "You are already on this plan."

        resp = await client.patch("/dj/me", json={"bio": "Bollywood nights", "genres": ["Bollywood"]}, headers=actors["dj"])
        assert resp.json()["genres"] == ["Bollywood"]

        featured = (await client.get("/djs/featured")).json()
        assert [p["slug"] for p in featured] == ["dj-rohan-mumbai"]
        hits = (await client.get("/djs", params={"genre": "bollywood"})).json()
        assert [h["dj"]["slug"] for h in hits] == ["dj-rohan-mumbai"]

    async def test_reviews(self, client, actors):
        resp = await client.post("/djs/dj-rohan-mumbai/reviews", json={"rating": 5, "comment": "Superb"}, headers=actors["asha"])
        assert resp.status_code == 201, resp.text
        assert resp.json()["author_name"] == "Asha"

        assert (await client.get("/djs/dj-rohan-mumbai")).json()["avg_rating"] == 5.0
        resp = await client.post("/djs/dj-rohan-mumbai/reviews", json={"rating": 9}, headers=actors["asha"])
        assert resp.status_code == 422


class TestAdmin:
    async def test_delete_dj_account_keeps_bookings(self, client, actors, session_factory):
        booking = (await client.post("/bookings", json=_booking(actors["dj_id"]), headers=actors["asha"])).json()

        async with session_factory() as session:
            dj_user = await UserRepository.get_by_email(session, "rohan@example.com")
        resp = await client.delete(f"/admin/users/{dj_user.id}", headers=actors["admin"])
        assert resp.status_code == 204

        assert (await client.get("/djs/dj-rohan-mumbai")).status_code == 404
        mine = (await client.get("/bookings/mine", headers=actors["asha"])).json()
        assert [b["id"] for b in mine] == [booking["id"]]

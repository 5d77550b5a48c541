"""Tests for /api/sessions endpoints."""

import uuid
from datetime import UTC, datetime, timedelta

import pytest

from app.domain.booking_state import BookingStatus
from app.models.studio import StudioStatus
from helpers import future, make_booking, make_session, make_studio


def session_payload(studio, **overrides) -> dict:
    payload = {
        "studio_id": str(studio.id),
        "title": "Sunset Vinyasa",
        "starts_at": future(48).isoformat(),
        "duration_minutes": 90,
        "capacity": 12,
    }
    payload.update(overrides)
    return payload


class TestReadSessions:
    @pytest.mark.asyncio
    async def test_booked_count_is_confirmed_count(self, client, db):
        studio = await make_studio(db)
        session = await make_session(db, studio, capacity=3)
        await make_booking(db, session, status=BookingStatus.CONFIRMED.value)
        await make_booking(db, session, status=BookingStatus.PENDING.value)
        await make_booking(db, session, status=BookingStatus.CANCELLED.value)
        await make_booking(db, session, status=BookingStatus.REJECTED.value)

        response = await client.get(f"/api/sessions/{session.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["booked_count"] == 1
        assert data["spots_left"] == 2
        assert data["is_full"] is False
        assert data["studio_name"] == "Lotus Studio"
        assert len(data["participants"]) == 1

    @pytest.mark.asyncio
    async def test_list_active_ordered_by_start(self, client, db):
        studio = await make_studio(db)
        other_studio = await make_studio(db, name="Zen Den")
        later = await make_session(db, studio, starts_at=future(72))
        sooner = await make_session(db, studio, starts_at=future(24))
        await make_session(db, studio, status="cancelled")
        await make_session(db, other_studio)

        response = await client.get("/api/sessions", params={"studio_id": str(studio.id)})

        assert [s["id"] for s in response.json()] == [str(sooner.id), str(later.id)]

    @pytest.mark.asyncio
    async def test_full_session(self, client, db):
        studio = await make_studio(db)
        session = await make_session(db, studio, capacity=1)
        await make_booking(db, session)

        data = (await client.get("/api/sessions")).json()[0]
        assert data["is_full"] is True
        assert data["spots_left"] == 0

    @pytest.mark.asyncio
    async def test_cancelled_session_not_found(self, client, db):
        studio = await make_studio(db)
        session = await make_session(db, studio, status="cancelled")

        response = await client.get(f"/api/sessions/{session.id}")
        assert response.status_code == 404


class TestCreateSession:
    @pytest.mark.asyncio
    async def test_create(self, client, db):
        studio = await make_studio(db)

        response = await client.post("/api/sessions", json=session_payload(studio))

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Sunset Vinyasa"
        assert data["status"] == "active"
        assert data["studio_id"] == str(studio.id)

    @pytest.mark.asyncio
    async def test_inactive_studio(self, client, db):
        studio = await make_studio(db, status=StudioStatus.SUSPENDED.value)

        response = await client.post("/api/sessions", json=session_payload(studio))

        assert response.status_code == 400
        assert response.json() == {"error": "Studio not found or inactive"}

    @pytest.mark.asyncio
    async def test_unknown_studio(self, client):
        response = await client.post(
            "/api/sessions",
            json={
                "studio_id": str(uuid.uuid4()),
                "title": "Yin",
                "starts_at": future().isoformat(),
                "duration_minutes": 60,
                "capacity": 5,
            },
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides,error",
        [
            ({"capacity": 0}, "Capacity must be greater than 0"),
            ({"duration_minutes": 0}, "Duration must be greater than 0"),
            (
                {"starts_at": (datetime.now(UTC) - timedelta(hours=1)).isoformat()},
                "Start time must be in the future",
            ),
        ],
    )
    async def test_invalid_schedule(self, client, db, overrides, error):
        studio = await make_studio(db)

        response = await client.post("/api/sessions", json=session_payload(studio, **overrides))

        assert response.status_code == 400
        assert response.json()["error"] == error


class TestUpdateSession:
    @pytest.mark.asyncio
    async def test_update(self, client, db):
        studio = await make_studio(db)
        session = await make_session(db, studio)

        response = await client.put(
            f"/api/sessions/{session.id}",
            json={
                "title": "Slow Flow",
                "starts_at": future(30).isoformat(),
                "duration_minutes": 45,
                "capacity": 8,
            },
        )
        assert response.status_code == 204

        data = (await client.get(f"/api/sessions/{session.id}")).json()
        assert data["title"] == "Slow Flow"
        assert data["capacity"] == 8

    @pytest.mark.asyncio
    async def test_capacity_below_confirmed(self, client, db):
        studio = await make_studio(db)
        session = await make_session(db, studio, capacity=3)
        await make_booking(db, session)
        await make_booking(db, session)

        response = await client.put(
            f"/api/sessions/{session.id}",
            json={
                "title": "Morning Flow",
                "starts_at": future().isoformat(),
                "duration_minutes": 60,
                "capacity": 1,
            },
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Cannot reduce capacity below current bookings (2)"

    @pytest.mark.asyncio
    async def test_update_cancelled_session(self, client, db):
        studio = await make_studio(db)
        session = await make_session(db, studio, status="cancelled")

        response = await client.put(
            f"/api/sessions/{session.id}",
            json={
                "title": "Morning Flow",
                "starts_at": future().isoformat(),
                "duration_minutes": 60,
                "capacity": 10,
            },
        )
        assert response.status_code == 404


class TestCancelSession:
    @pytest.mark.asyncio
    async def test_cancel_hides_session_and_blocks_bookings(self, client, db):
        studio = await make_studio(db)
        session = await make_session(db, studio)

        response = await client.delete(f"/api/sessions/{session.id}")
        assert response.status_code == 204

        assert (await client.get("/api/sessions")).json() == []
        booking = await client.post(
            "/api/bookings",
            json={
                "session_id": str(session.id),
                "first_name": "Jane",
                "last_name": "Doe",
                "email": "jane@example.com",
            },
        )
        assert booking.status_code == 404

    @pytest.mark.asyncio
    async def test_cancel_unknown(self, client):
        response = await client.delete(f"/api/sessions/{uuid.uuid4()}")
        assert response.status_code == 404

"""Tests for /api/studios endpoints."""

import uuid
from datetime import UTC, datetime

import pytest

from app.domain.booking_state import BookingStatus
from app.models.studio import StudioStatus, StudioUser
from app.repositories.studio_repository import StudioRepository
from helpers import future, make_booking, make_session, make_studio


class TestListStudios:
    @pytest.mark.asyncio
    async def test_active_studios_by_name_with_counts(self, client, db):
        zen = await make_studio(db, name="Zen Den")
        lotus = await make_studio(db, name="Lotus Studio")
        await make_studio(db, name="Closed Studio", status=StudioStatus.SUSPENDED.value)
        await make_session(db, lotus)
        await make_session(db, lotus)
        await make_session(db, lotus, status="cancelled")
        db.add(
            StudioUser(
                id=uuid.uuid4(),
                studio_id=lotus.id,
                email="owner@lotus.example.com",
                password_hash="x",
                created_at=datetime.now(UTC),
            )
        )
        await db.commit()

        response = await client.get("/api/studios")

        assert response.status_code == 200
        data = response.json()
        assert [s["name"] for s in data] == ["Lotus Studio", "Zen Den"]
        assert data[0]["session_count"] == 2
        assert data[0]["user_count"] == 1
        assert data[1]["id"] == str(zen.id)
        assert data[1]["session_count"] == 0


class TestGetStudio:
    @pytest.mark.asyncio
    async def test_schedule_with_live_counts(self, client, db):
        studio = await make_studio(db)
        later = await make_session(db, studio, starts_at=future(48), capacity=2)
        sooner = await make_session(db, studio, starts_at=future(24), capacity=1)
        await make_booking(db, sooner)
        await make_booking(db, later, status=BookingStatus.PENDING.value)

        response = await client.get(f"/api/studios/{studio.id}")

        assert response.status_code == 200
        sessions = response.json()["sessions"]
        assert [s["id"] for s in sessions] == [str(sooner.id), str(later.id)]
        assert sessions[0]["is_full"] is True
        assert sessions[1]["booked_count"] == 0
        assert sessions[1]["spots_left"] == 2

    @pytest.mark.asyncio
    async def test_suspended_studio_not_found(self, client, db):
        studio = await make_studio(db, status=StudioStatus.SUSPENDED.value)

        response = await client.get(f"/api/studios/{studio.id}")

        assert response.status_code == 404
        assert response.json() == {"error": "Studio not found"}


class TestManageStudios:
    @pytest.mark.asyncio
    async def test_create_normalizes_slug(self, client):
        response = await client.post(
            "/api/studios",
            json={"name": " Lotus Studio ", "slug": " Lotus-Amsterdam ", "timezone": "Europe/Amsterdam"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["slug"] == "lotus-amsterdam"
        assert data["name"] == "Lotus Studio"
        assert data["requires_approval"] is False
        assert data["auto_approve_returning"] is True
        assert data["status"] == "active"

    @pytest.mark.asyncio
    async def test_slug_conflict(self, client, db):
        await make_studio(db, slug="lotus")

        response = await client.post(
            "/api/studios", json={"name": "Other", "slug": "LOTUS", "timezone": "UTC"}
        )

        assert response.status_code == 409
        assert response.json() == {"error": "A studio with this slug already exists"}

    @pytest.mark.asyncio
    async def test_slug_taken_between_check_and_insert(self, client, db, monkeypatch):
        await make_studio(db, slug="lotus")

        async def slug_free(self, slug):
            return False

        monkeypatch.setattr(StudioRepository, "slug_exists", slug_free)

        response = await client.post(
            "/api/studios", json={"name": "Other", "slug": "lotus", "timezone": "UTC"}
        )

        assert response.status_code == 409
        assert response.json() == {"error": "A studio with this slug already exists"}

    @pytest.mark.asyncio
    async def test_slug_without_letters_or_digits(self, client):
        response = await client.post(
            "/api/studios", json={"name": "Other", "slug": "!!!", "timezone": "UTC"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Slug must contain letters or digits"}

    @pytest.mark.asyncio
    async def test_update_turns_on_approval(self, client, db):
        studio = await make_studio(db)
        session = await make_session(db, studio)

        response = await client.put(
            f"/api/studios/{studio.id}",
            json={
                "name": "Lotus Studio",
                "timezone": "Europe/Amsterdam",
                "requires_approval": True,
                "auto_approve_returning": False,
            },
        )
        assert response.status_code == 204

        booking = await client.post(
            "/api/bookings",
            json={
                "session_id": str(session.id),
                "first_name": "Jane",
                "last_name": "Doe",
                "email": "jane@example.com",
            },
        )
        assert booking.json()["status"] == "pending"

    @pytest.mark.asyncio
    async def test_update_suspended_studio(self, client, db):
        studio = await make_studio(db, status=StudioStatus.SUSPENDED.value)

        response = await client.put(
            f"/api/studios/{studio.id}",
            json={
                "name": "Lotus",
                "timezone": "UTC",
                "requires_approval": False,
                "auto_approve_returning": True,
            },
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_is_soft(self, client, db):
        studio = await make_studio(db)

        response = await client.delete(f"/api/studios/{studio.id}")

        assert response.status_code == 204
        assert (await client.get("/api/studios")).json() == []
        assert (await client.get(f"/api/studios/{studio.id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

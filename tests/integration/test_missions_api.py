"""HTTP surface: routing, auth, status codes and camelCase payloads."""

import pytest

from sizemissions.auth.jwt import create_access_token
from sizemissions.missions import mission_service
from sizemissions.missions.exceptions import StorageFailureError


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_ready_without_redis(self, client):
        response = await client.get("/ready")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert body["checks"] == {"database": "ok", "redis": "disabled"}

    @pytest.mark.asyncio
    async def test_version(self, client):
        response = await client.get("/version")
        assert response.status_code == 200
        assert "version" in response.json()


class TestAuth:
    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get("/api/v1/missions")
        assert response.status_code in (401, 403)

    @pytest.mark.asyncio
    async def test_garbage_token(self, client):
        response = await client.get("/api/v1/missions", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_profile(self, client):
        token = create_access_token("00000000-0000-0000-0000-000000000000")
        response = await client.get("/api/v1/missions", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 404
        assert response.json()["detail"] == "Profile not found"

    @pytest.mark.asyncio
    async def test_levels_are_public(self, client):
        response = await client.get("/api/v1/levels")
        assert response.status_code == 200
        levels = response.json()["levels"]
        assert levels[0] == {"level": 1, "title": "Tape Rookie", "xp": 0}
        assert len(levels) == 10


class TestMissionRoutes:
    @pytest.mark.asyncio
    async def test_list_missions(self, authed_client):
        response = await authed_client.get("/api/v1/missions", params={"locale": "pl"})
        assert response.status_code == 200
        body = response.json()
        assert body["locale"] == "pl"
        assert len(body["missions"]) == 30
        first = body["missions"][0]
        assert first["code"] == "ROZRUCH_7_7"
        assert first["cooldownDays"] == 0
        assert first["translation"]["title"] == "Rozruch 7/7"
        assert first["userState"]["status"] == "available"

    @pytest.mark.asyncio
    async def test_unsupported_locale_falls_back_to_profile(self, authed_client):
        response = await authed_client.get("/api/v1/missions", params={"locale": "xx"})
        assert response.json()["locale"] == "en"

    @pytest.mark.asyncio
    async def test_get_unknown_mission(self, authed_client):
        response = await authed_client.get("/api/v1/missions/NOPE")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_start_then_start_again(self, authed_client):
        first = await authed_client.post("/api/v1/missions/SIX_PILLARS/start")
        assert first.status_code == 200
        assert first.json()["mission"]["status"] == "in_progress"
        assert first.json()["mission"]["userState"]["startedAt"] is not None

        second = await authed_client.post("/api/v1/missions/SIX_PILLARS/start")
        assert second.status_code == 200
        assert second.json()["mission"]["status"] == "in_progress"

    @pytest.mark.asyncio
    async def test_start_unknown_mission(self, authed_client):
        response = await authed_client.post("/api/v1/missions/NOPE/start")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_claim_not_claimable(self, authed_client):
        response = await authed_client.post("/api/v1/missions/ROZRUCH_7_7/claim")
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_claim_unknown_mission(self, authed_client):
        response = await authed_client.post("/api/v1/missions/NOPE/claim")
        assert response.status_code == 404


class TestEventRoute:
    @pytest.mark.asyncio
    async def test_event_advances_missions(self, authed_client):
        response = await authed_client.post("/api/v1/missions/events", json={
            "type": "ITEM_CREATED",
            "payload": {"source": "trusted_circle", "category": "tops", "uniqueHash": "friend-1"},
        })
        assert response.status_code == 200
        assert response.json() == {"ok": True}

        mission = (await authed_client.get("/api/v1/missions/SECRET_HELPER")).json()["mission"]
        assert mission["status"] == "claimable"
        assert mission["userState"]["progress"]["members"] == 1

        claim = await authed_client.post("/api/v1/missions/SECRET_HELPER/claim")
        assert claim.status_code == 200
        body = claim.json()
        assert body["mission"]["status"] == "cooldown"
        assert body["mission"]["userState"]["nextEligibleAt"] is not None
        assert body["progression"]["xpAwarded"] == 100
        assert body["progression"]["xp"] == 100
        assert body["progression"]["freezeTokensAwarded"] == 0

        again = await authed_client.post("/api/v1/missions/SECRET_HELPER/claim")
        assert again.status_code == 409

    @pytest.mark.asyncio
    async def test_unknown_event_type(self, authed_client):
        response = await authed_client.post("/api/v1/missions/events", json={"type": "ITEM_DELETED"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_payload(self, authed_client):
        response = await authed_client.post("/api/v1/missions/events", json={"type": "ITEM_CREATED"})
        assert response.status_code == 400

        progression = (await authed_client.get("/api/v1/users/me/progression")).json()
        assert progression["currentStreak"] == 0

    @pytest.mark.asyncio
    async def test_future_created_at(self, authed_client):
        response = await authed_client.post("/api/v1/missions/events", json={
            "type": "ITEM_CREATED",
            "payload": {"createdAt": "2999-01-01T00:00:00Z"},
        })
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_payload(self, authed_client):
        response = await authed_client.post("/api/v1/missions/events", json={
            "type": "ITEM_CREATED",
            "payload": {"fieldCount": -3},
        })
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_storage_failure_is_503(self, authed_client, monkeypatch):
        async def failing_process(*args, **kwargs):
            raise StorageFailureError("Mission storage failed; no changes were applied")

        monkeypatch.setattr(mission_service, "process_mission_event", failing_process)
        response = await authed_client.post("/api/v1/missions/events", json={
            "type": "ITEM_CREATED",
            "payload": {"category": "tops"},
        })
        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_missing_type(self, authed_client):
        response = await authed_client.post("/api/v1/missions/events", json={"payload": {}})
        assert response.status_code == 422
        assert response.json()["detail"] == "Validation error"


class TestProgressionRoutes:
    @pytest.mark.asyncio
    async def test_fresh_progression(self, authed_client):
        response = await authed_client.get("/api/v1/users/me/progression")
        assert response.status_code == 200
        body = response.json()
        assert body["xp"] == 0
        assert body["level"] == 1
        assert body["title"] == "Tape Rookie"
        assert body["nextLevelXp"] == 150
        assert body["freezesAvailable"] == 0

    @pytest.mark.asyncio
    async def test_rewards_history(self, authed_client):
        await authed_client.post("/api/v1/missions/events", json={
            "type": "ITEM_CREATED",
            "payload": {"source": "trusted_circle", "uniqueHash": "friend-2"},
        })
        await authed_client.post("/api/v1/missions/SECRET_HELPER/claim")

        response = await authed_client.get("/api/v1/users/me/rewards", params={"per_page": 500})
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["perPage"] == 100
        assert body["rewards"][0]["missionCode"] == "SECRET_HELPER"
        assert body["rewards"][0]["xp"] == 100

        progression = (await authed_client.get("/api/v1/users/me/progression")).json()
        assert progression["xp"] == 100
        assert progression["currentStreak"] == 1

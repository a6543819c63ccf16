"""
API Server Tests - REST API 테스트
"""
import pytest
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from app.server import _log_line, create_app
from database.models import PlayerCreate


@pytest.fixture
def client(seeded_service, session_store):
    return TestClient(create_app(service=seeded_service, session_store=session_store))


@pytest.fixture
def admin(client, admin_password):
    """관리자 인증 헤더"""
    token = client.post("/api/admin/auth", json={"password": admin_password}).json()["access_token"]
    client.cookies.clear()
    return {"Authorization": f"Bearer {token}"}


def find_player(client, name):
    return next(p for p in client.get("/api/players").json() if p["name"] == name)


class TestPublicEndpoints:
    """공개 API"""

    def test_list_players(self, client):
        response = client.get("/api/players")
        assert response.status_code == 200
        players = response.json()
        assert len(players) == 12
        points = [p["points"] for p in players]
        assert points == sorted(points, reverse=True)

    def test_get_player_and_score(self, client):
        velfair = find_player(client, "Velfair")
        response = client.get(f"/api/players/{velfair['id']}/score")
        assert response.status_code == 200
        assert response.json() == {"points": 320, "title": "Elite", "overall_tier": "S"}

    def test_player_not_found(self, client):
        response = client.get("/api/players/does-not-exist")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_tier_list(self, client):
        response = client.get("/api/tiers/skywars")
        assert response.status_code == 200
        data = response.json()
        assert [t["level"] for t in data["tiers"]] == ["S", "A", "B", "C", "D"]

        s_tier = data["tiers"][0]
        assert s_tier["key"] == "S Tier"
        assert s_tier["version"] == 0
        codes = [p["tier"] for p in s_tier["players"]]
        assert codes[:4] == ["HT1", "HT1", "HT1", "HT1"]
        assert codes[-2:] == ["MIDT1", "LT1"]
        # EfrazBR은 skywars NR
        listed = [p["name"] for t in data["tiers"] for p in t["players"]]
        assert "EfrazBR" not in listed

    def test_tier_list_overall(self, client):
        data = client.get("/api/tiers/overall").json()
        listed = [p["name"] for t in data["tiers"] for p in t["players"]]
        assert len(listed) == 12

    def test_unknown_mode(self, client):
        assert client.get("/api/tiers/bridge").status_code == 404

    def test_leaderboard(self, client):
        entries = client.get("/api/leaderboard").json()
        assert entries[0]["rank"] == 1
        assert entries[0]["points"] == 320

    def test_meta(self, client):
        meta = client.get("/api/meta").json()
        assert meta["game_modes"]["skywars"]["abbr"] == "SW"
        assert meta["tier_codes"][0] == {"code": "HT1", "name": "HighS", "points": 100}
        assert meta["titles"][-1] == {"title": "Rookie", "min_points": 0}
        assert meta["overall_policy"] == "best_mode"

    def test_status(self, client):
        status = client.get("/api/status").json()
        assert status["players"] == 12
        assert status["data_source"] == "memory"

    def test_get_order_default(self, client):
        response = client.get("/api/orders/skywars/S%20Tier")
        assert response.status_code == 200
        assert response.json()["player_ids"] == []
        assert response.json()["version"] == 0


class TestAdminEndpoints:
    """관리자 API"""

    def test_requires_auth(self, client):
        client.cookies.clear()
        response = client.post("/api/players", json={"name": "Alex"})
        assert response.status_code == 401

    def test_create_player(self, client, admin):
        response = client.post(
            "/api/players",
            json={"name": "Alex", "skywars_tier": "ht2"},
            headers=admin,
        )
        assert response.status_code == 201
        assert response.json()["tiers"]["skywars"] == "HT2"
        assert response.json()["points"] == 70

    def test_create_duplicate(self, client, admin):
        response = client.post("/api/players", json={"name": "velfair"}, headers=admin)
        assert response.status_code == 409
        assert response.json()["error"] == "duplicate_name"

    def test_create_invalid_tier(self, client, admin):
        response = client.post("/api/players", json={"name": "Alex", "uhc_tier": "HT9"}, headers=admin)
        assert response.status_code == 422

    def test_change_tier(self, client, admin):
        efraz = find_player(client, "EfrazBR")
        response = client.patch(
            f"/api/players/{efraz['id']}/tier",
            json={"gameMode": "skywars", "tier": "LT1"},
            headers=admin,
        )
        assert response.status_code == 200
        assert response.json()["tiers"]["skywars"] == "LT1"

    def test_change_overall_tier_rejected(self, client, admin):
        efraz = find_player(client, "EfrazBR")
        response = client.patch(
            f"/api/players/{efraz['id']}/tier",
            json={"gameMode": "overall", "tier": "HT1"},
            headers=admin,
        )
        assert response.status_code == 422

    def test_move(self, client, admin):
        efraz = find_player(client, "EfrazBR")
        response = client.post(
            f"/api/players/{efraz['id']}/move",
            json={"gameMode": "uhc", "tierLevel": "C Tier"},
            headers=admin,
        )
        assert response.status_code == 200
        assert response.json()["tiers"]["uhc"] == "HT4"

    def test_rename(self, client, admin):
        efraz = find_player(client, "EfrazBR")
        response = client.patch(f"/api/players/{efraz['id']}", json={"name": "Efraz"}, headers=admin)
        assert response.status_code == 200
        assert response.json()["name"] == "Efraz"

    def test_empty_update(self, client, admin):
        efraz = find_player(client, "EfrazBR")
        assert client.patch(f"/api/players/{efraz['id']}", json={}, headers=admin).status_code == 400

    def test_reorder_and_conflict(self, client, admin):
        s_tier = client.get("/api/tiers/skywars").json()["tiers"][0]
        ids = [p["id"] for p in s_tier["players"]]
        reversed_ids = list(reversed(ids))

        response = client.put(
            "/api/orders/skywars/S",
            json={"playerIds": reversed_ids, "expectedVersion": 0},
            headers=admin,
        )
        assert response.status_code == 200
        assert response.json()["version"] == 1

        s_tier = client.get("/api/tiers/skywars").json()["tiers"][0]
        assert [p["id"] for p in s_tier["players"]] == reversed_ids
        assert [p["position"] for p in s_tier["players"]] == list(range(1, len(ids) + 1))

        stale = client.put(
            "/api/orders/skywars/S",
            json={"playerIds": ids, "expectedVersion": 0},
            headers=admin,
        )
        assert stale.status_code == 409
        assert stale.json()["error"] == "conflict"
        assert stale.json()["detail"]["current_version"] == 1

    def test_reorder_validation(self, client, admin):
        efraz = find_player(client, "EfrazBR")
        response = client.put(
            "/api/orders/skywars/S",
            json={"playerIds": [efraz["id"]]},
            headers=admin,
        )
        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation"
        assert body["detail"]["reason"] == "not_in_tier"

    def test_reset_order(self, client, admin):
        ids = [p["id"] for p in client.get("/api/tiers/skywars").json()["tiers"][0]["players"]]
        client.put("/api/orders/skywars/S", json={"playerIds": ids[:1]}, headers=admin)
        response = client.delete("/api/orders/skywars/S", headers=admin)
        assert response.status_code == 200
        assert response.json()["player_ids"] == []
        assert response.json()["version"] == 2

    def test_delete_player_cascades(self, client, admin):
        velfair = find_player(client, "Velfair")
        client.put("/api/orders/skywars/S", json={"playerIds": [velfair["id"]]}, headers=admin)

        response = client.delete(f"/api/players/{velfair['id']}", headers=admin)
        assert response.status_code == 200
        assert response.json()["orders_updated"] == 1

        order = client.get("/api/orders/skywars/S").json()
        assert velfair["id"] not in order["player_ids"]
        assert client.get(f"/api/players/{velfair['id']}").status_code == 404


class TestErrorHandling:
    """오류 응답"""

    def test_storage_failure_is_500(self, seeded_service, session_store):
        seeded_service.repository.get_all_players = AsyncMock(side_effect=RuntimeError("db down"))
        client = TestClient(
            create_app(service=seeded_service, session_store=session_store),
            raise_server_exceptions=False,
        )
        response = client.get("/api/players")
        assert response.status_code == 500
        assert response.json()["error"] == "internal"


class TestRequestLog:
    """요청 로그 형식"""

    def test_short_line(self):
        assert _log_line("GET", "/api/players", 200, 3, None) == "GET /api/players 200 in 3ms"

    def test_body_and_truncation(self):
        line = _log_line("PUT", "/api/orders/skywars/S", 200, 12, b'{"playerIds": ["' + b"x" * 100 + b'"]}')
        assert line.startswith("PUT /api/orders/skywars/S 200 in 12ms :: ")
        assert len(line) == 80
        assert line.endswith("…")

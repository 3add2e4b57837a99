"""
Server Tests - 헬스체크, 인덱스, 에러 응답, 설정
"""
import pytest

from pr_app import server
from pr_app.config import AppSettings, DEFAULT_JWT_SECRET, validate_settings
from pr_app.errors import Conflict, NotFound, invalid_id


class TestServerRoutes:
    """/health, /api, 404"""

    def test_health(self, client, monkeypatch):
        monkeypatch.setattr(server, "ping", lambda: True)
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["database"] == "connected"
        assert body["environment"] == "test"

    def test_health_reports_database_down(self, client, monkeypatch):
        monkeypatch.setattr(server, "ping", lambda: False)
        assert client.get("/health").json()["database"] == "disconnected"

    def test_api_index(self, client):
        body = client.get("/api").json()
        assert body["endpoints"]["clubs"] == "/api/clubs"
        assert body["endpoints"]["messages"] == "/api/messages"

    def test_unknown_route(self, client):
        response = client.get("/api/does-not-exist")
        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "NOT_FOUND"
        assert "/api/does-not-exist" in error["message"]

    def test_malformed_json_body(self, client, users):
        response = client.post(
            "/api/auth/login",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_indexes_created_on_startup(self, client, db):
        club_indexes = db.clubs.index_information()
        name_index = next(info for info in club_indexes.values() if info["key"] == [("name", 1)])
        assert name_index.get("unique") is True


class TestErrors:
    """에러 envelope"""

    def test_to_dict(self):
        error = NotFound("CLUB_NOT_FOUND", "Club not found")
        assert error.status_code == 404
        assert error.to_dict() == {"success": False, "error": {"code": "CLUB_NOT_FOUND", "message": "Club not found"}}

    def test_explicit_status(self):
        assert Conflict("DUPLICATE_ENTRY", "dup", status_code=409).status_code == 409
        assert Conflict("ALREADY_MEMBER", "member").status_code == 400

    def test_field(self):
        assert invalid_id("clubId").to_dict()["error"]["field"] == "clubId"


class TestSettings:
    """설정 / 운영 환경 검사"""

    def test_defaults(self):
        settings = AppSettings(_env_file=None)
        assert settings.JWT_ALGORITHM == "HS256"
        assert settings.JWT_EXPIRE_DAYS == 45

    def test_production_refuses_default_secret(self):
        settings = AppSettings(_env_file=None, ENV="production", JWT_SECRET_KEY=DEFAULT_JWT_SECRET)
        with pytest.raises(RuntimeError):
            validate_settings(settings)

    def test_production_with_secret(self):
        settings = AppSettings(_env_file=None, ENV="production", JWT_SECRET_KEY="a-long-random-secret")
        validate_settings(settings)

    def test_development_allows_default_secret(self):
        validate_settings(AppSettings(_env_file=None, ENV="development", JWT_SECRET_KEY=DEFAULT_JWT_SECRET))

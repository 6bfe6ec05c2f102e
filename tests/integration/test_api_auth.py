"""Integration tests for /auth routes and the error handler."""
from fastapi.testclient import TestClient

from chronos.auth.session import get_session_email
from chronos.auth.tokens import verify_collector_token
from chronos.config import get_settings


class TestIssueToken:
    def test_requires_session(self, client):
        assert client.post("/auth/token").status_code == 401

    def test_unknown_user(self, app):
        app.dependency_overrides[get_session_email] = lambda: "ghost@example.com"
        with TestClient(app) as c:
            assert c.post("/auth/token").status_code == 404

    def test_issues_collector_token(self, signed_in_client, user):
        resp = signed_in_client.post("/auth/token")
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"]
        claims = verify_collector_token(f"Bearer {body['token']}", get_settings().jwt_secret)
        assert claims.user_id == user.id
        assert claims.email == user.email

    def test_issued_token_works_on_sync(self, signed_in_client):
        token = signed_in_client.post("/auth/token").json()["token"]
        resp = signed_in_client.post(
            "/sync",
            json={"logs": [{"timestamp": "2024-01-01T10:00:00Z", "type": "keyboard", "data": {}}]},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert resp.status_code == 200
        assert resp.json()["saved"] == 1


class TestMe:
    def test_me(self, signed_in_client, user):
        resp = signed_in_client.get("/auth/me")
        assert resp.status_code == 200
        assert resp.json()["email"] == user.email
        assert resp.json()["provider"] == "google"


class TestErrorHandler:
    def test_unexpected_error_is_generic_500(self, app):
        def broken():
            raise RuntimeError("database password is hunter2")

        app.add_api_route("/boom", broken, methods=["GET"])
        with TestClient(app, raise_server_exceptions=False) as c:
            resp = c.get("/boom")
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Internal server error"}
        assert "hunter2" not in resp.text

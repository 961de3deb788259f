"""
Integration tests for JWT token endpoints.
"""

import pytest


@pytest.mark.integration
class TestTokenObtain:
    def test_obtain_token(self, api_client, moderator):
        response = api_client.post(
            "/api/auth/token/",
            {"email": "moderator@example.com", "password": "modpass123"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["user_id"] == moderator.user_id
        assert response.data["role"] == "Moderator"
        assert "access" in response.data
        assert "refresh" in response.data

    def test_wrong_password(self, api_client, moderator):
        response = api_client.post(
            "/api/auth/token/",
            {"email": "moderator@example.com", "password": "nope"},
            format="json",
        )

        assert response.status_code == 401
        assert response.data["errors"] == ["Invalid email or password."]

    def test_token_grants_flag_access(self, api_client, moderator):
        token = api_client.post(
            "/api/auth/token/",
            {"email": "moderator@example.com", "password": "modpass123"},
            format="json",
        ).data["access"]

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        assert api_client.get("/admin/flags").status_code == 200


@pytest.mark.integration
class TestTokenRefresh:
    def _refresh_token(self, api_client):
        return api_client.post(
            "/api/auth/token/",
            {"email": "moderator@example.com", "password": "modpass123"},
            format="json",
        ).data["refresh"]

    def test_refresh_rotates(self, api_client, moderator):
        refresh = self._refresh_token(api_client)

        response = api_client.post(
            "/api/auth/token/refresh/", {"refresh": refresh}, format="json"
        )
        assert response.status_code == 200
        assert response.data["refresh"] != refresh

        reused = api_client.post(
            "/api/auth/token/refresh/", {"refresh": refresh}, format="json"
        )
        assert reused.status_code == 401

    def test_logout_revokes(self, api_client, moderator):
        refresh = self._refresh_token(api_client)

        response = api_client.post(
            "/api/auth/token/refresh/",
            {"refresh": refresh, "logout": True},
            format="json",
        )
        assert response.status_code == 200

        again = api_client.post(
            "/api/auth/token/refresh/", {"refresh": refresh}, format="json"
        )
        assert again.status_code == 401

    def test_missing_refresh_token(self, api_client):
        response = api_client.post("/api/auth/token/refresh/", {}, format="json")

        assert response.status_code == 400

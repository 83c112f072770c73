"""
Periferia Social Backend — API Endpoint Tests
==============================================

What:  End-to-end tests through HTTP: routing, bearer auth, status codes,
       camelCase payloads and the {"message": ...} error envelope.
How:   HTTPX AsyncClient + ASGITransport against an app bound to SQLite.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from periferia_social.main import create_app
from periferia_social.services.auth_service import INVALID_CREDENTIALS_MESSAGE


class TestAuthEndpoints:

    @pytest.mark.asyncio
    async def test_login_then_profile_returns_same_user(self, test_client, create_user, login):
        juan = await create_user("juanp", email="juan@example.com")
        headers = await login("juan@example.com")

        response = await test_client.get("/api/users/me", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body == {
            "id": juan.id,
            "firstName": "Juanp",
            "lastName": "Tester",
            "alias": "juanp",
            "birthDate": "1990-01-01",
            "email": "juan@example.com",
        }
        assert "passwordHash" not in body

    @pytest.mark.asyncio
    async def test_login_missing_fields_is_400(self, test_client):
        response = await test_client.post("/api/auth/login", json={"email": "juan@example.com"})

        assert response.status_code == 400
        assert response.json() == {"message": "Email and password are required"}

    @pytest.mark.asyncio
    async def test_bad_credentials_same_response_for_unknown_email(self, test_client, create_user):
        await create_user("juanp", email="juan@example.com")

        wrong_password = await test_client.post(
            "/api/auth/login", json={"email": "juan@example.com", "password": "nope"}
        )
        unknown_email = await test_client.post(
            "/api/auth/login", json={"email": "ghost@example.com", "password": "123456"}
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {"message": INVALID_CREDENTIALS_MESSAGE}

    @pytest.mark.asyncio
    async def test_change_password_flow(self, test_client, create_user, login):
        await create_user("juanp", email="juan@example.com")
        headers = await login("juan@example.com")

        rejected = await test_client.post(
            "/api/auth/change-password",
            json={"currentPassword": "wrong", "newPassword": "nueva"},
            headers=headers,
        )
        assert rejected.status_code == 400
        # Wrong current password changed nothing: the old one still works
        await login("juan@example.com", "123456")

        accepted = await test_client.post(
            "/api/auth/change-password",
            json={"currentPassword": "123456", "newPassword": "nueva"},
            headers=headers,
        )
        assert accepted.status_code == 200
        assert "message" in accepted.json()

        old = await test_client.post(
            "/api/auth/login", json={"email": "juan@example.com", "password": "123456"}
        )
        assert old.status_code == 401
        await login("juan@example.com", "nueva")

    @pytest.mark.asyncio
    async def test_change_password_missing_field_is_400(self, test_client, create_user, login):
        await create_user("juanp", email="juan@example.com")
        headers = await login("juan@example.com")

        response = await test_client.post(
            "/api/auth/change-password", json={"currentPassword": "123456"}, headers=headers
        )

        assert response.status_code == 400


class TestBearerAuthentication:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/users/me"),
            ("GET", "/api/posts"),
            ("POST", "/api/posts"),
            ("PUT", "/api/posts/1"),
            ("DELETE", "/api/posts/1"),
            ("POST", "/api/posts/1/like"),
            ("POST", "/api/auth/change-password"),
        ],
    )
    async def test_routes_require_token(self, test_client, method, path):
        response = await test_client.request(method, path, json={})

        assert response.status_code == 401
        assert response.json() == {"message": "Token not provided"}

    @pytest.mark.asyncio
    async def test_invalid_token_is_401(self, test_client):
        response = await test_client.get(
            "/api/posts", headers={"Authorization": "Bearer not-a-real-token"}
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid or expired token"}

    @pytest.mark.asyncio
    async def test_non_bearer_scheme_is_401(self, test_client):
        response = await test_client.get("/api/posts", headers={"Authorization": "Basic abc"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_for_deleted_user_profile_is_404(self, test_client):
        from periferia_social.services.token_service import token_service

        headers = {"Authorization": f"Bearer {token_service.issue(987654)}"}
        response = await test_client.get("/api/users/me", headers=headers)

        assert response.status_code == 404
        assert response.json() == {"message": "User not found"}


class TestPostEndpoints:

    @pytest.mark.asyncio
    async def test_feed_like_scenario(self, test_client, create_user, login):
        """juanp posts "Hola", it shows in the feed, one like counts, a second is rejected."""
        await create_user("juanp", email="juan@example.com")
        headers = await login("juan@example.com")

        created = await test_client.post("/api/posts", json={"message": "Hola"}, headers=headers)
        assert created.status_code == 201
        post_id = created.json()["id"]

        feed = (await test_client.get("/api/posts", headers=headers)).json()
        assert len(feed) == 1
        assert feed[0]["message"] == "Hola"
        assert feed[0]["userAlias"] == "juanp"
        assert feed[0]["likesCount"] == 0
        assert "createdAt" in feed[0]

        first_like = await test_client.post(f"/api/posts/{post_id}/like", headers=headers)
        assert first_like.status_code == 200

        feed = (await test_client.get("/api/posts", headers=headers)).json()
        assert feed[0]["likesCount"] == 1

        second_like = await test_client.post(f"/api/posts/{post_id}/like", headers=headers)
        assert second_like.status_code == 400
        assert second_like.json() == {"message": "You have already liked this post"}

        feed = (await test_client.get("/api/posts", headers=headers)).json()
        assert feed[0]["likesCount"] == 1

    @pytest.mark.asyncio
    async def test_other_users_see_the_post(self, test_client, create_user, login):
        await create_user("juanp", email="juan@example.com")
        await create_user("mariag", email="maria@example.com")
        juan = await login("juan@example.com")
        maria = await login("maria@example.com")

        await test_client.post("/api/posts", json={"message": "Hola"}, headers=juan)
        feed = (await test_client.get("/api/posts", headers=maria)).json()

        assert [(p["message"], p["userAlias"], p["likesCount"]) for p in feed] == [("Hola", "juanp", 0)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"message": ""}, {"message": "   "}])
    async def test_create_blank_message_is_400(self, test_client, create_user, login, body):
        await create_user("juanp", email="juan@example.com")
        headers = await login("juan@example.com")

        response = await test_client.post("/api/posts", json=body, headers=headers)

        assert response.status_code == 400
        assert response.json() == {"message": "Message is required"}

    @pytest.mark.asyncio
    async def test_owner_can_edit_and_delete(self, test_client, create_user, login):
        await create_user("juanp", email="juan@example.com")
        headers = await login("juan@example.com")
        post_id = (await test_client.post("/api/posts", json={"message": "v1"}, headers=headers)).json()["id"]

        edited = await test_client.put(f"/api/posts/{post_id}", json={"message": "v2"}, headers=headers)
        assert edited.status_code == 200
        assert edited.json() == {"message": "Post updated"}
        feed = (await test_client.get("/api/posts", headers=headers)).json()
        assert feed[0]["message"] == "v2"

        deleted = await test_client.delete(f"/api/posts/{post_id}", headers=headers)
        assert deleted.status_code == 204
        assert deleted.content == b""
        assert (await test_client.get("/api/posts", headers=headers)).json() == []

    @pytest.mark.asyncio
    async def test_non_owner_gets_403(self, test_client, create_user, login):
        await create_user("juanp", email="juan@example.com")
        await create_user("mariag", email="maria@example.com")
        juan = await login("juan@example.com")
        maria = await login("maria@example.com")
        post_id = (await test_client.post("/api/posts", json={"message": "mio"}, headers=juan)).json()["id"]

        edit = await test_client.put(f"/api/posts/{post_id}", json={"message": "robado"}, headers=maria)
        delete = await test_client.delete(f"/api/posts/{post_id}", headers=maria)

        assert edit.status_code == 403
        assert delete.status_code == 403
        feed = (await test_client.get("/api/posts", headers=juan)).json()
        assert feed[0]["message"] == "mio"

    @pytest.mark.asyncio
    async def test_missing_post_is_404(self, test_client, create_user, login):
        await create_user("juanp", email="juan@example.com")
        headers = await login("juan@example.com")

        assert (await test_client.put("/api/posts/999", json={"message": "x"}, headers=headers)).status_code == 404
        assert (await test_client.delete("/api/posts/999", headers=headers)).status_code == 404
        like = await test_client.post("/api/posts/999/like", headers=headers)
        assert like.status_code == 404
        assert like.json() == {"message": "Post not found"}


class TestGatewayBehaviour:

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/api/posts", headers={"X-Request-ID": "abc12345"})

        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, test_client):
        response = await test_client.post(
            "/api/auth/login",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid request"}

    @pytest.mark.asyncio
    async def test_unknown_route_uses_envelope(self, test_client):
        response = await test_client.get("/api/nothing-here")

        assert response.status_code == 404
        assert set(response.json()) == {"message"}

    @pytest.mark.asyncio
    async def test_unexpected_error_hidden_behind_generic_500(self, database):
        app = create_app(database=database)

        @app.get("/boom")
        async def boom():
            raise RuntimeError("secret connection string in here")

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/boom")

        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error"}

    @pytest.mark.asyncio
    async def test_health_reports_database(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert "uptimeSeconds" in body


class TestRobustness:

    @pytest.mark.asyncio
    async def test_failed_commit_is_reported_and_nothing_persisted(
        self, test_client, create_user, login, monkeypatch
    ):
        await create_user("juanp", email="juan@example.com")
        headers = await login("juan@example.com")

        async def failing_commit(self):
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(AsyncSession, "commit", failing_commit)
        response = await test_client.post("/api/posts", json={"message": "Hola"}, headers=headers)
        monkeypatch.undo()

        assert response.status_code == 500
        assert set(response.json()) == {"message"}
        assert (await test_client.get("/api/posts", headers=headers)).json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("post_id", ["99999999999999999999", "2147483648", "0"])
    async def test_post_id_out_of_range_is_400(self, test_client, create_user, login, post_id):
        await create_user("juanp", email="juan@example.com")
        headers = await login("juan@example.com")

        responses = [
            await test_client.put(f"/api/posts/{post_id}", json={"message": "x"}, headers=headers),
            await test_client.delete(f"/api/posts/{post_id}", headers=headers),
            await test_client.post(f"/api/posts/{post_id}/like", headers=headers),
        ]

        for response in responses:
            assert response.status_code == 400
            assert response.json() == {"message": "Invalid request"}

    @pytest.mark.asyncio
    async def test_new_password_with_nul_byte_is_400(self, test_client, create_user, login):
        await create_user("juanp", email="juan@example.com")
        headers = await login("juan@example.com")

        response = await test_client.post(
            "/api/auth/change-password",
            json={"currentPassword": "123456", "newPassword": "abc\u0000def"},
            headers=headers,
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Password contains unsupported characters"}
        await login("juan@example.com", "123456")

    @pytest.mark.asyncio
    async def test_created_at_identical_in_create_response_and_feed(self, test_client, create_user, login):
        await create_user("juanp", email="juan@example.com")
        headers = await login("juan@example.com")

        created = (await test_client.post("/api/posts", json={"message": "Hola"}, headers=headers)).json()
        feed = (await test_client.get("/api/posts", headers=headers)).json()

        assert feed[0]["createdAt"] == created["createdAt"]
        assert created["createdAt"].endswith("Z")

"""
API tests for registration, login/logout, token refresh and the error envelope.
"""
import pytest

from app.auth import create_refresh_token
from app.models.user import User
from app.services.media import MediaUploadError


@pytest.fixture
def register(client, png_file):
    def _register(user_name="carol", email="carol@example.com", avatar=True, **extra):
        data = {
            "full_name": "Carol Doe",
            "email": email,
            "user_name": user_name,
            "password": extra.pop("password", "secret123"),
        }
        files = {"avatar": png_file} if avatar else {}
        files.update(extra.pop("files", {}))
        return client.post("/api/auth/register", data=data, files=files or None)

    return _register


@pytest.mark.api
class TestRegister:

    def test_register_stores_avatar(self, register, media_host):
        response = register(user_name="Carol")

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["code"] == 201
        user = body["data"]
        assert user["user_name"] == "carol"
        assert user["avatar_url"].startswith("/media/image/")
        assert user["cover_image_url"] == ""
        assert "password" not in user
        assert len(list((media_host.root / "image").iterdir())) == 1

    def test_register_with_cover_image(self, register, png_file):
        response = register(files={"cover_image": ("c.png", png_file[1], "image/png")})

        assert response.status_code == 201
        assert response.json()["data"]["cover_image_url"].startswith("/media/image/")

    def test_failed_cover_upload_removes_stored_avatar(self, register, png_file, media_host, monkeypatch):
        real_store = media_host.store
        calls = {"n": 0}

        def store_avatar_only(path, content_type=None):
            calls["n"] += 1
            if calls["n"] == 2:
                path.unlink()
                raise MediaUploadError("host down")
            return real_store(path, content_type)

        monkeypatch.setattr(media_host, "store", store_avatar_only)

        response = register(files={"cover_image": ("c.png", png_file[1], "image/png")})

        assert response.status_code == 500
        assert response.json()["message"] == "Cover image upload failed"
        assert list((media_host.root / "image").iterdir()) == []

    def test_duplicate_user_is_conflict(self, register, alice):
        response = register(user_name="alice", email="new@example.com")

        assert response.status_code == 409
        assert response.json() == {
            "code": 409,
            "message": "User with this email or username already exists",
            "success": False,
        }

    def test_missing_avatar(self, register):
        response = register(avatar=False)
        assert response.status_code == 400
        assert response.json()["message"] == "Avatar is required"

    def test_missing_fields(self, client):
        response = client.post("/api/auth/register", data={"email": "x@example.com"})
        assert response.status_code == 400
        assert response.json()["message"] == "All fields are required"

    def test_short_password(self, register):
        response = register(password="123")
        assert response.status_code == 400


@pytest.mark.api
class TestLogin:

    def test_login_with_email_sets_cookies(self, client, alice, password):
        response = client.post("/api/auth/login", json={"email": "ALICE@example.com", "password": password})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["token_type"] == "bearer"
        assert data["user"]["id"] == alice.id
        assert response.cookies.get("access_token") == data["access_token"]
        assert response.cookies.get("refresh_token") == data["refresh_token"]

    def test_cookie_authenticates_requests(self, client, alice, password):
        client.post("/api/auth/login", json={"user_name": "alice", "password": password})

        response = client.get("/api/users/me")

        assert response.status_code == 200
        assert response.json()["data"]["user_name"] == "alice"

    def test_wrong_password(self, client, alice):
        response = client.post("/api/auth/login", json={"email": alice.email, "password": "nope"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    def test_missing_identifier(self, client, password):
        response = client.post("/api/auth/login", json={"password": password})
        assert response.status_code == 400

    def test_malformed_body_is_400(self, client):
        response = client.post("/api/auth/login", json={"email": "alice@example.com"})
        assert response.status_code == 400
        assert response.json()["success"] is False


@pytest.mark.api
class TestTokens:

    def test_refresh_issues_new_tokens(self, client, test_db, alice, password):
        login = client.post("/api/auth/login", json={"email": alice.email, "password": password}).json()["data"]

        response = client.post("/api/auth/refresh-token", json={"refresh_token": login["refresh_token"]})

        assert response.status_code == 200
        data = response.json()["data"]
        test_db.expire_all()
        assert test_db.get(User, alice.id).refresh_token == data["refresh_token"]
        assert client.get("/api/users/me", headers={"Authorization": f"Bearer {data['access_token']}"}).status_code == 200

    def test_refresh_token_not_on_record(self, client, alice):
        response = client.post("/api/auth/refresh-token", json={"refresh_token": create_refresh_token(alice.id)})
        assert response.status_code == 401

    def test_access_token_is_not_a_refresh_token(self, client, alice, alice_headers):
        access = alice_headers["Authorization"].split()[1]
        response = client.post("/api/auth/refresh-token", json={"refresh_token": access})
        assert response.status_code == 401

    def test_logout_revokes_refresh_token(self, client, alice, password):
        login = client.post("/api/auth/login", json={"email": alice.email, "password": password}).json()["data"]
        headers = {"Authorization": f"Bearer {login['access_token']}"}

        assert client.post("/api/auth/logout", headers=headers).status_code == 200
        response = client.post("/api/auth/refresh-token", json={"refresh_token": login["refresh_token"]})

        assert response.status_code == 401

    def test_change_password(self, client, alice, alice_headers, password):
        response = client.post(
            "/api/auth/change-password",
            json={"old_password": password, "new_password": "brand-new-pass"},
            headers=alice_headers,
        )
        assert response.status_code == 200

        old = client.post("/api/auth/login", json={"email": alice.email, "password": password})
        new = client.post("/api/auth/login", json={"email": alice.email, "password": "brand-new-pass"})
        assert old.status_code == 401
        assert new.status_code == 200

    def test_change_password_wrong_old(self, client, alice_headers):
        response = client.post(
            "/api/auth/change-password",
            json={"old_password": "wrong", "new_password": "brand-new-pass"},
            headers=alice_headers,
        )
        assert response.status_code == 400


@pytest.mark.api
class TestAuthErrors:

    def test_unauthenticated_envelope(self, client):
        response = client.get("/api/users/me")

        assert response.status_code == 401
        assert response.json() == {"code": 401, "message": "Not authenticated", "success": False}
        assert response.headers["www-authenticate"] == "Bearer"

    def test_garbage_token(self, client):
        response = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

"""Registration, login sessions and user administration."""
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from nightguard import config
from nightguard.models.enums import UserRole
from nightguard.services.auth import AuthService, ensure_default_admin
from nightguard.services.errors import NotAuthenticated, ValidationError
from nightguard.services.passwords import hash_password, verify_password

REGISTRATION = {
    "username": "newguard",
    "password": "hunter22",
    "name": "New Guard",
    "email": "newguard@example.com",
    "role": "security",
}


class TestPasswords:

    def test_hash_is_salted_and_verifiable(self):
        first = hash_password("hunter22")
        second = hash_password("hunter22")

        assert first != "hunter22"
        assert first != second
        assert verify_password("hunter22", first)
        assert not verify_password("wrong", first)


class TestRegistration:

    def test_register_signs_in(self, api):
        client = TestClient(api)

        response = client.post("/api/register", json=REGISTRATION)

        assert response.status_code == 201
        assert "password" not in response.json()
        assert client.get("/api/user").json()["username"] == "newguard"

    @pytest.mark.parametrize("role", ["manager", "admin"])
    def test_cannot_self_register_privileged_roles(self, anon_client, role):
        response = anon_client.post("/api/register", json={**REGISTRATION, "role": role})

        assert response.status_code == 400

    def test_duplicate_username(self, anon_client):
        anon_client.post("/api/register", json=REGISTRATION)

        response = TestClient(anon_client.app).post("/api/register", json=REGISTRATION)

        assert response.status_code == 400
        assert response.json()["message"] == "Username already exists"

    def test_short_password(self, anon_client):
        response = anon_client.post("/api/register", json={**REGISTRATION, "password": "12345"})

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "password"


class TestSessions:

    def test_login_wrong_password(self, anon_client, make_user):
        user = make_user(UserRole.STAFF)

        response = anon_client.post("/api/login", json={"username": user.username, "password": "nope"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid username or password"

    def test_session_cookie_is_http_only(self, anon_client, make_user, password):
        user = make_user(UserRole.STAFF)

        response = anon_client.post("/api/login", json={"username": user.username, "password": password})

        cookie = response.headers["set-cookie"]
        assert cookie.startswith(f"{config.SESSION_COOKIE_NAME}=")
        assert "HttpOnly" in cookie

    def test_logout_ends_session(self, staff_client):
        assert staff_client.get("/api/user").status_code == 200

        assert staff_client.post("/api/logout").status_code == 204

        assert staff_client.get("/api/user").status_code == 401

    def test_expired_session(self, storage, make_user):
        user = make_user(UserRole.STAFF)
        storage.create_session("old", user.id, datetime.utcnow() - timedelta(minutes=1))

        with pytest.raises(NotAuthenticated, match="expired"):
            AuthService(storage).user_for_token("old")

        assert storage.get_session("old") is None

    def test_unknown_token(self, storage):
        with pytest.raises(NotAuthenticated):
            AuthService(storage).user_for_token("made-up")

    def test_service_rejects_privileged_registration(self, storage):
        with pytest.raises(ValidationError):
            AuthService(storage).register("boss", "password", "Boss", "boss@example.com", UserRole.ADMIN)


class TestDefaultAdmin:

    def test_created_when_no_users(self, storage):
        admin = ensure_default_admin(storage)

        assert admin.role == UserRole.ADMIN
        assert admin.username == config.ADMIN_USERNAME
        assert verify_password(config.ADMIN_PASSWORD, admin.password)

    def test_not_created_when_users_exist(self, storage, make_user):
        make_user(UserRole.STAFF)

        assert ensure_default_admin(storage) is None
        assert len(storage.get_users()) == 1


class TestUserAdministration:

    def test_list_users_hides_passwords(self, admin_client):
        users = admin_client.get("/api/users").json()

        assert len(users) == 1
        assert all("password" not in user for user in users)

    def test_promote_user(self, admin_client, login_as):
        _, guard = login_as(UserRole.SECURITY)

        response = admin_client.put(f"/api/users/{guard.id}", json={"role": "manager"})

        assert response.status_code == 200
        assert response.json()["role"] == "manager"

    def test_admin_cannot_delete_self(self, login_as):
        client, admin = login_as(UserRole.ADMIN)

        response = client.delete(f"/api/users/{admin.id}")

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot delete your own account"

    def test_deleted_user_is_signed_out(self, admin_client, login_as):
        guard_client, guard = login_as(UserRole.SECURITY)

        assert admin_client.delete(f"/api/users/{guard.id}").status_code == 204

        assert guard_client.get("/api/user").status_code == 401
        assert admin_client.get(f"/api/users/{guard.id}").status_code == 404

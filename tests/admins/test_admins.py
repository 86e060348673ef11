"""
Tests for administrator creation, login and the SuperAdmin operations.
"""
import pytest

from member_accounts.accounts.store import AccountStore
from member_accounts.admins.bootstrap import bootstrap_admin_if_needed
from member_accounts.admins.models import Admin, AdminRole
from member_accounts.admins.service import AdminService, AdminStore
from member_accounts.config import Settings
from member_accounts.exceptions import AuthenticationError, ConflictError, NotFoundError
from tests.helpers import STUDENT_PAYLOAD, auth_header

SUPER_EMAIL = "root@example.com"
SUPER_PASSWORD = "SuperAdminPass1!"


@pytest.fixture
def service(db, credentials, sequences):
    return AdminService(AdminStore(db), AccountStore(db), credentials, sequences)


@pytest.fixture
def super_admin(service):
    return service.create("Root Admin", SUPER_EMAIL, AdminRole.SUPER_ADMIN, password=SUPER_PASSWORD)["admin"]


@pytest.fixture
def super_token(client, super_admin):
    response = client.post("/api/v1/admins/login", json={"email": SUPER_EMAIL, "password": SUPER_PASSWORD})
    return response.json()["data"]["access_token"]


class TestAdminService:

    def test_default_passwords_follow_the_sequence(self, service, credentials, db):
        first = service.create("First Admin", "first@example.com")
        second = service.create("Second Admin", "second@example.com")

        assert first["default_password"] == "Password#1"
        assert second["default_password"] == "Password#2"
        assert "access_token" not in first

        stored = db.query(Admin).filter(Admin.email == "first@example.com").one()
        assert stored.password_hash != "Password#1"
        assert credentials.verify_password("Password#1", stored.password_hash)

    def test_default_password_can_log_in(self, service):
        created = service.create("First Admin", "first@example.com")
        result = service.login("first@example.com", created["default_password"])
        assert result["admin"].role == AdminRole.ADMIN
        assert result["access_token"]

    def test_explicit_password_returns_token(self, service, credentials):
        result = service.create("Mod", "mod@example.com", AdminRole.MODERATOR, password="ModeratorPass1!")

        assert "default_password" not in result
        claims = credentials.verify_token(result["access_token"])
        assert claims.role == "Moderator"
        assert claims.email == "mod@example.com"

    def test_duplicate_email_conflicts(self, service):
        service.create("First Admin", "first@example.com", password="FirstPass123!")
        with pytest.raises(ConflictError):
            service.create("Again", "FIRST@example.com", password="FirstPass123!")

    def test_wrong_password_is_rejected(self, service, super_admin):
        with pytest.raises(AuthenticationError) as exc_info:
            service.login(SUPER_EMAIL, "not-the-password")
        assert exc_info.value.detail == "Invalid login credentials"

        with pytest.raises(AuthenticationError):
            service.login("nobody@example.com", SUPER_PASSWORD)

    def test_update_role_and_remove(self, service):
        admin = service.create("Mod", "mod@example.com", AdminRole.MODERATOR, password="ModeratorPass1!")["admin"]

        assert service.update_role(admin.id, AdminRole.ADMIN).role == AdminRole.ADMIN
        assert service.remove(admin.id).email == "mod@example.com"
        with pytest.raises(NotFoundError):
            service.get_profile(admin.id)

    def test_profile_update_ignores_role(self, service, super_admin):
        updated = service.update_profile(super_admin.id, {"full_name": "Renamed", "role": AdminRole.MODERATOR})
        assert updated.full_name == "Renamed"
        assert updated.role == AdminRole.SUPER_ADMIN


class TestBootstrap:

    def bootstrap_settings(self, settings, **overrides):
        values = settings.model_dump()
        values.update(overrides)
        return Settings(_env_file=None, **values)

    def test_creates_super_admin_once(self, settings, session_factory, credentials, db):
        configured = self.bootstrap_settings(
            settings, bootstrap_admin_email="Boot@Example.com", bootstrap_admin_password="BootPass123!"
        )

        assert bootstrap_admin_if_needed(session_factory, credentials, configured) is True
        assert bootstrap_admin_if_needed(session_factory, credentials, configured) is False

        admin = db.query(Admin).one()
        assert admin.email == "boot@example.com"
        assert admin.role == AdminRole.SUPER_ADMIN
        assert credentials.verify_password("BootPass123!", admin.password_hash)

    def test_skipped_when_not_configured(self, settings, session_factory, credentials, db):
        assert bootstrap_admin_if_needed(session_factory, credentials, settings) is False
        assert db.query(Admin).count() == 0


class TestAdminRoutes:

    def test_create_admin_requires_super_admin(self, client, service):
        service.create("Plain Admin", "plain@example.com", password="PlainAdminPass1!")
        login = client.post("/api/v1/admins/login", json={"email": "plain@example.com", "password": "PlainAdminPass1!"})
        token = login.json()["data"]["access_token"]

        response = client.post("/api/v1/admins", headers=auth_header(token),
                               json={"full_name": "New", "email": "new@example.com"})
        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_create_admin_without_token_is_401(self, client):
        response = client.post("/api/v1/admins", json={"full_name": "New", "email": "new@example.com"})
        assert response.status_code == 401

    def test_super_admin_creates_admin_with_default_password(self, client, super_token):
        response = client.post("/api/v1/admins", headers=auth_header(super_token),
                               json={"full_name": "New", "email": "new@example.com"})
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["default_password"] == "Password#1"
        assert data["admin"]["role"] == "Admin"
        assert "password_hash" not in data["admin"]

        login = client.post("/api/v1/admins/login", json={"email": "new@example.com", "password": "Password#1"})
        assert login.status_code == 200

    def test_member_token_cannot_reach_admin_routes(self, client):
        token = client.post("/api/v1/auth/register", json=STUDENT_PAYLOAD).json()["data"]["access_token"]
        response = client.get("/api/v1/admins", headers=auth_header(token))
        assert response.status_code == 401

    def test_admin_token_cannot_reach_member_profile(self, client, super_token):
        response = client.get("/api/v1/auth/profile", headers=auth_header(super_token))
        assert response.status_code == 401

    def test_list_and_profile(self, client, super_token):
        response = client.get("/api/v1/admins", headers=auth_header(super_token))
        assert response.status_code == 200
        assert [admin["email"] for admin in response.json()["data"]] == [SUPER_EMAIL]

        response = client.get("/api/v1/admins/profile", headers=auth_header(super_token))
        assert response.json()["data"]["role"] == "SuperAdmin"

    def test_change_role(self, client, super_token, service):
        admin = service.create("Mod", "mod@example.com", AdminRole.MODERATOR, password="ModeratorPass1!")["admin"]

        response = client.patch(f"/api/v1/admins/{admin.id}/role", headers=auth_header(super_token),
                                json={"role": "Admin"})
        assert response.status_code == 200
        assert response.json()["data"]["role"] == "Admin"

    def test_remove_account(self, client, super_token):
        registered = client.post("/api/v1/auth/register", json=STUDENT_PAYLOAD).json()["data"]
        account_id = registered["account"]["id"]

        response = client.delete(f"/api/v1/admins/accounts/{account_id}", headers=auth_header(super_token))
        assert response.status_code == 200
        assert response.json()["data"]["email"] == "ada.student@example.com"

        response = client.delete(f"/api/v1/admins/accounts/{account_id}", headers=auth_header(super_token))
        assert response.status_code == 404

        response = client.get("/api/v1/auth/profile", headers=auth_header(registered["access_token"]))
        assert response.status_code == 401

    def test_remove_admin(self, client, super_token, service):
        admin = service.create("Mod", "mod@example.com", AdminRole.MODERATOR, password="ModeratorPass1!")["admin"]

        response = client.delete(f"/api/v1/admins/{admin.id}", headers=auth_header(super_token))
        assert response.status_code == 200
        assert response.json()["data"]["id"] == admin.id

    def test_removed_admin_token_does_not_reach_the_next_admin(self, client, super_token, service):
        moderator = service.create("Mod", "mod@example.com", AdminRole.MODERATOR, password="ModeratorPass1!")["admin"]
        login = client.post("/api/v1/admins/login", json={"email": "mod@example.com", "password": "ModeratorPass1!"})
        old_token = login.json()["data"]["access_token"]

        client.delete(f"/api/v1/admins/{moderator.id}", headers=auth_header(super_token))
        response = client.post("/api/v1/admins", headers=auth_header(super_token), json={
            "full_name": "Second Root", "email": "root2@example.com", "role": "SuperAdmin",
        })
        assert response.json()["data"]["admin"]["id"] != moderator.id

        response = client.get("/api/v1/admins/profile", headers=auth_header(old_token))
        assert response.status_code == 401

    def test_role_change_invalidates_outstanding_token(self, client, super_token, service):
        admin = service.create("Mod", "mod@example.com", AdminRole.MODERATOR, password="ModeratorPass1!")["admin"]
        login = client.post("/api/v1/admins/login", json={"email": "mod@example.com", "password": "ModeratorPass1!"})
        old_token = login.json()["data"]["access_token"]

        client.patch(f"/api/v1/admins/{admin.id}/role", headers=auth_header(super_token), json={"role": "Admin"})

        assert client.get("/api/v1/admins/profile", headers=auth_header(old_token)).status_code == 401

    def test_null_full_name_is_rejected(self, client, super_token):
        response = client.patch("/api/v1/admins/profile", headers=auth_header(super_token), json={"full_name": None})
        assert response.status_code == 422

        response = client.get("/api/v1/admins/profile", headers=auth_header(super_token))
        assert response.json()["data"]["full_name"] == "Root Admin"

# Overview: Pytest coverage for login and claim resolution.

"""
Authentication and Claims Tests

Verifies:
- Login returns the identity for valid credentials, 401 otherwise
- Passwords are stored as bcrypt hashes, never plaintext
- Header claims resolve without ever failing; malformed values become absent
"""

import pytest

from royalcare.errors import Unauthenticated
from royalcare.models import User
from royalcare.services import auth_service
from royalcare.services.claims_service import (
    Claims, ClaimsResolver, HeaderClaimsResolver, register_resolver, RESOLVERS, get_resolver,
)


@pytest.fixture
def nurse(db_session):
    return auth_service.create_user(
        username="nurse1", password="S3cret!pass", role="user", department="ICU"
    )


@pytest.fixture
def admin_user(db_session):
    return auth_service.create_user(username="admin", password="Adm1n!pass", role="admin")


class TestLogin:
    def test_login_returns_identity(self, client, nurse):
        resp = client.post("/auth/login", json={"username": "nurse1", "password": "S3cret!pass"})
        assert resp.status_code == 200
        user = resp.get_json()["user"]
        assert user == {
            "id": nurse.id,
            "username": "nurse1",
            "role": "user",
            "department": "ICU",
        }

    def test_login_admin_has_no_department(self, client, admin_user):
        resp = client.post("/auth/login", json={"username": "admin", "password": "Adm1n!pass"})
        assert resp.status_code == 200
        assert resp.get_json()["user"]["role"] == "admin"
        assert resp.get_json()["user"]["department"] is None

    def test_wrong_password(self, client, nurse):
        resp = client.post("/auth/login", json={"username": "nurse1", "password": "nope"})
        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Wrong credentials", "kind": "unauthenticated"}

    def test_unknown_user(self, client, db_session):
        resp = client.post("/auth/login", json={"username": "ghost", "password": "x"})
        assert resp.status_code == 401

    @pytest.mark.parametrize("body", [
        {},
        {"username": "nurse1"},
        {"password": "S3cret!pass"},
        {"username": 5, "password": "S3cret!pass"},
        ["nurse1", "S3cret!pass"],
    ])
    def test_malformed_input_is_unauthenticated(self, client, nurse, body):
        resp = client.post("/auth/login", json=body)
        assert resp.status_code == 401

    def test_inactive_user_cannot_login(self, client, nurse, db_session):
        nurse.is_active = False
        db_session.commit()
        resp = client.post("/auth/login", json={"username": "nurse1", "password": "S3cret!pass"})
        assert resp.status_code == 401


class TestCredentialStore:
    def test_password_is_hashed(self, nurse):
        assert nurse.password_hash != "S3cret!pass"
        assert nurse.password_hash.startswith("$2")

    def test_plaintext_hash_never_verifies(self, db_session):
        user = User(username="legacy", password_hash="plain", role="user")
        db_session.add(user)
        db_session.commit()
        assert auth_service.verify_credentials("legacy", "plain") is None

    def test_authenticate_raises(self, db_session, nurse):
        with pytest.raises(Unauthenticated):
            auth_service.authenticate("nurse1", "wrong")

    def test_duplicate_username_rejected(self, db_session, nurse):
        from royalcare.errors import ValidationError
        with pytest.raises(ValidationError):
            auth_service.create_user(username="nurse1", password="other")

    def test_unknown_role_rejected(self, db_session):
        from royalcare.errors import ValidationError
        with pytest.raises(ValidationError):
            auth_service.create_user(username="x", password="y", role="superuser")


class _FakeRequest:
    def __init__(self, headers):
        self.headers = headers


class TestHeaderClaims:
    resolver = HeaderClaimsResolver()

    def test_full_claims(self):
        claims = self.resolver.resolve(_FakeRequest({
            "X-Role": "admin", "X-Department": "ICU", "X-User-Id": "12",
        }))
        assert claims == Claims(role="admin", department="ICU", user_id=12)
        assert claims.is_admin
        assert claims.is_authenticated

    def test_missing_headers_mean_anonymous_non_admin(self):
        claims = self.resolver.resolve(_FakeRequest({}))
        assert claims == Claims()
        assert not claims.is_admin
        assert not claims.is_authenticated

    def test_role_is_case_insensitive(self):
        claims = self.resolver.resolve(_FakeRequest({"X-Role": " Admin "}))
        assert claims.is_admin

    def test_other_roles_are_not_admin(self):
        claims = self.resolver.resolve(_FakeRequest({"X-Role": "administrator"}))
        assert not claims.is_admin

    def test_malformed_user_id_is_absent(self):
        claims = self.resolver.resolve(_FakeRequest({"X-User-Id": "abc", "X-Department": "  "}))
        assert claims.user_id is None
        assert claims.department is None


class TestResolverRegistry:
    def test_default_resolver_is_headers(self, app):
        assert isinstance(get_resolver(), HeaderClaimsResolver)

    def test_custom_resolver_can_be_registered(self, app):
        class FixedResolver(ClaimsResolver):
            def resolve(self, request):
                return Claims(role="admin", user_id=99)

        register_resolver("fixed", FixedResolver)
        try:
            assert RESOLVERS["fixed"] is FixedResolver
            assert FixedResolver().resolve(None).is_admin
        finally:
            RESOLVERS.pop("fixed")

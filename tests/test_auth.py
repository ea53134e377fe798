"""
Tests for login, logout and the authentication/authorization gates.
"""

from datetime import timedelta

import pytest
from jose import jwt

from conftest import bearer, login
from snam_baitong.application.services.auth_service import create_access_token, decode_access_token, identity_from_payload
from snam_baitong.config import get_settings
from snam_baitong.core.exceptions import UnauthorizedException
from snam_baitong.domain.enums import Role, UserStatus
from snam_baitong.domain.schemas.auth import Identity
from snam_baitong.interfaces.api.deps import is_role_allowed

settings = get_settings()


def test_login_seeded_admin(client):
    response = client.post("/api/auth/login", json={"identity": "admin", "password": "admin123"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["tokenType"] == "bearer"
    assert body["user"]["role"] == "admin"
    assert body["user"]["username"] == "admin"
    assert "passwordHash" not in body["user"]
    assert "password_hash" not in body["user"]

    claims = jwt.decode(body["token"], settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    assert claims["role"] == "admin"
    assert claims["jti"]


def test_token_role_matches_stored_role(client, make_user):
    make_user("officer", "pw-123456")
    token = login(client, "officer", "pw-123456")

    assert decode_access_token(token)["role"] == Role.MINISTRY.value


def test_wrong_password_and_unknown_user_fail_identically(client):
    wrong = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"username": "ghost", "password": "nope"})

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"success": False, "error": "Invalid credentials"}


def test_disabled_account_with_wrong_password_is_not_distinguishable(client, make_user):
    make_user("retired", "right-pass", status=UserStatus.DISABLED)

    response = client.post("/api/auth/login", json={"username": "retired", "password": "wrong"})

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"


def test_disabled_account_with_right_password(client, make_user):
    make_user("retired", "right-pass", status=UserStatus.DISABLED)

    response = client.post("/api/auth/login", json={"username": "retired", "password": "right-pass"})

    assert response.status_code == 403
    assert response.json()["error"] == "Account disabled"


def test_login_requires_both_fields(client):
    response = client.post("/api/auth/login", json={"username": "admin"})

    assert response.status_code == 400
    assert response.json()["error"] == "username and password are required"


def test_logout_revokes_token(client, admin_headers):
    assert client.get("/api/plants", headers=admin_headers).status_code == 200

    response = client.post("/api/auth/logout", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["success"] is True

    after = client.get("/api/plants", headers=admin_headers)
    assert after.status_code == 401
    assert after.json()["error"] == "Token revoked"


def test_logout_twice_is_harmless(client, admin_headers):
    assert client.post("/api/auth/logout", headers=admin_headers).status_code == 200
    assert client.post("/api/auth/logout", headers=admin_headers).status_code == 200
    assert client.get("/api/plants", headers=admin_headers).status_code == 401


def test_logout_requires_a_valid_token(client):
    response = client.post("/api/auth/logout", headers=bearer("not-a-jwt"))

    assert response.status_code == 401


def test_other_sessions_survive_logout(client):
    first = bearer(login(client, "admin", "admin123"))
    second = bearer(login(client, "admin", "admin123"))

    client.post("/api/auth/logout", headers=first)

    assert client.get("/api/plants", headers=second).status_code == 200


def test_missing_header(client):
    response = client.get("/api/plants")

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Missing or malformed token"}


def test_malformed_header(client):
    response = client.get("/api/plants", headers={"Authorization": "Token abc"})

    assert response.status_code == 401
    assert response.json()["error"] == "Missing or malformed token"


def test_garbage_token(client):
    response = client.get("/api/plants", headers=bearer("not-a-jwt"))

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or expired token"


def test_expired_token(client, db):
    from snam_baitong.domain.models.user import User

    admin = db.query(User).filter(User.username == "admin").one()
    token, _, _ = create_access_token(admin, expires_delta=timedelta(seconds=-5))

    response = client.get("/api/plants", headers=bearer(token))

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or expired token"


def test_token_signed_with_other_key(client):
    forged = jwt.encode({"sub": "1", "role": "admin", "jti": "x", "exp": 9999999999}, "other", algorithm="HS256")

    response = client.get("/api/plants", headers=bearer(forged))

    assert response.status_code == 401


def test_ministry_forbidden_on_admin_route(client, ministry_headers):
    response = client.get("/api/users", headers=ministry_headers)

    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden for this role"


def test_me(client, ministry_headers):
    response = client.get("/api/auth/me", headers=ministry_headers)

    assert response.status_code == 200
    assert response.json()["data"]["username"] == "officer"
    assert response.json()["data"]["role"] == "ministry"


@pytest.mark.parametrize(
    "role,allowed,expected",
    [
        (Role.ADMIN, (Role.ADMIN,), True),
        (Role.MINISTRY, (Role.ADMIN,), False),
        (Role.MINISTRY, (), True),
        (Role.MINISTRY, (Role.ADMIN, Role.MINISTRY), True),
    ],
)
def test_is_role_allowed(role, allowed, expected):
    assert is_role_allowed(role, allowed) is expected


def test_decode_rejects_token_without_jti():
    token = jwt.encode({"sub": "1", "role": "admin", "exp": 9999999999}, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    with pytest.raises(UnauthorizedException):
        decode_access_token(token)


def test_identity_carries_token_claims(client, ministry_headers):
    token = ministry_headers["Authorization"].split(" ", 1)[1]
    payload = decode_access_token(token)

    identity = identity_from_payload(payload)

    assert identity == Identity(id=int(payload["sub"]), username="officer", role=Role.MINISTRY, token_id=payload["jti"])

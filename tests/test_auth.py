"""
Unit tests for UserRepository and token utilities
"""
import json

import jwt
import pytest
from jwt.utils import base64url_encode
from sqlalchemy import func, select

from auth_utils import create_expired_jwt, create_jwt, decode_jwt, hash_password, verify_password
from config.settings import settings
from crud.user import UserRepository
from database_models import User
from models.user import Capability, Role, UserClaims, role_has


@pytest.mark.asyncio
async def test_create_and_get_user(test_db):
    """
    Test creating a user and retrieving it by exact email.
    """
    user_repo = UserRepository(test_db)

    created_user = await user_repo.create_user("owner@example.com", "s3cret-pass")

    assert created_user.id is not None
    assert created_user.email == "owner@example.com"
    assert created_user.role == "admin"
    assert created_user.password_hash != "s3cret-pass"

    retrieved_user = await user_repo.get_user_by_email("owner@example.com")
    assert retrieved_user is not None
    assert retrieved_user.id == created_user.id

    assert await user_repo.get_user_by_email("missing@example.com") is None


@pytest.mark.asyncio
async def test_login_verification(test_db):
    """
    Test password verification against the stored hash.
    """
    user_repo = UserRepository(test_db)
    await user_repo.create_user("login@example.com", "secure_password_456")

    retrieved_user = await user_repo.get_user_by_email("login@example.com")

    assert verify_password("secure_password_456", retrieved_user.password_hash) is True
    assert verify_password("wrong_password", retrieved_user.password_hash) is False
    assert verify_password("secure_password_456", None) is False


@pytest.mark.asyncio
async def test_ensure_admin_is_idempotent(test_db):
    user_repo = UserRepository(test_db)

    assert await user_repo.ensure_admin("admin@example.com", "first") is True
    assert await user_repo.ensure_admin("admin@example.com", "second") is False

    admin = await user_repo.get_user_by_email("admin@example.com")
    assert verify_password("first", admin.password_hash)


@pytest.mark.asyncio
async def test_reset_admin_replaces_existing_user(test_db):
    user_repo = UserRepository(test_db)
    original = await user_repo.create_user("admin@example.com", "old-password")
    old_hash = original.password_hash

    replaced = await user_repo.reset_admin("admin@example.com", "new-password")

    count = await test_db.scalar(select(func.count(User.id)).where(User.email == "admin@example.com"))
    assert count == 1
    assert replaced.password_hash != old_hash
    current = await user_repo.get_user_by_email("admin@example.com")
    assert current.id == replaced.id
    assert verify_password("new-password", current.password_hash)
    assert not verify_password("old-password", current.password_hash)


def test_hash_password_is_salted():
    assert hash_password("same") != hash_password("same")


def test_token_round_trip_keeps_claims():
    claims = UserClaims(id=7, email="admin@example.com", role=Role.ADMIN)

    decoded = decode_jwt(create_jwt(claims))

    assert decoded == claims


def test_token_expires_after_24_hours():
    token = create_jwt(UserClaims(id=1, email="a@example.com", role=Role.ADMIN))
    payload = jwt.decode(token, settings.jwt_secret_key, algorithms=["HS256"])

    assert payload["exp"] - payload["iat"] == 24 * 60 * 60


def test_expired_token_is_rejected():
    token = create_expired_jwt(UserClaims(id=1, email="a@example.com", role=Role.ADMIN), expired_seconds_ago=5)

    assert decode_jwt(token) is None


def test_tampered_token_is_rejected():
    token = create_jwt(UserClaims(id=1, email="a@example.com", role=Role.ADMIN))
    header, _, signature = token.split(".")
    swapped_payload = base64url_encode(json.dumps({"id": 2, "email": "b@example.com", "role": "admin"}).encode())
    tampered = ".".join([header, swapped_payload.decode(), signature])
    forged = jwt.encode({"id": 1, "email": "a@example.com", "role": "admin"}, "another-secret", algorithm="HS256")

    assert decode_jwt(tampered) is None
    assert decode_jwt(forged) is None
    assert decode_jwt("not-a-token") is None


def test_unknown_role_keeps_identity():
    token = jwt.encode({"id": 1, "email": "a@example.com", "role": "viewer"},
                       settings.jwt_secret_key, algorithm="HS256")

    claims = decode_jwt(token)

    assert claims == UserClaims(id=1, email="a@example.com", role="viewer")
    assert not role_has(claims.role, Capability.MANAGE_CONTENT)


def test_role_capabilities():
    assert role_has(Role.ADMIN, Capability.MANAGE_CONTENT)
    assert role_has("admin", Capability.MODERATE_COMMENTS)
    assert not role_has("viewer", Capability.MANAGE_CONTENT)

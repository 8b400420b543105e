"""Unit tests for registration, login and password hashing."""

import pytest
from fastapi import HTTPException
from libs.auth.passwords import hash_password, verify_password
from services.store_service.models import User
from services.store_service.services import identity
from sqlalchemy import func, select


async def _user_count(db) -> int:
    return (await db.execute(select(func.count()).select_from(User))).scalar_one()


# ---------------------------------------------------------------------------
# passwords
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_hash_is_not_plaintext_and_verifies():
    hashed = hash_password("hunter22", rounds=4)

    assert hashed != "hunter22"
    assert hashed.startswith("$2")
    assert verify_password("hunter22", hashed)
    assert not verify_password("hunter23", hashed)


@pytest.mark.unit
def test_verify_against_garbage_hash_is_false():
    assert not verify_password("anything", "not-a-bcrypt-hash")
    assert not verify_password("anything", "")


# ---------------------------------------------------------------------------
# register_user
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_register_hashes_password_and_normalizes_email(db_session):
    user = await identity.register_user(
        db_session, email="  Ada@Example.COM ", password="pw-123456", name="Ada"
    )

    assert user.email == "ada@example.com"
    assert user.password != "pw-123456"
    assert verify_password("pw-123456", user.password)
    assert user.is_admin is False


@pytest.mark.asyncio
@pytest.mark.unit
async def test_register_duplicate_email_is_rejected(db_session):
    await identity.register_user(db_session, email="dup@example.com", password="one")

    with pytest.raises(HTTPException) as exc_info:
        await identity.register_user(db_session, email="DUP@example.com", password="two")

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == identity.EMAIL_IN_USE
    assert await _user_count(db_session) == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_register_rejects_passwords_bcrypt_would_truncate(db_session):
    with pytest.raises(HTTPException) as exc_info:
        await identity.register_user(
            db_session, email="long@example.com", password="x" * 73
        )

    assert exc_info.value.status_code == 400
    assert await _user_count(db_session) == 0


# ---------------------------------------------------------------------------
# authenticate
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_authenticate_returns_user(db_session):
    created = await identity.register_user(
        db_session, email="login@example.com", password="correct"
    )

    user = await identity.authenticate(
        db_session, email="Login@Example.com", password="correct"
    )

    assert user.id == created.id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unknown_email_and_wrong_password_fail_identically(db_session):
    await identity.register_user(db_session, email="known@example.com", password="right")

    with pytest.raises(HTTPException) as wrong_password:
        await identity.authenticate(db_session, email="known@example.com", password="wrong")
    with pytest.raises(HTTPException) as unknown_email:
        await identity.authenticate(db_session, email="ghost@example.com", password="right")

    assert wrong_password.value.status_code == unknown_email.value.status_code == 401
    assert wrong_password.value.detail == unknown_email.value.detail
    assert wrong_password.value.detail == identity.INVALID_CREDENTIALS


@pytest.mark.asyncio
@pytest.mark.unit
async def test_principal_carries_admin_flag(db_session):
    user = await identity.register_user(
        db_session, email="boss@example.com", password="pw", is_admin=True
    )

    principal = identity.to_principal(user)

    assert principal.model_dump() == {
        "id": user.id,
        "email": "boss@example.com",
        "name": "",
        "is_admin": True,
    }

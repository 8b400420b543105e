"""User registration and credential checks."""

from functools import lru_cache
from typing import Optional

from fastapi import HTTPException, status
from libs.auth.models import SessionUser
from libs.auth.passwords import hash_password, verify_password
from libs.common.logging import get_logger
from services.store_service.models import User
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
EMAIL_IN_USE = "Email already used"
# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("not-a-real-password")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def to_principal(user: User) -> SessionUser:
    return SessionUser(
        id=user.id, email=user.email, name=user.name or "", is_admin=bool(user.is_admin)
    )


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def register_user(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    name: str = "",
    is_admin: bool = False,
) -> User:
    """Create a user with a bcrypt-hashed password.

    Raises:
        HTTPException 400: password too long, or the email is already taken
    """
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
        )

    email = normalize_email(email)
    if await get_user_by_email(db, email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EMAIL_IN_USE)

    user = User(
        name=(name or "").strip(),
        email=email,
        password=hash_password(password),
        is_admin=is_admin,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EMAIL_IN_USE)
    await db.refresh(user)

    logger.info("Registered user %s (admin=%s)", user.id, user.is_admin)
    return user


async def authenticate(db: AsyncSession, *, email: str, password: str) -> User:
    """Return the user for valid credentials.

    Unknown email and wrong password raise the same 401.
    """
    user = await get_user_by_email(db, email)
    if user is None:
        # Burn a comparison so unknown emails take as long as bad passwords
        verify_password(password, _dummy_hash())
    if user is None or not verify_password(password, user.password):
        logger.info("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS
        )
    return user

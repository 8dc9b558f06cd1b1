"""
Account service
===============

Signup and signin for users and barbers.  Every success returns the ORM
row together with a freshly issued bearer token.

Users identify by email or phone number.  Email signups need a password;
for phone signups it is optional and a password-less account signs in by
handle alone.  Once an account has a password hash it is always checked.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import Role
from src.domain.exceptions import AuthError, ValidationError
from src.infrastructure.models import BarberModel, UserModel
from src.infrastructure.repositories import BarberRepository, UserRepository
from src.infrastructure.security import (
    create_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


def normalize_email(email: Optional[str]) -> Optional[str]:
    if email is None:
        return None
    email = email.strip().lower()
    return email or None


def _validate_coordinate(lat: float, long: float) -> None:
    if not -90 <= lat <= 90:
        raise ValidationError("Latitude must be between -90 and 90")
    if not -180 <= long <= 180:
        raise ValidationError("Longitude must be between -180 and 180")


# ── Users ─────────────────────────────────────────────────────────────


async def signup_user(
    db: AsyncSession,
    *,
    name: str,
    email: Optional[str] = None,
    phone_number: Optional[str] = None,
    password: Optional[str] = None,
) -> tuple[UserModel, str]:
    email = normalize_email(email)
    phone_number = phone_number.strip() if phone_number else None
    if not name or not name.strip():
        raise ValidationError("Name is required")
    if not email and not phone_number:
        raise ValidationError("Email or phone number is required")
    if email and not password:
        raise ValidationError("Password is required when signing up with email")

    user = await UserRepository(db).create(
        name=name.strip(),
        email=email,
        phone_number=phone_number,
        password_hash=hash_password(password) if password else None,
    )
    logger.info("User %d signed up", user.id)
    return user, create_access_token(user.id, Role.USER)


async def signin_user(
    db: AsyncSession,
    *,
    email: Optional[str] = None,
    phone_number: Optional[str] = None,
    password: Optional[str] = None,
) -> tuple[UserModel, str]:
    repo = UserRepository(db)
    email = normalize_email(email)
    if email:
        user = await repo.get_by_email(email)
    elif phone_number:
        user = await repo.get_by_phone_number(phone_number.strip())
    else:
        raise ValidationError("Email or phone number is required")

    if user is None:
        logger.warning("Signin failed: unknown user handle")
        raise AuthError("Invalid credentials")
    if user.password_hash is not None and not verify_password(
        password or "", user.password_hash
    ):
        logger.warning("Signin failed: bad password for user %d", user.id)
        raise AuthError("Invalid credentials")

    return user, create_access_token(user.id, Role.USER)


# ── Barbers ───────────────────────────────────────────────────────────


async def signup_barber(
    db: AsyncSession,
    *,
    name: str,
    username: str,
    password: str,
    lat: float,
    long: float,
) -> tuple[BarberModel, str]:
    if not name.strip() or not username.strip() or not password:
        raise ValidationError(
            "All fields are required: name, username, password, lat, long"
        )
    _validate_coordinate(lat, long)

    barber = await BarberRepository(db).create(
        name=name.strip(),
        username=username.strip(),
        password_hash=hash_password(password),
        lat=lat,
        long=long,
    )
    logger.info("Barber %d signed up at (%.5f, %.5f)", barber.id, lat, long)
    return barber, create_access_token(barber.id, Role.BARBER)


async def signin_barber(
    db: AsyncSession, *, username: str, password: str
) -> tuple[BarberModel, str]:
    barber = await BarberRepository(db).get_by_username(username.strip())
    if barber is None or not verify_password(password, barber.password_hash):
        logger.warning("Barber signin failed for username %r", username)
        raise AuthError("Invalid username or password")
    return barber, create_access_token(barber.id, Role.BARBER)

"""
Password hashing and bearer-token issuing / verification.

* Passwords: passlib ``CryptContext`` with bcrypt (salted, one-way).
* Tokens:    HS256 JWT via python-jose carrying ``sub`` (subject id),
  ``role`` and an ``exp`` of ``settings.token_ttl_hours``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from src.config import settings
from src.domain.entities import Principal
from src.domain.enums import Role
from src.domain.exceptions import AuthError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Compare *plain_password* to a stored hash; a missing hash never matches."""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash is not a recognised bcrypt hash")
        return False


def create_access_token(
    subject_id: int,
    role: Role,
    expires_delta: Optional[timedelta] = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=settings.token_ttl_hours)
    )
    claims = {"sub": str(subject_id), "role": role.value, "exp": expire}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Principal:
    """Verify signature and expiry, returning the principal.  Raises ``AuthError``."""
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except JWTError as exc:
        logger.warning("Token verification failed: %s", exc)
        raise AuthError("Invalid or expired token") from exc

    try:
        return Principal(subject_id=int(payload["sub"]), role=Role(payload["role"]))
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Token carries malformed claims")
        raise AuthError("Invalid or expired token") from exc

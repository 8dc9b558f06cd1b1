"""FastAPI dependency injection helpers."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Principal
from src.domain.enums import Role
from src.domain.exceptions import AuthError, ForbiddenError
from src.infrastructure.database import async_session_factory
from src.infrastructure.security import decode_access_token

# auto_error=False so a missing / non-Bearer header becomes our 401, not 403
bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise AuthError("Missing or invalid Authorization header")
    return decode_access_token(credentials.credentials)


async def get_current_user(
    principal: Principal = Depends(get_principal),
) -> Principal:
    if principal.role != Role.USER:
        raise ForbiddenError("Access denied. User role required.")
    return principal


async def get_current_barber(
    principal: Principal = Depends(get_principal),
) -> Principal:
    if principal.role != Role.BARBER:
        raise ForbiddenError("Access denied. Barber role required.")
    return principal

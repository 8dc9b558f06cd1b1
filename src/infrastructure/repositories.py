"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  Nothing here commits: the caller's session
owns the transaction, which is what makes the multi-statement queue
mutations atomic.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .models import BarberModel, QueueEntryModel, UserModel
from src.domain.entities import BarberSummary, BoundingBox, LeaveResult
from src.domain.exceptions import ConflictError, InternalError, NotFoundError

NOT_IN_ANY_QUEUE = "not in any queue"
NOT_IN_BARBER_QUEUE = "user not in this barber's queue"


async def _flush(session: AsyncSession, conflict_message: str) -> None:
    """Flush pending writes, mapping constraint violations to ``ConflictError``."""
    try:
        await session.flush()
    except IntegrityError as exc:
        raise ConflictError(conflict_message) from exc
    except SQLAlchemyError as exc:
        raise InternalError("Database write failed") from exc


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        *,
        name: str,
        email: str | None = None,
        phone_number: str | None = None,
        password_hash: str | None = None,
    ) -> UserModel:
        user = UserModel(
            name=name,
            email=email,
            phone_number=phone_number,
            password_hash=password_hash,
        )
        self.session.add(user)
        await _flush(self.session, "A user with this email or phone number already exists")
        return user

    async def get_by_id(self, user_id: int) -> Optional[UserModel]:
        return await self.session.get(UserModel, user_id)

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        return result.scalar_one_or_none()

    async def get_by_phone_number(self, phone_number: str) -> Optional[UserModel]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.phone_number == phone_number)
        )
        return result.scalar_one_or_none()


class BarberRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        *,
        name: str,
        username: str,
        password_hash: str,
        lat: float,
        long: float,
    ) -> BarberModel:
        barber = BarberModel(
            name=name,
            username=username,
            password_hash=password_hash,
            lat=lat,
            long=long,
        )
        self.session.add(barber)
        await _flush(self.session, "Username already exists")
        return barber

    async def get_by_id(self, barber_id: int) -> Optional[BarberModel]:
        return await self.session.get(BarberModel, barber_id)

    async def get_by_username(self, username: str) -> Optional[BarberModel]:
        result = await self.session.execute(
            select(BarberModel).where(BarberModel.username == username)
        )
        return result.scalar_one_or_none()

    async def find_in_box(self, box: BoundingBox) -> list[BarberModel]:
        """Barbers whose coordinate lies inside *box* (inclusive), with queues."""
        result = await self.session.execute(
            select(BarberModel)
            .where(
                BarberModel.lat.between(box.min_lat, box.max_lat),
                BarberModel.long.between(box.min_lng, box.max_lng),
            )
            .options(selectinload(BarberModel.queue_entries))
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())


class QueueRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user(self, user_id: int) -> Optional[QueueEntryModel]:
        result = await self.session.execute(
            select(QueueEntryModel)
            .where(QueueEntryModel.user_id == user_id)
            .options(selectinload(QueueEntryModel.barber))
        )
        return result.scalar_one_or_none()

    async def join_queue(
        self,
        user_id: int,
        barber_id: int,
        service_type: str | None = None,
    ) -> QueueEntryModel:
        """
        Move *user_id* into *barber_id*'s queue.

        Any existing entry for the user, at any barber, is dropped first;
        re-joining is an implicit transfer, never a rejection.  Two joins
        racing for the same user collide on the unique ``user_id`` and the
        loser gets ``ConflictError``.
        """
        if await self.session.get(BarberModel, barber_id) is None:
            raise NotFoundError(f"Barber {barber_id} not found")
        if await self.session.get(UserModel, user_id) is None:
            raise NotFoundError(f"User {user_id} not found")

        await self.session.execute(
            delete(QueueEntryModel).where(QueueEntryModel.user_id == user_id)
        )
        entry = QueueEntryModel(
            barber_id=barber_id,
            user_id=user_id,
            service_type=service_type,
            entered_at=datetime.now(timezone.utc),
        )
        self.session.add(entry)
        await _flush(self.session, "Queue membership changed concurrently; retry")
        return entry

    async def leave_queue(self, user_id: int) -> LeaveResult:
        entry = await self.get_by_user(user_id)
        if entry is None:
            return LeaveResult.failed(NOT_IN_ANY_QUEUE)
        return await self._remove(entry)

    async def remove_from_queue_by_barber(
        self, barber_id: int, user_id: int
    ) -> LeaveResult:
        entry = await self.get_by_user(user_id)
        if entry is None or entry.barber_id != barber_id:
            return LeaveResult.failed(NOT_IN_BARBER_QUEUE)
        return await self._remove(entry)

    async def _remove(self, entry: QueueEntryModel) -> LeaveResult:
        barber = BarberSummary(id=entry.barber.id, name=entry.barber.name)
        await self.session.execute(
            delete(QueueEntryModel).where(QueueEntryModel.id == entry.id)
        )
        return LeaveResult.removed(barber, datetime.now(timezone.utc))

    async def list_queue(self, barber_id: int) -> list[QueueEntryModel]:
        """All entries for the barber in service order.  Read-only."""
        if await self.session.get(BarberModel, barber_id) is None:
            raise NotFoundError(f"Barber {barber_id} not found")
        result = await self.session.execute(
            select(QueueEntryModel)
            .where(QueueEntryModel.barber_id == barber_id)
            .order_by(QueueEntryModel.entered_at, QueueEntryModel.id)
            .options(selectinload(QueueEntryModel.user))
        )
        return list(result.scalars().all())

    @staticmethod
    def _ahead_of(entered_at: datetime, entry_id: int | None):
        earlier = QueueEntryModel.entered_at < entered_at
        if entry_id is None:
            return earlier
        return or_(
            earlier,
            and_(
                QueueEntryModel.entered_at == entered_at,
                QueueEntryModel.id < entry_id,
            ),
        )

    async def compute_position(
        self,
        barber_id: int,
        entered_at: datetime,
        entry_id: int | None = None,
    ) -> int:
        """1-based rank: one plus the number of entries served earlier."""
        result = await self.session.execute(
            select(func.count())
            .select_from(QueueEntryModel)
            .where(
                QueueEntryModel.barber_id == barber_id,
                self._ahead_of(entered_at, entry_id),
            )
        )
        return 1 + (result.scalar() or 0)

    async def entries_ahead(self, entry: QueueEntryModel) -> list[QueueEntryModel]:
        result = await self.session.execute(
            select(QueueEntryModel)
            .where(
                QueueEntryModel.barber_id == entry.barber_id,
                self._ahead_of(entry.entered_at, entry.id),
            )
            .order_by(QueueEntryModel.entered_at, QueueEntryModel.id)
        )
        return list(result.scalars().all())

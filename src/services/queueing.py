"""
Queue join / leave orchestration and the queue-status read model.

All mutations run inside the caller's session transaction: the request
dependency commits once at the end or rolls everything back, so a queue
entry can never be observed half-moved.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import (
    BarberSummary,
    LeaveResult,
    QueueSlot,
    QueueStatus,
    UserSummary,
)
from src.domain.exceptions import NotFoundError
from src.domain.waiting import estimate_wait
from src.infrastructure.models import QueueEntryModel
from src.infrastructure.repositories import (
    BarberRepository,
    QueueRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


async def join_queue(
    db: AsyncSession,
    user_id: int,
    barber_id: int,
    service_type: Optional[str] = None,
) -> QueueSlot:
    repo = QueueRepository(db)
    entry = await repo.join_queue(user_id, barber_id, service_type)

    user = await UserRepository(db).get_by_id(user_id)
    barber = await BarberRepository(db).get_by_id(barber_id)
    position = await repo.compute_position(barber_id, entry.entered_at, entry.id)
    logger.info(
        "User %d joined barber %d queue at position %d", user_id, barber_id, position
    )
    return QueueSlot(
        id=entry.id,
        user=UserSummary(id=user.id, name=user.name),
        barber=BarberSummary(id=barber.id, name=barber.name),
        entered_at=entry.entered_at,
        service_type=entry.service_type,
        position=position,
    )


async def leave_queue(db: AsyncSession, user_id: int) -> LeaveResult:
    result = await QueueRepository(db).leave_queue(user_id)
    if result.success:
        logger.info("User %d left barber %d queue", user_id, result.removed_from.id)
    return result


async def remove_user(db: AsyncSession, barber_id: int, user_id: int) -> LeaveResult:
    result = await QueueRepository(db).remove_from_queue_by_barber(barber_id, user_id)
    if result.success:
        logger.info("Barber %d removed user %d from queue", barber_id, user_id)
    else:
        logger.info("Barber %d tried to remove user %d: %s", barber_id, user_id, result.reason)
    return result


async def list_queue(db: AsyncSession, barber_id: int) -> list[QueueSlot]:
    entries = await QueueRepository(db).list_queue(barber_id)
    barber = await BarberRepository(db).get_by_id(barber_id)
    summary = BarberSummary(id=barber.id, name=barber.name)
    return [
        QueueSlot(
            id=e.id,
            user=UserSummary(id=e.user.id, name=e.user.name),
            barber=summary,
            entered_at=e.entered_at,
            service_type=e.service_type,
            position=index,
        )
        for index, e in enumerate(entries, start=1)
    ]


async def get_queue_status(db: AsyncSession, user_id: int) -> QueueStatus:
    """Position and wait estimate for *user_id*; not-queued is a valid status."""
    if await UserRepository(db).get_by_id(user_id) is None:
        raise NotFoundError(f"User {user_id} not found")

    repo = QueueRepository(db)
    entry: Optional[QueueEntryModel] = await repo.get_by_user(user_id)
    if entry is None:
        return QueueStatus(in_queue=False)

    ahead = await repo.entries_ahead(entry)
    return QueueStatus(
        in_queue=True,
        queue_position=await repo.compute_position(
            entry.barber_id, entry.entered_at, entry.id
        ),
        barber=BarberSummary(id=entry.barber.id, name=entry.barber.name),
        entered_at=entry.entered_at,
        service_type=entry.service_type,
        estimated_wait_time=estimate_wait(ahead),
    )

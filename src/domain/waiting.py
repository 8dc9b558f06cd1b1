"""
Wait-time estimation
====================

Wait time is a static heuristic: the sum of the fixed service duration of
every entry ahead of you.  There is no server count, no notion of a
service already in progress and no live recalculation.

Ordering
--------
"Ahead" follows queue order, ``(entered_at, id)``; see
``QueueRepository.compute_position``.  Wall-clock timestamps can
collide under concurrent joins, so the auto-incrementing id is the
authoritative tie-break.

Complexity: O(k) for k entries ahead.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, Union

from .enums import DEFAULT_SERVICE_MINUTES, SERVICE_MINUTES


class _HasServiceType(Protocol):
    service_type: Optional[str]


def service_minutes(service_type: Optional[str]) -> int:
    """Duration of one service; unknown or missing types cost the default."""
    if service_type is None:
        return DEFAULT_SERVICE_MINUTES
    return SERVICE_MINUTES.get(service_type, DEFAULT_SERVICE_MINUTES)


def estimate_wait(
    entries_ahead: Iterable[Union[_HasServiceType, str, None]],
) -> int:
    """
    Total estimated minutes for *entries_ahead*.

    Accepts queue entries (anything with a ``service_type`` attribute) or
    bare service-type strings.
    """
    total = 0
    for entry in entries_ahead:
        if entry is None or isinstance(entry, str):
            total += service_minutes(entry)
        else:
            total += service_minutes(entry.service_type)
    return total

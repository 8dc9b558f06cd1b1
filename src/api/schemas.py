"""
Pydantic request / response schemas for the REST API.

Python attributes are snake_case; the wire format is camelCase through an
alias generator, which FastAPI honours on both parsing and serialisation.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.domain.entities import LeaveResult


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ── Requests ──────────────────────────────────────────────────────────


class UserSignupRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: Optional[str] = Field(None, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=32)
    password: Optional[str] = Field(None, min_length=1, max_length=72)


class UserSigninRequest(CamelModel):
    email: Optional[str] = Field(None, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=32)
    password: Optional[str] = Field(None, max_length=72)


class BarberSignupRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    username: str = Field(..., min_length=1, max_length=120)
    password: str = Field(..., min_length=1, max_length=72)
    lat: float = Field(..., ge=-90, le=90)
    long: float = Field(..., ge=-180, le=180)


class BarberSigninRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class JoinQueueRequest(CamelModel):
    barber_id: int = Field(..., gt=0)
    service: Optional[str] = Field(
        None,
        max_length=32,
        description="haircut, beard or haircut+beard; other values are "
        "estimated at the default duration.",
    )


class RemoveUserRequest(CamelModel):
    user_id: int = Field(..., gt=0)


# ── Responses ─────────────────────────────────────────────────────────


class UserResponse(CamelModel):
    id: int
    name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None


class BarberResponse(CamelModel):
    id: int
    name: str
    username: str
    lat: float
    long: float


class UserAuthResponse(CamelModel):
    user: UserResponse
    token: str
    msg: Optional[str] = None


class BarberAuthResponse(CamelModel):
    barber: BarberResponse
    token: str
    msg: Optional[str] = None


class SummaryResponse(CamelModel):
    id: int
    name: str


class QueueSlotResponse(CamelModel):
    id: int
    user: SummaryResponse
    barber: SummaryResponse
    entered_at: datetime
    service_type: Optional[str] = None
    position: Optional[int] = None


class JoinQueueResponse(CamelModel):
    msg: str
    queue: QueueSlotResponse


class RemovalData(CamelModel):
    removed_from: SummaryResponse
    removed_at: datetime


class RemovalResponse(CamelModel):
    msg: str
    data: RemovalData

    @classmethod
    def from_result(cls, msg: str, result: LeaveResult) -> "RemovalResponse":
        """Build from a successful ``LeaveResult``."""
        return cls(
            msg=msg,
            data=RemovalData(
                removed_from=SummaryResponse(
                    id=result.removed_from.id, name=result.removed_from.name
                ),
                removed_at=result.removed_at,
            ),
        )


class QueueStatusResponse(CamelModel):
    in_queue: bool
    queue_position: Optional[int] = None
    barber: Optional[SummaryResponse] = None
    entered_at: Optional[datetime] = None
    service_type: Optional[str] = None
    estimated_wait_time: Optional[int] = None


class QueueStatusEnvelope(CamelModel):
    queue_status: QueueStatusResponse


class NearbyBarberResponse(CamelModel):
    id: int
    name: str
    username: str
    lat: float
    long: float
    distance_km: float
    queue_length: int
    estimated_wait_time: int


class SearchLocation(CamelModel):
    lat: float
    long: float


class NearbyResponse(CamelModel):
    barbers: list[NearbyBarberResponse]
    search_location: SearchLocation
    radius_km: float


class BarberQueueItem(CamelModel):
    position: int
    queue_id: int
    user: SummaryResponse
    entered_at: datetime
    service_type: Optional[str] = None


class BarberQueueResponse(CamelModel):
    barber_id: int
    queue_length: int
    queue: list[BarberQueueItem]


class HealthResponse(BaseModel):
    status: str = "OK"
    message: str = "NextCut API is healthy"
    timestamp: datetime


class ErrorResponse(BaseModel):
    # request validation failures carry the list of field errors
    detail: Union[str, list[dict]]


class MessageResponse(BaseModel):
    msg: str

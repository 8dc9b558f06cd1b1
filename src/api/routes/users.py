"""
User endpoints
==============

POST /user/signup        -- create an account (email+password or phone)
POST /user/signin        -- exchange credentials for a bearer token
POST /user/joinqueue     -- join a barber's queue (moves you if queued elsewhere)
POST /user/leavequeue    -- leave your current queue
GET  /user/nearby        -- barbers within a radius, nearest first
GET  /user/queue-status  -- your position and estimated wait
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_current_user, get_db, get_principal
from src.api.middleware import limiter
from src.api.schemas import (
    ErrorResponse,
    JoinQueueRequest,
    JoinQueueResponse,
    MessageResponse,
    NearbyBarberResponse,
    NearbyResponse,
    QueueSlotResponse,
    QueueStatusEnvelope,
    QueueStatusResponse,
    RemovalResponse,
    SearchLocation,
    UserAuthResponse,
    UserResponse,
    UserSigninRequest,
    UserSignupRequest,
)
from src.config import settings
from src.domain.entities import Principal
from src.services import accounts, nearby, queueing

router = APIRouter(prefix="/user", tags=["user"])


@router.post(
    "/signup",
    status_code=201,
    response_model=UserAuthResponse,
    summary="Create a user account",
    responses={409: {"model": ErrorResponse}},
)
@limiter.limit(settings.auth_rate_limit)
async def signup(
    request: Request,
    body: UserSignupRequest,
    db: AsyncSession = Depends(get_db),
):
    user, token = await accounts.signup_user(
        db,
        name=body.name,
        email=body.email,
        phone_number=body.phone_number,
        password=body.password,
    )
    return UserAuthResponse(
        user=UserResponse.model_validate(user),
        token=token,
        msg="User created successfully",
    )


@router.post(
    "/signin",
    response_model=UserAuthResponse,
    summary="Sign in with email or phone number",
    responses={401: {"model": ErrorResponse}},
)
@limiter.limit(settings.auth_rate_limit)
async def signin(
    request: Request,
    body: UserSigninRequest,
    db: AsyncSession = Depends(get_db),
):
    user, token = await accounts.signin_user(
        db,
        email=body.email,
        phone_number=body.phone_number,
        password=body.password,
    )
    return UserAuthResponse(
        user=UserResponse.model_validate(user),
        token=token,
        msg="User Signed In Successfully",
    )


@router.post(
    "/joinqueue",
    status_code=201,
    response_model=JoinQueueResponse,
    summary="Join a barber's queue",
    description=(
        "Any existing queue membership is dropped in the same transaction; "
        "a user waits at one barber at a time."
    ),
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def join_queue(
    request: Request,
    body: JoinQueueRequest,
    principal: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    slot = await queueing.join_queue(
        db, principal.subject_id, body.barber_id, body.service
    )
    return JoinQueueResponse(
        msg="You have joined the queue",
        queue=QueueSlotResponse.model_validate(slot),
    )


@router.post(
    "/leavequeue",
    response_model=RemovalResponse,
    summary="Leave your current queue",
    responses={400: {"model": MessageResponse}},
)
@limiter.limit(settings.rate_limit)
async def leave_queue(
    request: Request,
    principal: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await queueing.leave_queue(db, principal.subject_id)
    if not result.success:
        return JSONResponse(status_code=400, content={"msg": result.reason})
    return RemovalResponse.from_result("You have been removed from the queue", result)


@router.get(
    "/nearby",
    response_model=NearbyResponse,
    summary="Find barbers near a location",
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def get_nearby(
    request: Request,
    lat: float = Query(..., description="Latitude in degrees"),
    long: float = Query(..., description="Longitude in degrees"),
    radius: Optional[float] = Query(None, description="Search radius in km"),
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    radius_km = settings.default_search_radius_km if radius is None else radius
    hits = await nearby.find_nearby(db, lat, long, radius_km)
    return NearbyResponse(
        barbers=[NearbyBarberResponse.model_validate(h) for h in hits],
        search_location=SearchLocation(lat=lat, long=long),
        radius_km=radius_km,
    )


@router.get(
    "/queue-status",
    response_model=QueueStatusEnvelope,
    summary="Your queue position and estimated wait",
)
@limiter.limit(settings.rate_limit)
async def queue_status(
    request: Request,
    principal: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    status = await queueing.get_queue_status(db, principal.subject_id)
    return QueueStatusEnvelope(
        queue_status=QueueStatusResponse.model_validate(status)
    )

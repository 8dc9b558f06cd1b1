"""
Barber endpoints
================

POST /barber/signup       -- register a shop at a fixed coordinate
POST /barber/signin       -- exchange credentials for a bearer token
GET  /barber/queue        -- your queue in service order (BARBER role)
POST /barber/remove-user  -- drop a user from your queue (BARBER role)
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_current_barber, get_db
from src.api.middleware import limiter
from src.api.schemas import (
    BarberAuthResponse,
    BarberQueueItem,
    BarberQueueResponse,
    BarberResponse,
    BarberSigninRequest,
    BarberSignupRequest,
    ErrorResponse,
    MessageResponse,
    RemovalResponse,
    RemoveUserRequest,
    SummaryResponse,
)
from src.config import settings
from src.domain.entities import Principal
from src.services import accounts, queueing

router = APIRouter(prefix="/barber", tags=["barber"])


@router.post(
    "/signup",
    status_code=201,
    response_model=BarberAuthResponse,
    summary="Register a barber",
    responses={409: {"model": ErrorResponse}},
)
@limiter.limit(settings.auth_rate_limit)
async def signup(
    request: Request,
    body: BarberSignupRequest,
    db: AsyncSession = Depends(get_db),
):
    barber, token = await accounts.signup_barber(
        db,
        name=body.name,
        username=body.username,
        password=body.password,
        lat=body.lat,
        long=body.long,
    )
    return BarberAuthResponse(
        barber=BarberResponse.model_validate(barber),
        token=token,
        msg="Barber Created Successfully",
    )


@router.post(
    "/signin",
    response_model=BarberAuthResponse,
    summary="Barber sign in",
    responses={401: {"model": ErrorResponse}},
)
@limiter.limit(settings.auth_rate_limit)
async def signin(
    request: Request,
    body: BarberSigninRequest,
    db: AsyncSession = Depends(get_db),
):
    barber, token = await accounts.signin_barber(
        db, username=body.username, password=body.password
    )
    return BarberAuthResponse(
        barber=BarberResponse.model_validate(barber),
        token=token,
        msg="Barber Signed In Successfully",
    )


@router.get(
    "/queue",
    response_model=BarberQueueResponse,
    summary="List your queue in service order",
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def get_queue(
    request: Request,
    principal: Principal = Depends(get_current_barber),
    db: AsyncSession = Depends(get_db),
):
    slots = await queueing.list_queue(db, principal.subject_id)
    return BarberQueueResponse(
        barber_id=principal.subject_id,
        queue_length=len(slots),
        queue=[
            BarberQueueItem(
                position=s.position,
                queue_id=s.id,
                user=SummaryResponse(id=s.user.id, name=s.user.name),
                entered_at=s.entered_at,
                service_type=s.service_type,
            )
            for s in slots
        ],
    )


@router.post(
    "/remove-user",
    response_model=RemovalResponse,
    summary="Remove a user from your queue",
    responses={400: {"model": MessageResponse}, 403: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def remove_user(
    request: Request,
    body: RemoveUserRequest,
    principal: Principal = Depends(get_current_barber),
    db: AsyncSession = Depends(get_db),
):
    result = await queueing.remove_user(db, principal.subject_id, body.user_id)
    if not result.success:
        return JSONResponse(status_code=400, content={"msg": result.reason})
    return RemovalResponse.from_result("User removed from queue successfully", result)

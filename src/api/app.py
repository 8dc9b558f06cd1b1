"""
FastAPI application factory.

* Registers routes for users, barbers and health.
* Maps the domain error taxonomy to HTTP statuses.
* Applies CORS and rate-limiting middleware.
* Disposes the DB engine on shutdown via lifespan events.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from src.api.middleware import limiter
from src.api.routes import barbers, health, users
from src.config import settings
from src.domain.exceptions import InternalError, QueueServiceError
from src.infrastructure.database import engine

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup; release pooled DB connections on shutdown."""
    logger.info("NextCut API starting")
    yield
    await engine.dispose()
    logger.info("NextCut API stopped")


async def queue_service_error_handler(
    request: Request, exc: QueueServiceError
) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error(
            "Internal error on %s %s", request.method, request.url.path, exc_info=exc
        )
        detail = exc.message if settings.debug else INTERNAL_ERROR_MESSAGE
    else:
        detail = exc.message
    return JSONResponse(status_code=exc.status_code, content={"detail": detail})


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Database failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    detail = str(exc) if settings.debug else INTERNAL_ERROR_MESSAGE
    return JSONResponse(status_code=500, content={"detail": detail})


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Missing / malformed input is a 400 in this API, not FastAPI's 422."""
    logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=400, content={"detail": jsonable_encoder(exc.errors())}
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="NextCut Queue API",
        description=(
            "Walk-in queues for barbers.  Customers find nearby shops, join "
            "one queue at a time and track their position and estimated "
            "wait; barbers manage their own queue."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Error taxonomy
    app.add_exception_handler(QueueServiceError, queue_service_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(barbers.router)

    return app

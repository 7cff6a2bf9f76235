import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import (
    activity,
    auth,
    bookings,
    calendar,
    health,
    links,
    matrix,
    preferences,
    realtime,
    resources,
    schedule,
    settings as settings_routes,
    students,
    time_slots,
)
from app.core.config import get_settings
from app.core.exceptions import AppError
from app.core.logging import setup_logging
from app.core.middleware import RequestLoggingMiddleware, RequestSizeLimitMiddleware

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logging(environment=settings.environment, level_name=settings.log_level)
    logger.info("%s starting (%s)", settings.project_name, settings.environment)
    yield


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "details": exc.details},
    )


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)

app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_size_bytes)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(auth.router, prefix=f"{settings.api_prefix}/auth", tags=["auth"])
app.include_router(settings_routes.router, prefix=settings.api_prefix, tags=["settings"])
app.include_router(time_slots.router, prefix=settings.api_prefix, tags=["time-grid"])
app.include_router(matrix.router, prefix=settings.api_prefix, tags=["matrix"])
app.include_router(schedule.router, prefix=settings.api_prefix, tags=["schedule"])
app.include_router(resources.router, prefix=settings.api_prefix, tags=["resources"])
app.include_router(bookings.router, prefix=settings.api_prefix, tags=["bookings"])
app.include_router(calendar.router, prefix=settings.api_prefix, tags=["calendar"])
app.include_router(links.router, prefix=settings.api_prefix, tags=["links"])
app.include_router(students.router, prefix=settings.api_prefix, tags=["students"])
app.include_router(preferences.router, prefix=settings.api_prefix, tags=["preferences"])
app.include_router(activity.router, prefix=settings.api_prefix, tags=["activity"])
app.include_router(realtime.router, prefix=settings.api_prefix, tags=["realtime"])

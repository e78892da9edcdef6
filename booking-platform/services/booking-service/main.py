# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Booking Service
===============
Coordinates studio and outside-broadcast production bookings: producers
request productions, a booking officer assigns crew, crew follow their
schedules, report issues and log overtime.

Production status state-machine:
    requested ─► confirmed ─► completed
    requested ─► cancelled
    confirmed ─► overtime ─► completed | cancelled
    confirmed ─► cancelled

Crew conflicts are advisory: they are reported with every assignment,
never enforced.

Port: 8005
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from booking.controllers import (
    announcement_controller,
    availability_controller,
    issue_controller,
    notification_controller,
    production_controller,
    staff_controller,
    system_controller,
)
from booking.core.config import settings
from booking.core.dependencies import get_production_repo, get_store
from booking.core.exceptions import (
    BookingError,
    Forbidden,
    InvalidTransition,
    NotFound,
    StoreUnavailable,
)
from booking.core.logging import get_logger
from booking.metrics.prometheus import PRODUCTIONS_BY_STATUS
from booking.middleware import MetricsMiddleware, RequestIDMiddleware
from booking.models.domain import PRODUCTION_STATUSES
from booking.repositories.sql_store import SqlDocumentStore

logger = get_logger(__name__)

ERROR_STATUS: dict[type, int] = {
    NotFound: 404,
    Forbidden: 403,
    InvalidTransition: 409,
    StoreUnavailable: 503,
}


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    store = get_store()
    if isinstance(store, SqlDocumentStore):
        store.create_schema()
    # Seed gauges from the store
    try:
        repo = get_production_repo()
        for status in PRODUCTION_STATUSES:
            PRODUCTIONS_BY_STATUS.labels(status=status).set(await repo.count_by_status(status))
        logger.info("Prometheus gauges loaded from document store")
    except StoreUnavailable:
        logger.warning("Could not seed gauges — document store may not be ready yet")
    logger.info(
        "%s v%s started (store=%s)",
        settings.SERVICE_NAME, settings.SERVICE_VERSION, settings.DOCUMENT_STORE,
    )
    yield
    store.dispose()
    logger.info("Shutting down — document store disposed")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Booking Service",
    description="Production booking, crew assignment and lifecycle management.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    status_code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 400
    )
    if status_code >= 500:
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    else:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    return JSONResponse(status_code=500, content={"error": "internal_server_error", "detail": str(exc)})


app.include_router(system_controller.router)
app.include_router(production_controller.router)
app.include_router(availability_controller.router)
app.include_router(staff_controller.router)
app.include_router(issue_controller.router)
app.include_router(notification_controller.router)
app.include_router(announcement_controller.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level=settings.LOG_LEVEL.lower())

"""
Seat Reservation API - Main Application Entry Point

Books N seats out of a fixed venue grid and resets the grid, with:
- Server-side seat planning decided and committed under one lock
- Row-first allocation that keeps parties together when a row fits
- Optional Redis backend shared by several workers
- Structured logging with request correlation and Prometheus metrics
"""

from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from seat_reservation.core.config import get_settings
from seat_reservation.core.logging import setup_logging, get_logger
from seat_reservation.core.metrics import metrics_endpoint, record_seats_available
from seat_reservation.api.errors import register_exception_handlers
from seat_reservation.api.router import api_router
from seat_reservation.api.middleware import RequestLoggingMiddleware
from seat_reservation.services.reservation_store import (
    ReservationStore,
    get_reservation_store,
    close_reservation_store,
)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        backend=settings.STORE_BACKEND,
        layout=f"{settings.SEAT_ROWS}x{settings.SEATS_PER_ROW}",
    )

    store = get_reservation_store()
    if await store.ping():
        availability = await store.availability()
        record_seats_available(availability["available"])
        logger.info("store_ready", **availability)
    else:
        logger.warning("store_unreachable", backend=settings.STORE_BACKEND)

    yield

    await close_reservation_store()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Seat reservation API with server-side, concurrency-safe seat allocation",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS (the booking client is served from another origin)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)
register_exception_handlers(app)

app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check(store: ReservationStore = Depends(get_reservation_store)):
    """Health check endpoint for Docker and load balancers."""
    reachable = await store.ping()
    body = {
        "status": "healthy" if reachable else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "backend": settings.STORE_BACKEND,
    }
    if reachable:
        body["seats"] = await store.availability()
    return body


@app.get("/metrics", tags=["Health"])
def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }

"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from seat_reservation.api.routes import seats

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(seats.router)

"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from studio_booking.api.routes import profile, bookings, admin

api_router = APIRouter(prefix="/api")
api_router.include_router(profile.router)
api_router.include_router(bookings.router)
api_router.include_router(admin.router)

"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from carpool.api.routes import bookings, invitations, messages, profiles, reviews, rides, users, vehicles
from carpool.core.config import get_settings

api_router = APIRouter(prefix=get_settings().API_PREFIX)
api_router.include_router(rides.router)
api_router.include_router(bookings.router)
api_router.include_router(invitations.router)
api_router.include_router(reviews.router)
api_router.include_router(messages.router)
api_router.include_router(profiles.router)
api_router.include_router(users.router)
api_router.include_router(vehicles.router)

"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from app.api.routes import availability, blocks, bookings, customers, pricing

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(availability.router)
api_router.include_router(pricing.router)
api_router.include_router(bookings.router)
api_router.include_router(customers.router)
api_router.include_router(blocks.router)

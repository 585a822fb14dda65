"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter

from airline.api.routes import admin, airports, auth, baggage, bookings, flights, passengers, payments, reports, seats

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(airports.router)
api_router.include_router(flights.router)
api_router.include_router(seats.router)
api_router.include_router(bookings.router)
api_router.include_router(passengers.router)
api_router.include_router(payments.router)
api_router.include_router(baggage.router)
api_router.include_router(admin.router)
api_router.include_router(reports.router)

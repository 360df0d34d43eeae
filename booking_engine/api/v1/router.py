"""
API v1 router setup
Organized into: public (booking page) and dashboard (establishment staff) routes
"""
from fastapi import APIRouter

from booking_engine.api.v1.public import availability, booking, customers
from booking_engine.api.v1.dashboard import appointments, establishments

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_v1_router.include_router(
    availability.router,
    prefix="/public",
    tags=["Public"]
)

api_v1_router.include_router(
    booking.router,
    prefix="/public",
    tags=["Public"]
)

api_v1_router.include_router(
    customers.router,
    prefix="/public",
    tags=["Public"]
)

# ============================================================================
# DASHBOARD ROUTES (establishment resolved by the upstream auth layer)
# ============================================================================
api_v1_router.include_router(
    appointments.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)

api_v1_router.include_router(
    establishments.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)


@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """API information and available endpoint groups"""
    return {
        "version": "1.0",
        "authentication": {
            "public": "No authentication required",
            "dashboard": "X-Establishment-ID forwarded by the auth layer",
        }
    }

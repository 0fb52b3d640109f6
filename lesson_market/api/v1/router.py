from fastapi import APIRouter

from lesson_market.api.v1.endpoints import bookings, health, lessons, schedule

api_router = APIRouter()

api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"],
)

api_router.include_router(
    lessons.router,
    prefix="/lessons",
    tags=["lessons"],
)

api_router.include_router(
    schedule.router,
    prefix="/schedule",
    tags=["schedule"],
)

api_router.include_router(
    bookings.router,
    prefix="/bookings",
    tags=["bookings"],
)

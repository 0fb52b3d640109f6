from lesson_market.services.bookings import BookingService
from lesson_market.services.lesson import LessonService

__all__ = ["BookingService", "LessonService"]

from lesson_market.models.bookings import Booking
from lesson_market.models.lesson import Lesson, LessonSlot
from lesson_market.models.users import Instructor

__all__ = [
    "Booking",
    "Instructor",
    "Lesson",
    "LessonSlot",
]

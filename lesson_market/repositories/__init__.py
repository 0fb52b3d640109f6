from lesson_market.repositories.base import BaseRepository
from lesson_market.repositories.booking import BookingRepository
from lesson_market.repositories.lesson import LessonRepository
from lesson_market.repositories.slot import SlotRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "LessonRepository",
    "SlotRepository",
]

from datetime import datetime, timedelta
from itertools import count

import pytz

from lesson_market.schemas import BookingSlot, InstructorSummary, LessonRecord

_ids = count(1)


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=pytz.utc)


def make_slot(start: datetime, **kwargs) -> BookingSlot:
    fields = {
        "id": next(_ids),
        "lesson_id": 0,
        "date_time_start": start,
        "date_time_end": start + timedelta(hours=1),
        "booking_deadline": start - timedelta(days=1),
        "capacity": 5,
        "price": 3000,
    }
    fields.update(kwargs)
    return BookingSlot(**fields)


def make_lesson(rating: float = 0.0, slots: list[BookingSlot] | None = None, **kwargs) -> LessonRecord:
    fields = {
        "id": next(_ids),
        "title": "Lesson",
        "category": "music",
        "status": "published",
        "instructor": InstructorSummary(id=1, name="Instructor", average_rating=rating),
        "slots": slots or [],
    }
    fields.update(kwargs)
    return LessonRecord(**fields)

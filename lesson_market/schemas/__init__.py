from lesson_market.schemas.bookings import BookingCreate, BookingResponse
from lesson_market.schemas.filters import FilterCriteria, FilterOptions, PriceBucket, Toggle
from lesson_market.schemas.lesson import (
    BookingSlot,
    DayAvailability,
    InstructorSummary,
    LessonCapacityUpdate,
    LessonPage,
    LessonRecord,
    LessonStatusUpdate,
)
from lesson_market.schemas.schedule import (
    DraftRequest,
    DraftResponse,
    ScheduleDraft,
    SlotDraft,
    SlotTemplate,
    SlotWriteRecord,
)

__all__ = [
    "BookingCreate",
    "BookingResponse",
    "BookingSlot",
    "DayAvailability",
    "DraftRequest",
    "DraftResponse",
    "FilterCriteria",
    "FilterOptions",
    "InstructorSummary",
    "LessonCapacityUpdate",
    "LessonPage",
    "LessonRecord",
    "LessonStatusUpdate",
    "PriceBucket",
    "ScheduleDraft",
    "SlotDraft",
    "SlotTemplate",
    "SlotWriteRecord",
    "Toggle",
]

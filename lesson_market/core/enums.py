from enum import Enum


class LessonStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class SlotStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class LocationType(str, Enum):
    ONLINE = "online"
    IN_PERSON = "in_person"
    HYBRID = "hybrid"


class LessonType(str, Enum):
    MONTHLY = "monthly"
    ONE_TIME = "one_time"
    COURSE = "course"


class SortMode(str, Enum):
    RECOMMENDED = "recommended"
    POPULAR = "popular"
    NEW = "new"
    DATE = "date"
    PRICE_ASC = "price_asc"
    RATING = "rating"


# Allowed status changes, anything else is rejected
LESSON_TRANSITIONS: dict[LessonStatus, set[LessonStatus]] = {
    LessonStatus.DRAFT: {LessonStatus.PUBLISHED, LessonStatus.CANCELLED},
    LessonStatus.PUBLISHED: {LessonStatus.DRAFT, LessonStatus.CANCELLED, LessonStatus.COMPLETED},
    LessonStatus.CANCELLED: set(),
    LessonStatus.COMPLETED: set(),
}

BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.CANCELLED, BookingStatus.COMPLETED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}

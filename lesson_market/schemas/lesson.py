from datetime import datetime

import pytz
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from lesson_market.core.enums import LessonStatus, LessonType, LocationType, SlotStatus


def _as_utc(value: datetime) -> datetime:
    """Storage hands back naive values for UTC instants on some backends."""
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


class InstructorSummary(BaseModel):
    """Instructor fields joined onto a lesson."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    average_rating: float = 0.0
    is_verified: bool = False
    profile_image_url: str | None = None


class BookingSlot(BaseModel):
    """Stored occurrence of a lesson."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    lesson_id: int
    date_time_start: datetime
    date_time_end: datetime
    booking_deadline: datetime
    capacity: int = Field(ge=1)
    current_participants_count: int = Field(0, ge=0)
    price: int = Field(0, ge=0)
    discount_percentage: int | None = Field(None, ge=0, le=100)
    status: SlotStatus = SlotStatus.PUBLISHED
    notes: str | None = None
    venue_details: str | None = None

    @field_validator("date_time_start", "date_time_end", "booking_deadline")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @model_validator(mode="after")
    def check_invariants(self) -> "BookingSlot":
        if self.date_time_end <= self.date_time_start:
            raise ValueError("date_time_end must be after date_time_start")
        if self.booking_deadline > self.date_time_start:
            raise ValueError("booking_deadline must not be after date_time_start")
        if self.current_participants_count > self.capacity:
            raise ValueError("current_participants_count exceeds capacity")
        return self

    @property
    def is_full(self) -> bool:
        return self.current_participants_count >= self.capacity

    @property
    def remaining_seats(self) -> int:
        return max(0, self.capacity - self.current_participants_count)

    @property
    def discounted_price(self) -> int:
        if not self.discount_percentage:
            return self.price
        return round(self.price * (1 - self.discount_percentage / 100))

    def is_bookable(self, now: datetime) -> bool:
        """Published, not full and still before its booking deadline."""
        return (
            self.status == SlotStatus.PUBLISHED
            and not self.is_full
            and _as_utc(now) <= self.booking_deadline
        )


class LessonRecord(BaseModel):
    """Lesson with its instructor summary and slots, as consumed by the catalog."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    category: str
    subcategory: str | None = None
    location_type: LocationType = LocationType.ONLINE
    lesson_type: LessonType = LessonType.ONE_TIME
    price: int = Field(0, ge=0)
    duration: int = Field(60, ge=1)
    capacity: int = Field(10, ge=1)
    status: LessonStatus = LessonStatus.DRAFT
    discount_percentage: int | None = Field(None, ge=0, le=100)
    is_featured: bool = False
    review_count: int = 0
    classroom_area: str | None = None
    classroom_city: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    instructor: InstructorSummary | None = None
    slots: list[BookingSlot] = Field(default_factory=list)

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_utc(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v) if v is not None else None

    @property
    def is_monthly(self) -> bool:
        return self.lesson_type == LessonType.MONTHLY

    @property
    def is_single_course(self) -> bool:
        return self.lesson_type in (LessonType.ONE_TIME, LessonType.COURSE)

    @property
    def is_online(self) -> bool:
        return self.location_type in (LocationType.ONLINE, LocationType.HYBRID)

    @property
    def is_in_person(self) -> bool:
        return self.location_type in (LocationType.IN_PERSON, LocationType.HYBRID)

    @property
    def rating(self) -> float:
        return self.instructor.average_rating if self.instructor else 0.0


class LessonPage(BaseModel):
    """One page of catalog results."""

    items: list[LessonRecord]
    page: int
    page_size: int
    total: int
    total_pages: int


class LessonStatusUpdate(BaseModel):
    status: LessonStatus


class LessonCapacityUpdate(BaseModel):
    capacity: int = Field(..., ge=1)


class DayAvailability(BaseModel):
    """Bookable slots of a lesson on one local date."""

    date: str
    slots: list[BookingSlot]

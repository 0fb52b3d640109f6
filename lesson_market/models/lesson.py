from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lesson_market.core.enums import LessonStatus, SlotStatus
from lesson_market.db.base import Base

if TYPE_CHECKING:
    from lesson_market.models import Booking, Instructor


class Lesson(Base):
    """Lesson offered by an instructor."""

    __tablename__ = "lessons"

    instructor_id: Mapped[int | None] = mapped_column(
        ForeignKey("instructors.id", ondelete="CASCADE"),
        nullable=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    subcategory: Mapped[str | None] = mapped_column(String(100), nullable=True)
    location_type: Mapped[str] = mapped_column(String(20), default="online")
    lesson_type: Mapped[str] = mapped_column(String(20), default="one_time")
    price: Mapped[int] = mapped_column(default=0)
    duration: Mapped[int] = mapped_column(default=60)
    capacity: Mapped[int] = mapped_column(default=10)
    status: Mapped[str] = mapped_column(String(20), default=LessonStatus.DRAFT.value)
    discount_percentage: Mapped[int | None] = mapped_column(nullable=True)
    is_featured: Mapped[bool] = mapped_column(default=False)
    review_count: Mapped[int] = mapped_column(default=0)
    classroom_area: Mapped[str | None] = mapped_column(String(100), nullable=True)
    classroom_city: Mapped[str | None] = mapped_column(String(100), nullable=True)

    instructor: Mapped["Instructor | None"] = relationship("Instructor", back_populates="lessons")
    slots: Mapped[list["LessonSlot"]] = relationship(
        "LessonSlot",
        back_populates="lesson",
        cascade="all, delete-orphan",
        order_by="LessonSlot.date_time_start",
    )

    def __repr__(self) -> str:
        return f"<Lesson(id={self.id}, title='{self.title}')>"


class LessonSlot(Base):
    """One bookable occurrence of a lesson."""

    __tablename__ = "lesson_slots"

    lesson_id: Mapped[int] = mapped_column(
        ForeignKey("lessons.id", ondelete="CASCADE"),
        nullable=False,
    )
    date_time_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    date_time_end: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    booking_deadline: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    capacity: Mapped[int] = mapped_column(default=10)
    current_participants_count: Mapped[int] = mapped_column(default=0)
    price: Mapped[int] = mapped_column(default=0)
    discount_percentage: Mapped[int | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=SlotStatus.PUBLISHED.value)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    venue_details: Mapped[str | None] = mapped_column(Text, nullable=True)

    lesson: Mapped["Lesson"] = relationship("Lesson", back_populates="slots")
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="slot")

    def __repr__(self) -> str:
        return f"<LessonSlot(id={self.id}, lesson_id={self.lesson_id}, start={self.date_time_start})>"

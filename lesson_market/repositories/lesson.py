from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lesson_market.core.enums import BookingStatus, LessonStatus, SlotStatus
from lesson_market.models import Booking, Lesson, LessonSlot
from lesson_market.repositories.base import BaseRepository


class LessonRepository(BaseRepository[Lesson]):
    """Repository for Lesson-specific database operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Lesson, session)

    async def get_with_slots(self, lesson_id: int) -> Lesson | None:
        """Get a lesson with its instructor and slots loaded."""
        query = (
            select(Lesson)
            .where(Lesson.id == lesson_id)
            .options(selectinload(Lesson.instructor), selectinload(Lesson.slots))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_published_with_upcoming_slots(self, now: datetime) -> list[Lesson]:
        """Published lessons having at least one published slot that has not started yet."""
        upcoming = (
            select(LessonSlot.lesson_id)
            .where(
                LessonSlot.status == SlotStatus.PUBLISHED.value,
                LessonSlot.date_time_start >= now,
            )
            .distinct()
        )
        query = (
            select(Lesson)
            .where(Lesson.status == LessonStatus.PUBLISHED.value, Lesson.id.in_(upcoming))
            .options(selectinload(Lesson.instructor), selectinload(Lesson.slots))
            .order_by(Lesson.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_confirmed_participants(self, lesson_id: int) -> int:
        """Largest number of confirmed bookings held by any single slot of the lesson."""
        per_slot = (
            select(func.count(Booking.id).label("confirmed"))
            .join(LessonSlot, Booking.slot_id == LessonSlot.id)
            .where(
                LessonSlot.lesson_id == lesson_id,
                Booking.status == BookingStatus.CONFIRMED.value,
            )
            .group_by(Booking.slot_id)
            .subquery()
        )
        result = await self.session.execute(select(func.max(per_slot.c.confirmed)))
        return result.scalar_one_or_none() or 0

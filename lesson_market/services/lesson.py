import logging
from datetime import datetime

import pytz
from sqlalchemy.ext.asyncio import AsyncSession

from lesson_market.core import logs
from lesson_market.core.config import settings
from lesson_market.core.enums import LESSON_TRANSITIONS, LessonStatus, SlotStatus, SortMode
from lesson_market.core.exceptions import CapacityError, InvalidTransitionError, NotFoundError
from lesson_market.core.timezone import get_timezone
from lesson_market.models import Lesson, LessonSlot
from lesson_market.repositories import LessonRepository, SlotRepository
from lesson_market.schemas.filters import FilterCriteria
from lesson_market.schemas.lesson import BookingSlot, LessonPage, LessonRecord
from lesson_market.schemas.schedule import ScheduleDraft
from lesson_market.services import catalog, slots

logger = logging.getLogger(__name__)


class LessonService:
    """
    Service layer for Lesson business logic.

    Loads lessons from storage, validates them into LessonRecords once and hands
    them to the catalog and slot generator.
    """

    def __init__(self, session: AsyncSession):
        self.repository = LessonRepository(session)
        self.slot_repository = SlotRepository(session)

    async def _get_or_raise(self, lesson_id: int) -> Lesson:
        lesson = await self.repository.get_with_slots(lesson_id)
        if not lesson:
            raise NotFoundError(f"Lesson with id {lesson_id} not found")
        return lesson

    async def get_lesson(self, lesson_id: int) -> LessonRecord:
        return LessonRecord.model_validate(await self._get_or_raise(lesson_id))

    async def search_lessons(
        self,
        criteria: FilterCriteria,
        sort: SortMode = SortMode.RECOMMENDED,
        page: int = 1,
        now: datetime | None = None,
    ) -> LessonPage:
        """Search published lessons that still have upcoming slots."""
        now = now or datetime.now(pytz.utc)
        lessons = await self.repository.get_published_with_upcoming_slots(now)
        records = [LessonRecord.model_validate(lesson) for lesson in lessons]
        result = catalog.search(records, criteria, sort, page, settings.page_size, now=now)
        logger.info(logs.LESSONS_SEARCHED, result.total, result.page, result.total_pages, sort.value)
        return result

    async def get_availability(self, lesson_id: int, now: datetime | None = None) -> dict[str, list[BookingSlot]]:
        """Bookable slots of a lesson grouped by local date."""
        now = now or datetime.now(pytz.utc)
        lesson = await self.get_lesson(lesson_id)
        grouped = catalog.group_bookable_slots(lesson.slots, now)
        return {day.isoformat(): day_slots for day, day_slots in grouped.items()}

    async def change_status(self, lesson_id: int, status: LessonStatus) -> LessonRecord:
        lesson = await self._get_or_raise(lesson_id)
        current = LessonStatus(lesson.status)
        if status not in LESSON_TRANSITIONS[current]:
            logger.warning(logs.LESSON_STATUS_REJECTED, lesson_id, current.value, status.value)
            raise InvalidTransitionError(f"Cannot change lesson status from {current.value} to {status.value}")

        if status in (LessonStatus.CANCELLED, LessonStatus.COMPLETED):
            # slots follow the lesson, booked ones are kept for history
            for slot in lesson.slots:
                if slot.status == SlotStatus.PUBLISHED.value:
                    slot.status = SlotStatus(status.value).value

        await self.repository.update(lesson, {"status": status.value})
        logger.info(logs.LESSON_STATUS_CHANGED, lesson_id, current.value, status.value)
        return await self.get_lesson(lesson_id)

    async def update_capacity(self, lesson_id: int, capacity: int) -> LessonRecord:
        lesson = await self._get_or_raise(lesson_id)
        confirmed = await self.repository.count_confirmed_participants(lesson_id)
        confirmed = max([confirmed, *(slot.current_participants_count for slot in lesson.slots)])
        if capacity < confirmed:
            logger.warning(logs.LESSON_CAPACITY_REJECTED, lesson_id, capacity, confirmed)
            raise CapacityError(f"Capacity {capacity} is below {confirmed} confirmed participants")

        previous = lesson.capacity
        await self.repository.update(lesson, {"capacity": capacity})
        logger.info(logs.LESSON_CAPACITY_CHANGED, lesson_id, previous, capacity)
        return await self.get_lesson(lesson_id)

    async def commit_slots(self, lesson_id: int, draft: ScheduleDraft) -> list[BookingSlot]:
        """Write one published slot per selected date of the draft."""
        await self._get_or_raise(lesson_id)
        records = slots.build_slot_records(draft, lesson_id, get_timezone())
        if not records:
            logger.info(logs.SLOTS_NOTHING_TO_COMMIT, lesson_id)
            return []
        rows = [record.model_dump() | {"status": record.status.value} for record in records]
        created: list[LessonSlot] = await self.slot_repository.create_many(rows)
        logger.info(logs.SLOTS_COMMITTED, len(created), lesson_id)
        return [BookingSlot.model_validate(slot) for slot in created]

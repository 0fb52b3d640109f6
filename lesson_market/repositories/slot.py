from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lesson_market.models import LessonSlot
from lesson_market.repositories.base import BaseRepository


class SlotRepository(BaseRepository[LessonSlot]):
    """Repository for lesson slots."""

    def __init__(self, session: AsyncSession):
        super().__init__(LessonSlot, session)

    async def get_for_update(self, slot_id: int) -> LessonSlot | None:
        query = select(LessonSlot).where(LessonSlot.id == slot_id).with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

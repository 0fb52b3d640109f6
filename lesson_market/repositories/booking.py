from sqlalchemy.ext.asyncio import AsyncSession

from lesson_market.models import Booking
from lesson_market.repositories.base import BaseRepository


class BookingRepository(BaseRepository[Booking]):
    """Repository for bookings."""

    def __init__(self, session: AsyncSession):
        super().__init__(Booking, session)

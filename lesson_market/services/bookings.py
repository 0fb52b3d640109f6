import logging
from datetime import datetime

import pytz
from sqlalchemy.ext.asyncio import AsyncSession

from lesson_market.core import logs
from lesson_market.core.enums import BOOKING_TRANSITIONS, BookingStatus
from lesson_market.core.exceptions import CapacityError, InvalidTransitionError, NotFoundError, SlotUnavailableError
from lesson_market.models import Booking, LessonSlot
from lesson_market.repositories import BookingRepository, SlotRepository
from lesson_market.schemas.bookings import BookingResponse
from lesson_market.schemas.lesson import BookingSlot

logger = logging.getLogger(__name__)


class BookingService:
    """Keeps booking statuses and slot participant counts in step."""

    def __init__(self, session: AsyncSession) -> None:
        self.repository = BookingRepository(session)
        self.slot_repository = SlotRepository(session)

    async def _slot(self, slot_id: int) -> LessonSlot:
        slot = await self.slot_repository.get_for_update(slot_id)
        if not slot:
            raise NotFoundError(f"Slot with id {slot_id} not found")
        return slot

    async def _booking(self, booking_id: int) -> Booking:
        booking = await self.repository.get_by_id(booking_id)
        if not booking:
            raise NotFoundError(f"Booking with id {booking_id} not found")
        return booking

    @staticmethod
    def _check_transition(booking: Booking, status: BookingStatus) -> BookingStatus:
        current = BookingStatus(booking.status)
        if status not in BOOKING_TRANSITIONS[current]:
            raise InvalidTransitionError(f"Cannot change booking status from {current.value} to {status.value}")
        return current

    async def request(self, slot_id: int, user_id: str, now: datetime | None = None) -> BookingResponse:
        """Create a pending booking on a bookable slot."""
        now = now or datetime.now(pytz.utc)
        slot = await self._slot(slot_id)
        view = BookingSlot.model_validate(slot)
        if view.is_full:
            logger.info(logs.BOOKING_REJECTED, slot_id, "full")
            raise CapacityError("This slot is fully booked")
        if not view.is_bookable(now):
            logger.info(logs.BOOKING_REJECTED, slot_id, "not bookable")
            raise SlotUnavailableError("This slot is no longer open for booking")

        booking = await self.repository.create(
            {"slot_id": slot_id, "user_id": user_id, "status": BookingStatus.PENDING.value}
        )
        logger.info(logs.BOOKING_REQUESTED, booking.id, slot_id)
        return BookingResponse.model_validate(booking)

    async def confirm(self, booking_id: int) -> BookingResponse:
        booking = await self._booking(booking_id)
        current = self._check_transition(booking, BookingStatus.CONFIRMED)
        slot = await self._slot(booking.slot_id)
        if slot.current_participants_count >= slot.capacity:
            raise CapacityError("This slot is fully booked")

        await self.slot_repository.update(
            slot, {"current_participants_count": slot.current_participants_count + 1}
        )
        return await self._set_status(booking, current, BookingStatus.CONFIRMED)

    async def cancel(self, booking_id: int) -> BookingResponse:
        booking = await self._booking(booking_id)
        current = self._check_transition(booking, BookingStatus.CANCELLED)
        if current == BookingStatus.CONFIRMED:
            slot = await self._slot(booking.slot_id)
            slot.current_participants_count = max(0, slot.current_participants_count - 1)
        return await self._set_status(booking, current, BookingStatus.CANCELLED)

    async def complete(self, booking_id: int) -> BookingResponse:
        booking = await self._booking(booking_id)
        current = self._check_transition(booking, BookingStatus.COMPLETED)
        return await self._set_status(booking, current, BookingStatus.COMPLETED)

    async def _set_status(self, booking: Booking, current: BookingStatus, status: BookingStatus) -> BookingResponse:
        booking = await self.repository.update(booking, {"status": status.value})
        logger.info(logs.BOOKING_STATUS_CHANGED, booking.id, current.value, status.value)
        return BookingResponse.model_validate(booking)

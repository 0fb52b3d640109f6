from fastapi import APIRouter, status

from lesson_market.api.deps import DatabaseSession
from lesson_market.schemas import BookingCreate, BookingResponse
from lesson_market.services import BookingService

router = APIRouter()


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def request_booking(db: DatabaseSession, body: BookingCreate) -> BookingResponse:
    """Request a seat on a slot; the booking starts as pending."""
    service = BookingService(db)
    return await service.request(body.slot_id, body.user_id)


@router.post("/{booking_id}/confirm", response_model=BookingResponse)
async def confirm_booking(db: DatabaseSession, booking_id: int) -> BookingResponse:
    service = BookingService(db)
    return await service.confirm(booking_id)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(db: DatabaseSession, booking_id: int) -> BookingResponse:
    service = BookingService(db)
    return await service.cancel(booking_id)


@router.post("/{booking_id}/complete", response_model=BookingResponse)
async def complete_booking(db: DatabaseSession, booking_id: int) -> BookingResponse:
    service = BookingService(db)
    return await service.complete(booking_id)

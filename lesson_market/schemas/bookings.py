from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from lesson_market.core.enums import BookingStatus


class BookingCreate(BaseModel):
    """Schema for requesting a seat on a slot."""

    slot_id: int
    user_id: str = Field(..., min_length=1, max_length=64)


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    slot_id: int
    user_id: str
    status: BookingStatus
    created_at: datetime

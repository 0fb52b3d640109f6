from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lesson_market.core.enums import BookingStatus
from lesson_market.db.base import Base

if TYPE_CHECKING:
    from lesson_market.models import LessonSlot


class Booking(Base):
    """A learner's seat on a lesson slot."""

    __tablename__ = "bookings"

    slot_id: Mapped[int] = mapped_column(
        ForeignKey("lesson_slots.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=BookingStatus.PENDING.value)

    slot: Mapped["LessonSlot"] = relationship("LessonSlot", back_populates="bookings")

from typing import TYPE_CHECKING

from sqlalchemy import Float, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lesson_market.db.base import Base

if TYPE_CHECKING:
    from lesson_market.models import Lesson


class Instructor(Base):
    """Instructor profile, the owner of lessons."""

    __tablename__ = "instructors"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    average_rating: Mapped[float] = mapped_column(Float, default=0.0)
    is_verified: Mapped[bool] = mapped_column(default=False)
    profile_image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    lessons: Mapped[list["Lesson"]] = relationship("Lesson", back_populates="instructor")

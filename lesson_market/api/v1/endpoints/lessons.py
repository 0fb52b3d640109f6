from datetime import date
from typing import Annotated

from fastapi import APIRouter, Query, status

from lesson_market.api.deps import DatabaseSession
from lesson_market.core.enums import SortMode
from lesson_market.schemas import (
    BookingSlot,
    DayAvailability,
    FilterCriteria,
    FilterOptions,
    LessonCapacityUpdate,
    LessonPage,
    LessonRecord,
    LessonStatusUpdate,
    ScheduleDraft,
)
from lesson_market.services import LessonService

router = APIRouter()


@router.get("", response_model=LessonPage)
async def search_lessons(
    db: DatabaseSession,
    keyword: str = "",
    category: str | None = None,
    subcategories: Annotated[list[str] | None, Query()] = None,
    monthly: bool = True,
    single_course: bool = True,
    online: bool = True,
    in_person: bool = True,
    areas: Annotated[list[str] | None, Query()] = None,
    all_dates: bool = True,
    start_date: date | None = None,
    end_date: date | None = None,
    monthly_buckets: Annotated[list[str] | None, Query()] = None,
    single_course_buckets: Annotated[list[str] | None, Query()] = None,
    min_price: Annotated[int | None, Query(ge=0)] = None,
    max_price: Annotated[int | None, Query(ge=0)] = None,
    sort: SortMode = SortMode.RECOMMENDED,
    page: Annotated[int, Query(ge=1)] = 1,
) -> LessonPage:
    """Search published lessons with upcoming slots."""
    criteria = FilterCriteria(
        keyword=keyword,
        category=category,
        subcategories=frozenset(subcategories or ()),
        monthly=monthly,
        single_course=single_course,
        online=online,
        in_person=in_person,
        areas=frozenset(areas or ()),
        all_dates=all_dates,
        start_date=start_date,
        end_date=end_date,
        monthly_buckets=frozenset(monthly_buckets or ()),
        single_course_buckets=frozenset(single_course_buckets or ()),
        min_price=min_price,
        max_price=max_price,
    )
    service = LessonService(db)
    return await service.search_lessons(criteria, sort, page)


@router.get("/filters", response_model=FilterOptions)
async def get_filter_options() -> FilterOptions:
    """Areas and price buckets the search accepts."""
    return FilterOptions()


@router.get("/{lesson_id}", response_model=LessonRecord)
async def get_lesson(db: DatabaseSession, lesson_id: int) -> LessonRecord:
    """Get a lesson with its instructor and slots."""
    service = LessonService(db)
    return await service.get_lesson(lesson_id)


@router.get("/{lesson_id}/availability", response_model=list[DayAvailability])
async def get_availability(db: DatabaseSession, lesson_id: int) -> list[DayAvailability]:
    """Bookable slots of a lesson, grouped by local date."""
    service = LessonService(db)
    grouped = await service.get_availability(lesson_id)
    return [DayAvailability(date=day, slots=day_slots) for day, day_slots in grouped.items()]


@router.patch("/{lesson_id}/status", response_model=LessonRecord)
async def change_status(db: DatabaseSession, lesson_id: int, body: LessonStatusUpdate) -> LessonRecord:
    service = LessonService(db)
    return await service.change_status(lesson_id, body.status)


@router.patch("/{lesson_id}/capacity", response_model=LessonRecord)
async def update_capacity(db: DatabaseSession, lesson_id: int, body: LessonCapacityUpdate) -> LessonRecord:
    service = LessonService(db)
    return await service.update_capacity(lesson_id, body.capacity)


@router.post(
    "/{lesson_id}/slots",
    response_model=list[BookingSlot],
    status_code=status.HTTP_201_CREATED,
)
async def commit_slots(db: DatabaseSession, lesson_id: int, draft: ScheduleDraft) -> list[BookingSlot]:
    """Store one published slot for every date selected in the draft."""
    service = LessonService(db)
    return await service.commit_slots(lesson_id, draft)

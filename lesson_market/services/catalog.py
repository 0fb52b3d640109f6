"""
Lesson catalog: filtering, sorting and paging of an in-memory lesson list.

Filtering is a conjunction of independent predicates, each one skipped while
its dimension is inactive. Everything here is pure and recomputed from scratch
whenever the criteria change.
"""

import math
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime, time

import pytz
from pydantic import BaseModel, ConfigDict

from lesson_market.core.config import settings
from lesson_market.core.enums import SlotStatus, SortMode
from lesson_market.core.timezone import get_timezone, to_local
from lesson_market.schemas.filters import (
    MONTHLY_PRICE_BUCKETS,
    SINGLE_COURSE_PRICE_BUCKETS,
    FilterCriteria,
    PriceBucket,
    Toggle,
)
from lesson_market.schemas.lesson import BookingSlot, LessonPage, LessonRecord

Predicate = Callable[[LessonRecord, FilterCriteria, pytz.BaseTzInfo], bool]

_MONTHLY = {bucket.id: bucket for bucket in MONTHLY_PRICE_BUCKETS}
_SINGLE_COURSE = {bucket.id: bucket for bucket in SINGLE_COURSE_PRICE_BUCKETS}


def _toggle_allows(toggle: Toggle, is_a: bool, is_b: bool) -> bool:
    """A lesson passes only if every side it belongs to is switched on."""
    if toggle is Toggle.NEITHER:
        return False
    if is_a and toggle is Toggle.ONLY_B:
        return False
    if is_b and toggle is Toggle.ONLY_A:
        return False
    return True


def match_keyword(lesson: LessonRecord, criteria: FilterCriteria, tz: pytz.BaseTzInfo) -> bool:
    keyword = criteria.keyword.strip().lower()
    if not keyword:
        return True
    return keyword in lesson.title.lower() or keyword in (lesson.description or "").lower()


def match_category(lesson: LessonRecord, criteria: FilterCriteria, tz: pytz.BaseTzInfo) -> bool:
    return criteria.category is None or lesson.category == criteria.category


def match_subcategory(lesson: LessonRecord, criteria: FilterCriteria, tz: pytz.BaseTzInfo) -> bool:
    if not criteria.subcategories:
        return True
    return lesson.subcategory in criteria.subcategories


def match_location_type(lesson: LessonRecord, criteria: FilterCriteria, tz: pytz.BaseTzInfo) -> bool:
    return _toggle_allows(criteria.location_types, lesson.is_online, lesson.is_in_person)


def match_lesson_type(lesson: LessonRecord, criteria: FilterCriteria, tz: pytz.BaseTzInfo) -> bool:
    return _toggle_allows(criteria.lesson_types, lesson.is_monthly, lesson.is_single_course)


def match_area(lesson: LessonRecord, criteria: FilterCriteria, tz: pytz.BaseTzInfo) -> bool:
    if not criteria.areas:
        return True
    # any selected area rules out lessons without a classroom
    if not lesson.is_in_person:
        return False
    return lesson.classroom_area in criteria.areas or lesson.classroom_city in criteria.areas


def match_date_range(lesson: LessonRecord, criteria: FilterCriteria, tz: pytz.BaseTzInfo) -> bool:
    date_range = criteria.date_range
    if date_range is None:
        return True
    start = datetime.combine(date_range[0], time.min)
    end = datetime.combine(date_range[1], time(23, 59, 59))
    return any(
        slot.status == SlotStatus.PUBLISHED and start <= to_local(slot.date_time_start, tz) <= end
        for slot in lesson.slots
    )


def _in_buckets(price: int, selected: Iterable[str], table: dict[str, PriceBucket]) -> bool:
    return any(bucket_id in table and table[bucket_id].contains(price) for bucket_id in selected)


def match_price_bucket(lesson: LessonRecord, criteria: FilterCriteria, tz: pytz.BaseTzInfo) -> bool:
    if lesson.is_monthly and criteria.monthly_buckets:
        return _in_buckets(lesson.price, criteria.monthly_buckets, _MONTHLY)
    if lesson.is_single_course and criteria.single_course_buckets:
        return _in_buckets(lesson.price, criteria.single_course_buckets, _SINGLE_COURSE)
    return True


def match_price_range(lesson: LessonRecord, criteria: FilterCriteria, tz: pytz.BaseTzInfo) -> bool:
    if criteria.min_price is not None and lesson.price < criteria.min_price:
        return False
    if criteria.max_price is not None and lesson.price > criteria.max_price:
        return False
    return True


PREDICATES: tuple[Predicate, ...] = (
    match_keyword,
    match_category,
    match_subcategory,
    match_location_type,
    match_lesson_type,
    match_area,
    match_date_range,
    match_price_bucket,
    match_price_range,
)


def matches(lesson: LessonRecord, criteria: FilterCriteria, tz: pytz.BaseTzInfo | None = None) -> bool:
    tz = tz or get_timezone()
    return all(predicate(lesson, criteria, tz) for predicate in PREDICATES)


def filter_lessons(
    lessons: Iterable[LessonRecord],
    criteria: FilterCriteria,
    tz: pytz.BaseTzInfo | None = None,
) -> list[LessonRecord]:
    tz = tz or get_timezone()
    return [lesson for lesson in lessons if matches(lesson, criteria, tz)]


def next_slot_start(lesson: LessonRecord, now: datetime) -> datetime | None:
    """Earliest published slot starting at or after `now`."""
    now = now if now.tzinfo else pytz.utc.localize(now)
    upcoming = [
        slot.date_time_start
        for slot in lesson.slots
        if slot.status == SlotStatus.PUBLISHED and slot.date_time_start >= now
    ]
    return min(upcoming, default=None)


def sort_lessons(
    lessons: Sequence[LessonRecord],
    mode: SortMode = SortMode.RECOMMENDED,
    now: datetime | None = None,
) -> list[LessonRecord]:
    """Order lessons for display. All modes are stable."""
    if mode == SortMode.POPULAR:
        return sorted(lessons, key=lambda lesson: -lesson.review_count)
    if mode == SortMode.PRICE_ASC:
        return sorted(lessons, key=lambda lesson: lesson.price)
    if mode == SortMode.RATING:
        return sorted(lessons, key=lambda lesson: -lesson.rating)
    if mode == SortMode.NEW:
        epoch = datetime.min.replace(tzinfo=pytz.utc)
        return sorted(lessons, key=lambda lesson: lesson.created_at or epoch, reverse=True)
    if mode == SortMode.DATE:
        now = now or datetime.now(pytz.utc)

        def by_next_slot(lesson: LessonRecord) -> tuple[bool, datetime]:
            start = next_slot_start(lesson, now)
            return start is None, start or now

        return sorted(lessons, key=by_next_slot)
    return sorted(lessons, key=lambda lesson: (not lesson.is_featured, -lesson.rating))


def paginate(items: Sequence[LessonRecord], page: int = 1, page_size: int | None = None) -> LessonPage:
    """1-based page slice. An empty result has zero pages."""
    page_size = page_size or settings.page_size
    page = max(1, page)
    total = len(items)
    offset = (page - 1) * page_size
    return LessonPage(
        items=list(items[offset : offset + page_size]),
        page=page,
        page_size=page_size,
        total=total,
        total_pages=math.ceil(total / page_size),
    )


def search(
    lessons: Iterable[LessonRecord],
    criteria: FilterCriteria,
    mode: SortMode = SortMode.RECOMMENDED,
    page: int = 1,
    page_size: int | None = None,
    now: datetime | None = None,
    tz: pytz.BaseTzInfo | None = None,
) -> LessonPage:
    """Filter, then sort, then page."""
    filtered = filter_lessons(lessons, criteria, tz)
    return paginate(sort_lessons(filtered, mode, now), page, page_size)


def group_bookable_slots(
    slots: Iterable[BookingSlot],
    now: datetime,
    tz: pytz.BaseTzInfo | None = None,
) -> dict[date, list[BookingSlot]]:
    """Bookable slots keyed by local start date, both levels in chronological order."""
    tz = tz or get_timezone()
    grouped: dict[date, list[BookingSlot]] = {}
    for slot in sorted(slots, key=lambda s: s.date_time_start):
        if slot.is_bookable(now):
            grouped.setdefault(to_local(slot.date_time_start, tz).date(), []).append(slot)
    return grouped


class CatalogState(BaseModel):
    """Per-session catalog view: criteria, sort mode and current page."""

    model_config = ConfigDict(frozen=True)

    criteria: FilterCriteria = FilterCriteria()
    sort: SortMode = SortMode.RECOMMENDED
    page: int = 1

    def update_criteria(self, **changes) -> "CatalogState":
        criteria = FilterCriteria.model_validate({**self.criteria.model_dump(), **changes})
        return self.model_copy(update={"criteria": criteria, "page": 1})

    def reset_criteria(self) -> "CatalogState":
        return self.model_copy(update={"criteria": FilterCriteria(), "page": 1})

    def set_sort(self, mode: SortMode) -> "CatalogState":
        return self.model_copy(update={"sort": mode, "page": 1})

    def go_to_page(self, page: int) -> "CatalogState":
        return self.model_copy(update={"page": max(1, page)})

    def render(self, lessons: Iterable[LessonRecord], now: datetime | None = None) -> LessonPage:
        return search(lessons, self.criteria, self.sort, self.page, now=now)

"""
Booking slot generation for lessons being authored.

An instructor picks dates on a calendar (one by one or a weekday at a time)
and a shared template of start time, duration, capacity, price and booking
deadline. Every selected date owns exactly one SlotDraft. All functions here
are pure: they take a ScheduleDraft and return a new one, so a caller never
sees the selected dates and the slots out of step.
"""

import calendar
from datetime import date, datetime, time, timedelta
from typing import Any, NamedTuple

import pytz

from lesson_market.core.timezone import combine_local, get_timezone, local_today, to_utc
from lesson_market.schemas.schedule import ScheduleDraft, SlotDraft, SlotTemplate, SlotWriteRecord


class Transition(NamedTuple):
    draft: ScheduleDraft
    applied: bool


def compute_end_time(start: datetime, duration_minutes: int) -> datetime:
    """Wall-clock end of a slot; stays in the same (naive local) representation."""
    return start + timedelta(minutes=duration_minutes)


def compute_deadline(start: datetime, deadline_days: int, deadline_time: time) -> datetime:
    """Booking closes `deadline_days` before the start date, at `deadline_time`."""
    return datetime.combine(start.date() - timedelta(days=deadline_days), deadline_time.replace(tzinfo=None))


def month_dates(year: int, month: int) -> list[date]:
    _, days = calendar.monthrange(year, month)
    return [date(year, month, day) for day in range(1, days + 1)]


def sunday_weekday(day: date) -> int:
    """Weekday index with 0=Sunday ... 6=Saturday, the calendar widget's convention."""
    return (day.weekday() + 1) % 7


def slot_from_template(day: date, template: SlotTemplate) -> SlotDraft:
    end = compute_end_time(combine_local(day, template.start_time), template.duration)
    return SlotDraft(
        day=day,
        start_time=template.start_time,
        end_time=end.time(),
        capacity=template.capacity,
        price=0 if template.is_free_trial else template.price,
        discount=template.discount,
        deadline_days=template.deadline_days,
        deadline_time=template.deadline_time,
        notes=template.notes,
        venue_details=template.venue_details,
        is_free_trial=template.is_free_trial,
    )


def _replace(draft: ScheduleDraft, slots: dict[date, SlotDraft], **changes: Any) -> ScheduleDraft:
    return draft.model_copy(update={"slots": slots, "selected_dates": tuple(sorted(slots)), **changes})


def _today(today: date | None) -> date:
    return today if today is not None else local_today()


def toggle_date(draft: ScheduleDraft, day: date, today: date | None = None) -> Transition:
    """Deselect a selected date (dropping its slot) or select it with a slot from the template."""
    slots = dict(draft.slots)
    if day in slots:
        del slots[day]
        return Transition(_replace(draft, slots), True)
    if day < _today(today):
        return Transition(draft, False)
    slots[day] = slot_from_template(day, draft.template)
    return Transition(_replace(draft, slots), True)


def toggle_weekday(
    draft: ScheduleDraft,
    weekday: int,
    month: int,
    year: int,
    today: date | None = None,
) -> Transition:
    """
    Check or uncheck a weekday (0=Sunday) for one calendar month.

    Checking selects every non-past matching date of the month, keeping slots
    that already exist. Unchecking drops every non-past matching date.
    """
    today = _today(today)
    weekdays = set(draft.selected_weekdays)
    checking = weekday not in weekdays
    if checking:
        weekdays.add(weekday)
    else:
        weekdays.discard(weekday)

    slots = dict(draft.slots)
    for day in month_dates(year, month):
        if day < today or sunday_weekday(day) != weekday:
            continue
        if checking:
            if day not in slots:
                slots[day] = slot_from_template(day, draft.template)
        else:
            slots.pop(day, None)
    return Transition(_replace(draft, slots, selected_weekdays=tuple(sorted(weekdays))), True)


def apply_template_to_all(draft: ScheduleDraft) -> Transition:
    """Overwrite every slot with the template, keeping only its date. Not applied when nothing is selected."""
    if not draft.selected_dates:
        return Transition(draft, False)
    slots = {day: slot_from_template(day, draft.template) for day in draft.slots}
    return Transition(_replace(draft, slots), True)


def edit_slot(draft: ScheduleDraft, day: date, **overrides: Any) -> Transition:
    """Merge per-slot overrides; a missing slot is created from the template first."""
    slots = dict(draft.slots)
    current = slots.get(day) or slot_from_template(day, draft.template)
    changes = {key: value for key, value in overrides.items() if value is not None}
    slots[day] = SlotDraft.model_validate({**current.model_dump(), **changes, "day": day})
    return Transition(_replace(draft, slots), True)


def remove_slot(draft: ScheduleDraft, day: date) -> Transition:
    if day not in draft.slots:
        return Transition(draft, False)
    slots = dict(draft.slots)
    del slots[day]
    return Transition(_replace(draft, slots), True)


def update_template(draft: ScheduleDraft, **changes: Any) -> Transition:
    """Change template fields; existing slots keep their values until apply_template_to_all."""
    changes = {key: value for key, value in changes.items() if value is not None}
    if not changes:
        return Transition(draft, False)
    template = SlotTemplate.model_validate({**draft.template.model_dump(), **changes})
    return Transition(draft.model_copy(update={"template": template}), True)


def build_slot_records(
    draft: ScheduleDraft,
    lesson_id: int,
    tz: pytz.BaseTzInfo | None = None,
) -> list[SlotWriteRecord]:
    """Turn a draft into rows for the slot store, ordered by date."""
    tz = tz or get_timezone()
    records = []
    for day in draft.selected_dates:
        slot = draft.slots[day]
        start = combine_local(day, slot.start_time)
        end = combine_local(day, slot.end_time)
        if end <= start:
            # slot runs past midnight
            end += timedelta(days=1)
        deadline = min(compute_deadline(start, slot.deadline_days, slot.deadline_time), start)
        records.append(
            SlotWriteRecord(
                lesson_id=lesson_id,
                date_time_start=to_utc(start, tz),
                date_time_end=to_utc(end, tz),
                booking_deadline=to_utc(deadline, tz),
                capacity=max(1, slot.capacity),
                price=0 if slot.is_free_trial else max(0, slot.price),
                discount_percentage=min(100, slot.discount) or None,
                venue_details=slot.venue_details or None,
                notes=slot.notes or None,
            )
        )
    return records

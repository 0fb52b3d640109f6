import random
from datetime import date, datetime, time, timedelta

import pytest
import pytz
from freezegun import freeze_time
from pydantic import ValidationError

from lesson_market.core.timezone import local_today
from lesson_market.schemas import ScheduleDraft, SlotTemplate
from lesson_market.services import slots

TODAY = date(2025, 6, 1)
TOKYO = pytz.timezone("Asia/Tokyo")


@pytest.fixture
def draft() -> ScheduleDraft:
    template = SlotTemplate(
        start_time=time(10, 0),
        duration=60,
        capacity=8,
        price=3000,
        deadline_days=1,
        deadline_time=time(18, 0),
    )
    return ScheduleDraft(template=template)


class TestPureHelpers:
    def test_end_time_keeps_wall_clock(self):
        start = datetime(2025, 6, 10, 10, 0)
        assert slots.compute_end_time(start, 60) == datetime(2025, 6, 10, 11, 0)
        assert slots.compute_end_time(start, 0).tzinfo is None

    def test_end_time_crosses_midnight(self):
        assert slots.compute_end_time(datetime(2025, 6, 10, 23, 30), 90) == datetime(2025, 6, 11, 1, 0)

    def test_end_time_across_dst_change_is_wall_clock(self):
        # 2025-03-09 is a DST switch in New York; naive arithmetic ignores it
        start = datetime(2025, 3, 9, 1, 30)
        assert slots.compute_end_time(start, 60) == datetime(2025, 3, 9, 2, 30)

    def test_deadline_uses_days_before_and_fixed_time(self):
        start = datetime(2025, 6, 10, 10, 0)
        assert slots.compute_deadline(start, 1, time(18, 0)) == datetime(2025, 6, 9, 18, 0)
        assert slots.compute_deadline(start, 3, time(9, 15)) == datetime(2025, 6, 7, 9, 15)

    def test_deadline_crosses_month(self):
        assert slots.compute_deadline(datetime(2025, 7, 1, 10, 0), 2, time(12, 0)) == datetime(2025, 6, 29, 12, 0)

    def test_sunday_weekday(self):
        assert slots.sunday_weekday(date(2025, 6, 1)) == 0  # Sunday
        assert slots.sunday_weekday(date(2025, 6, 7)) == 6  # Saturday

    def test_month_dates(self):
        assert len(slots.month_dates(2024, 2)) == 29
        assert slots.month_dates(2025, 6)[-1] == date(2025, 6, 30)


class TestToggleDate:
    def test_generated_slot_from_template(self, draft: ScheduleDraft):
        new, applied = slots.toggle_date(draft, date(2025, 6, 10), today=TODAY)

        assert applied is True
        assert new.selected_dates == (date(2025, 6, 10),)
        slot = new.slots[date(2025, 6, 10)]
        assert slot.start_time == time(10, 0)
        assert slot.end_time == time(11, 0)
        assert slot.capacity == 8
        assert slot.price == 3000
        assert slot.deadline_days == 1
        assert slot.deadline_time == time(18, 0)

    def test_toggle_twice_restores_draft(self, draft: ScheduleDraft):
        once, _ = slots.toggle_date(draft, date(2025, 6, 10), today=TODAY)
        twice, applied = slots.toggle_date(once, date(2025, 6, 10), today=TODAY)

        assert applied is True
        assert twice.selected_dates == draft.selected_dates
        assert twice.slots == {}

    def test_past_date_is_noop(self, draft: ScheduleDraft):
        new, applied = slots.toggle_date(draft, date(2025, 5, 31), today=TODAY)

        assert applied is False
        assert new == draft

    def test_today_is_allowed(self, draft: ScheduleDraft):
        new, applied = slots.toggle_date(draft, TODAY, today=TODAY)
        assert applied is True
        assert TODAY in new.slots

    def test_past_selected_date_can_still_be_deselected(self, draft: ScheduleDraft):
        selected, _ = slots.toggle_date(draft, date(2025, 6, 10), today=TODAY)
        new, applied = slots.toggle_date(selected, date(2025, 6, 10), today=date(2025, 6, 20))
        assert applied is True
        assert new.slots == {}

    def test_free_trial_slot_is_free(self, draft: ScheduleDraft):
        trial, _ = slots.update_template(draft, is_free_trial=True)
        new, _ = slots.toggle_date(trial, date(2025, 6, 10), today=TODAY)
        assert new.slots[date(2025, 6, 10)].price == 0

    def test_default_today_follows_configured_zone(self, draft: ScheduleDraft):
        # 2025-06-09 20:00 UTC is already 2025-06-10 in Tokyo
        with freeze_time("2025-06-09 20:00:00"):
            assert local_today(TOKYO) == date(2025, 6, 10)
            _, applied = slots.toggle_date(draft, date(2025, 6, 9))
        assert applied is False

    def test_selection_stays_sorted(self, draft: ScheduleDraft):
        for day in (date(2025, 6, 20), date(2025, 6, 3), date(2025, 6, 11)):
            draft, _ = slots.toggle_date(draft, day, today=TODAY)
        assert draft.selected_dates == (date(2025, 6, 3), date(2025, 6, 11), date(2025, 6, 20))


class TestToggleWeekday:
    def test_every_sunday_of_june(self, draft: ScheduleDraft):
        new, applied = slots.toggle_weekday(draft, 0, 6, 2025, today=TODAY)

        sundays = (date(2025, 6, 1), date(2025, 6, 8), date(2025, 6, 15), date(2025, 6, 22), date(2025, 6, 29))
        assert applied is True
        assert new.selected_dates == sundays
        assert set(new.slots) == set(sundays)
        assert new.selected_weekdays == (0,)

    def test_skips_past_dates(self, draft: ScheduleDraft):
        new, _ = slots.toggle_weekday(draft, 0, 6, 2025, today=date(2025, 6, 16))
        assert new.selected_dates == (date(2025, 6, 22), date(2025, 6, 29))

    def test_uncheck_removes_dates(self, draft: ScheduleDraft):
        checked, _ = slots.toggle_weekday(draft, 3, 6, 2025, today=TODAY)
        unchecked, _ = slots.toggle_weekday(checked, 3, 6, 2025, today=TODAY)

        assert unchecked.selected_dates == ()
        assert unchecked.slots == {}
        assert unchecked.selected_weekdays == ()

    def test_keeps_edited_slot_of_already_selected_date(self, draft: ScheduleDraft):
        edited, _ = slots.edit_slot(draft, date(2025, 6, 8), capacity=2)
        new, _ = slots.toggle_weekday(edited, 0, 6, 2025, today=TODAY)

        assert new.slots[date(2025, 6, 8)].capacity == 2
        assert new.slots[date(2025, 6, 15)].capacity == 8

    def test_other_dates_untouched(self, draft: ScheduleDraft):
        single, _ = slots.toggle_date(draft, date(2025, 6, 10), today=TODAY)
        checked, _ = slots.toggle_weekday(single, 0, 6, 2025, today=TODAY)
        unchecked, _ = slots.toggle_weekday(checked, 0, 6, 2025, today=TODAY)
        assert unchecked.selected_dates == (date(2025, 6, 10),)


class TestTemplateAndEdits:
    def test_apply_template_with_nothing_selected(self, draft: ScheduleDraft):
        new, applied = slots.apply_template_to_all(draft)
        assert applied is False
        assert new == draft

    def test_apply_template_overwrites_every_slot(self, draft: ScheduleDraft):
        for day in (date(2025, 6, 10), date(2025, 6, 12)):
            draft, _ = slots.toggle_date(draft, day, today=TODAY)
        draft, _ = slots.edit_slot(draft, date(2025, 6, 10), price=500, notes="bring a pencil")
        draft, _ = slots.update_template(draft, start_time=time(14, 30), duration=90, price=4000)

        # template change alone does not touch existing slots
        assert draft.slots[date(2025, 6, 12)].price == 3000

        new, applied = slots.apply_template_to_all(draft)
        assert applied is True
        for day, slot in new.slots.items():
            assert slot.day == day
            assert slot.start_time == time(14, 30)
            assert slot.end_time == time(16, 0)
            assert slot.price == 4000
            assert slot.notes == ""

    def test_edit_slot_merges_overrides(self, draft: ScheduleDraft):
        draft, _ = slots.toggle_date(draft, date(2025, 6, 10), today=TODAY)
        new, applied = slots.edit_slot(draft, date(2025, 6, 10), capacity=3, venue_details="Room B", notes=None)

        slot = new.slots[date(2025, 6, 10)]
        assert applied is True
        assert slot.capacity == 3
        assert slot.venue_details == "Room B"
        assert slot.price == 3000

    def test_edit_missing_slot_inserts_and_selects(self, draft: ScheduleDraft):
        new, _ = slots.edit_slot(draft, date(2025, 6, 10), price=1000)
        assert new.selected_dates == (date(2025, 6, 10),)
        assert new.slots[date(2025, 6, 10)].price == 1000

    def test_remove_slot(self, draft: ScheduleDraft):
        draft, _ = slots.toggle_date(draft, date(2025, 6, 10), today=TODAY)
        new, applied = slots.remove_slot(draft, date(2025, 6, 10))
        assert applied is True
        assert new.selected_dates == ()
        assert new.slots == {}

    def test_remove_unknown_slot(self, draft: ScheduleDraft):
        new, applied = slots.remove_slot(draft, date(2025, 6, 10))
        assert applied is False
        assert new == draft

    def test_update_template_without_changes(self, draft: ScheduleDraft):
        _, applied = slots.update_template(draft, price=None)
        assert applied is False


class TestConsistency:
    def test_random_action_sequences_keep_dates_and_slots_paired(self, draft: ScheduleDraft):
        rng = random.Random(7)
        days = slots.month_dates(2025, 6)
        for _ in range(300):
            action = rng.randrange(5)
            day = rng.choice(days)
            if action == 0:
                draft, _ = slots.toggle_date(draft, day, today=TODAY)
            elif action == 1:
                draft, _ = slots.toggle_weekday(draft, rng.randrange(7), 6, 2025, today=TODAY)
            elif action == 2:
                draft, _ = slots.apply_template_to_all(draft)
            elif action == 3:
                draft, _ = slots.edit_slot(draft, day, capacity=rng.randint(1, 20))
            else:
                draft, _ = slots.remove_slot(draft, day)
            assert draft.is_consistent()

    def test_selected_date_without_slot_rejected(self):
        with pytest.raises(ValidationError):
            ScheduleDraft(selected_dates=(date(2025, 6, 10),))

    def test_slot_without_selected_date_rejected(self, draft: ScheduleDraft):
        slot = slots.slot_from_template(date(2025, 6, 10), draft.template)
        with pytest.raises(ValidationError):
            ScheduleDraft(slots={date(2025, 6, 10): slot})

    def test_slot_filed_under_another_date_rejected(self, draft: ScheduleDraft):
        slot = slots.slot_from_template(date(2025, 6, 11), draft.template)
        with pytest.raises(ValidationError):
            ScheduleDraft(selected_dates=(date(2025, 6, 10),), slots={date(2025, 6, 10): slot})

    def test_duplicate_selected_date_rejected(self, draft: ScheduleDraft):
        slot = slots.slot_from_template(date(2025, 6, 10), draft.template)
        with pytest.raises(ValidationError):
            ScheduleDraft(selected_dates=(date(2025, 6, 10), date(2025, 6, 10)), slots={date(2025, 6, 10): slot})


class TestSlotRecords:
    def test_records_localized_to_configured_zone(self, draft: ScheduleDraft):
        draft, _ = slots.toggle_date(draft, date(2025, 6, 10), today=TODAY)
        [record] = slots.build_slot_records(draft, lesson_id=42, tz=TOKYO)

        assert record.lesson_id == 42
        assert record.date_time_start == datetime(2025, 6, 10, 1, 0, tzinfo=pytz.utc)
        assert record.date_time_end == datetime(2025, 6, 10, 2, 0, tzinfo=pytz.utc)
        assert record.booking_deadline == datetime(2025, 6, 9, 9, 0, tzinfo=pytz.utc)
        assert record.date_time_start.astimezone(TOKYO).hour == 10
        assert record.current_participants_count == 0
        assert record.status.value == "published"
        assert record.discount_percentage is None
        assert record.notes is None
        assert record.venue_details is None

    def test_same_day_deadline_is_clamped_to_start(self, draft: ScheduleDraft):
        draft, _ = slots.update_template(draft, deadline_days=0, deadline_time=time(20, 0))
        draft, _ = slots.toggle_date(draft, date(2025, 6, 10), today=TODAY)
        [record] = slots.build_slot_records(draft, lesson_id=1, tz=TOKYO)
        assert record.booking_deadline == record.date_time_start

    def test_slot_past_midnight_ends_next_day(self, draft: ScheduleDraft):
        draft, _ = slots.update_template(draft, start_time=time(23, 0), duration=120)
        draft, _ = slots.toggle_date(draft, date(2025, 6, 10), today=TODAY)
        [record] = slots.build_slot_records(draft, lesson_id=1, tz=TOKYO)
        assert record.date_time_end.astimezone(TOKYO).replace(tzinfo=None) == datetime(2025, 6, 11, 1, 0)

    def test_day_long_slot_keeps_its_length(self, draft: ScheduleDraft):
        draft, _ = slots.update_template(draft, duration=24 * 60)
        draft, _ = slots.toggle_date(draft, date(2025, 6, 10), today=TODAY)
        [record] = slots.build_slot_records(draft, lesson_id=1, tz=TOKYO)
        assert record.date_time_end - record.date_time_start == timedelta(hours=24)

    def test_duration_longer_than_a_day_rejected(self, draft: ScheduleDraft):
        with pytest.raises(ValidationError):
            slots.update_template(draft, duration=1500)
        with pytest.raises(ValidationError):
            SlotTemplate(duration=1500)

    def test_records_ordered_and_discount_kept(self, draft: ScheduleDraft):
        draft, _ = slots.update_template(draft, discount=15)
        for day in (date(2025, 6, 20), date(2025, 6, 5)):
            draft, _ = slots.toggle_date(draft, day, today=TODAY)
        records = slots.build_slot_records(draft, lesson_id=1, tz=TOKYO)
        assert [r.date_time_start.astimezone(TOKYO).date() for r in records] == [date(2025, 6, 5), date(2025, 6, 20)]
        assert all(r.discount_percentage == 15 for r in records)

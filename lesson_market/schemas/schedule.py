from datetime import date, datetime, time
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from lesson_market.core.config import settings
from lesson_market.core.enums import SlotStatus

# end time is kept as a time of day, a slot may run past midnight at most once
MAX_DURATION = 24 * 60


class SlotTemplate(BaseModel):
    """Schedule and pricing defaults shared by every selected date."""

    model_config = ConfigDict(frozen=True)

    start_time: time = settings.default_start_time
    duration: int = Field(settings.default_duration, ge=1, le=MAX_DURATION)
    capacity: int = Field(settings.default_capacity, ge=1)
    price: int = Field(0, ge=0)
    discount: int = Field(0, ge=0, le=100)
    deadline_days: int = Field(settings.default_deadline_days, ge=0)
    deadline_time: time = settings.default_deadline_time
    notes: str = ""
    venue_details: str = ""
    is_free_trial: bool = False


class SlotDraft(BaseModel):
    """Pending slot for one selected date, not yet stored."""

    model_config = ConfigDict(frozen=True)

    day: date
    start_time: time
    end_time: time
    capacity: int = Field(ge=1)
    price: int = Field(ge=0)
    discount: int = Field(0, ge=0, le=100)
    deadline_days: int = Field(ge=0)
    deadline_time: time
    notes: str = ""
    venue_details: str = ""
    is_free_trial: bool = False


class ScheduleDraft(BaseModel):
    """Selected dates of a lesson being authored and the slot drafted for each."""

    model_config = ConfigDict(frozen=True)

    selected_dates: tuple[date, ...] = ()
    selected_weekdays: tuple[int, ...] = ()
    slots: dict[date, SlotDraft] = Field(default_factory=dict)
    template: SlotTemplate = Field(default_factory=SlotTemplate)

    @model_validator(mode="after")
    def check_pairing(self) -> "ScheduleDraft":
        if not self.is_consistent():
            raise ValueError("selected_dates must list each date of slots exactly once")
        if any(slot.day != day for day, slot in self.slots.items()):
            raise ValueError("slot day must match its date key")
        return self

    def is_consistent(self) -> bool:
        return set(self.selected_dates) == set(self.slots) and len(set(self.selected_dates)) == len(
            self.selected_dates
        )


class SlotWriteRecord(BaseModel):
    """Row written to the slot store when a draft is committed."""

    lesson_id: int
    date_time_start: datetime
    date_time_end: datetime
    booking_deadline: datetime
    capacity: int
    current_participants_count: int = 0
    price: int
    discount_percentage: int | None = None
    venue_details: str | None = None
    notes: str | None = None
    status: SlotStatus = SlotStatus.PUBLISHED


class SlotOverrides(BaseModel):
    """Partial per-slot edit; unset fields keep their value."""

    start_time: time | None = None
    end_time: time | None = None
    capacity: int | None = Field(None, ge=1)
    price: int | None = Field(None, ge=0)
    discount: int | None = Field(None, ge=0, le=100)
    deadline_days: int | None = Field(None, ge=0)
    deadline_time: time | None = None
    notes: str | None = None
    venue_details: str | None = None


class TemplateChanges(BaseModel):
    start_time: time | None = None
    duration: int | None = Field(None, ge=1, le=MAX_DURATION)
    capacity: int | None = Field(None, ge=1)
    price: int | None = Field(None, ge=0)
    discount: int | None = Field(None, ge=0, le=100)
    deadline_days: int | None = Field(None, ge=0)
    deadline_time: time | None = None
    notes: str | None = None
    venue_details: str | None = None
    is_free_trial: bool | None = None


class ToggleDateAction(BaseModel):
    type: Literal["toggle_date"]
    day: date


class ToggleWeekdayAction(BaseModel):
    type: Literal["toggle_weekday"]
    weekday: int = Field(..., ge=0, le=6, description="0=Sunday, 6=Saturday")
    month: int = Field(..., ge=1, le=12)
    year: int


class ApplyTemplateAction(BaseModel):
    type: Literal["apply_template"]


class EditSlotAction(BaseModel):
    type: Literal["edit_slot"]
    day: date
    overrides: SlotOverrides


class RemoveSlotAction(BaseModel):
    type: Literal["remove_slot"]
    day: date


class UpdateTemplateAction(BaseModel):
    type: Literal["update_template"]
    changes: TemplateChanges


DraftAction = Annotated[
    ToggleDateAction
    | ToggleWeekdayAction
    | ApplyTemplateAction
    | EditSlotAction
    | RemoveSlotAction
    | UpdateTemplateAction,
    Field(discriminator="type"),
]


class DraftRequest(BaseModel):
    draft: ScheduleDraft = Field(default_factory=ScheduleDraft)
    action: DraftAction


class DraftResponse(BaseModel):
    draft: ScheduleDraft
    applied: bool
